from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.geo import haversine_distance
from ..core.constants import PENDING_INVITATION_CODE


@dataclass(frozen=True)
class Geofence:
    """Circular area around the office where attendance actions are allowed."""

    latitude: float
    longitude: float
    radius_m: float

    def distance_to(self, latitude: float, longitude: float) -> float:
        return haversine_distance(latitude, longitude, self.latitude, self.longitude)

    def contains(self, latitude: float, longitude: float) -> bool:
        return self.distance_to(latitude, longitude) <= self.radius_m


@dataclass(frozen=True)
class Company:
    company_id: int
    name: str
    invitation_code: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius_m: Optional[int] = None

    @property
    def geofence(self) -> Optional[Geofence]:
        """The configured geofence, or None until all three values are set."""
        if self.latitude is None or self.longitude is None or self.radius_m is None:
            return None
        if self.radius_m <= 0:
            return None
        return Geofence(latitude=float(self.latitude), longitude=float(self.longitude), radius_m=float(self.radius_m))

    @property
    def has_invitation_code(self) -> bool:
        return bool(self.invitation_code) and self.invitation_code != PENDING_INVITATION_CODE
