from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .client import GeminiClient

WELLNESS_PROMPT = (
    "Provide a concise and actionable wellness tip for employees in a corporate setting. "
    "The tip should be about mental health, work-life balance, or physical well-being at the desk. "
    "Keep it to 1-2 sentences."
)


@dataclass(frozen=True)
class TurnoverProfile:
    name: str
    job_title: str
    tenure_years: float
    rating: Optional[float] = None

    @property
    def rating_label(self) -> str:
        return f"{self.rating:g}" if self.rating is not None else "N/A"


class AssistService:
    """Text-generation helpers: wellness tips, review drafts, turnover narrative."""

    def __init__(self, client: GeminiClient):
        self._client = client

    def wellness_tip(self) -> str:
        return self._client.generate_text(WELLNESS_PROMPT).strip()

    def performance_feedback(self, employee_name: str, rating: float, previous_comments: Optional[str] = None) -> str:
        prompt = f"Generate a constructive performance review comment for {employee_name}."
        prompt += f"\nTheir performance rating is {rating:g} out of 5."
        if previous_comments:
            prompt += f'\nFor context, their previous review comment was: "{previous_comments}"'
        prompt += "\n\nThe feedback should be professional, encouraging, and provide at least one area for improvement."
        return self._client.generate_text(prompt).strip()

    def turnover_risk_report(self, profiles: Sequence[TurnoverProfile]) -> str:
        lines = "\n".join(
            f"- {p.name} (Job Title: {p.job_title}, Tenure: {p.tenure_years:.1f} years, "
            f"Last Rating: {p.rating_label}/5)"
            for p in profiles
        )
        prompt = (
            "Act as an expert HR analyst. Based on the following employee data, provide a brief turnover risk assessment.\n"
            "For each employee, identify their risk level (Low, Medium, High) and provide a 1-sentence justification.\n"
            "Finally, provide a 2-3 sentence summary of the overall team risk and suggest one proactive retention strategy.\n"
            "Format the output as clean markdown with headings.\n\n"
            f"Employee Data:\n{lines}"
        )
        return self._client.generate_text(prompt).strip()
