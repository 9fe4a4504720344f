"""Employee Management System package.

Feature modules (employees, attendance, companies, ...) each carry a
domain model, a repository interface with a MySQL implementation, a
service layer and a thin Flask controller.
"""
