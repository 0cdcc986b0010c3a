"""HRMS Portal package.

Flask front office for the HR/payroll backend. The package is organized by
feature modules (employees, companies, attendance, payroll, ...) with a thin
Flask controller layer over service/repository layers. Repositories talk to
the backend REST API; nothing is persisted locally.
"""

__version__ = "1.0.0"
