from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import requests

from .api.client import ApiClient, ApiConfig
from .api.tokens import SessionTokenStore, TokenStore
from .attendance.http_repository import HttpAttendanceRepository, HttpAttendanceSheetRepository
from .attendance.service import AttendanceService
from .auth.http_repository import HttpAuthRepository
from .auth.service import AuthService
from .companies.http_repository import HttpCompanyRepository
from .companies.service import CompanyService
from .dashboard.http_repository import HttpDashboardRepository
from .dashboard.service import DashboardService
from .departments.http_repository import HttpDepartmentRepository
from .departments.service import DepartmentService
from .designations.http_repository import HttpDesignationRepository
from .designations.service import DesignationService
from .employees.http_repository import HttpEmployeeRepository
from .employees.service import EmployeeService
from .payroll.http_repository import HttpPayrollRepository
from .payroll.service import PayrollService
from .salary_schedules.http_repository import HttpSalaryRateScheduleRepository
from .salary_schedules.service import SalaryRateScheduleService


@dataclass(frozen=True)
class Container:
    api_client: ApiClient
    tokens: TokenStore

    auth_repo: HttpAuthRepository
    employees_repo: HttpEmployeeRepository
    companies_repo: HttpCompanyRepository
    departments_repo: HttpDepartmentRepository
    designations_repo: HttpDesignationRepository
    attendance_repo: HttpAttendanceRepository
    attendance_sheets_repo: HttpAttendanceSheetRepository
    payroll_repo: HttpPayrollRepository
    salary_schedules_repo: HttpSalaryRateScheduleRepository
    dashboard_repo: HttpDashboardRepository

    auth_service: AuthService
    employee_service: EmployeeService
    company_service: CompanyService
    department_service: DepartmentService
    designation_service: DesignationService
    attendance_service: AttendanceService
    payroll_service: PayrollService
    salary_schedule_service: SalaryRateScheduleService
    dashboard_service: DashboardService


def build_container(
    *,
    settings: Mapping[str, Any],
    tokens: Optional[TokenStore] = None,
    session: Optional[requests.Session] = None,
) -> Container:
    tokens = tokens or SessionTokenStore()
    api_client = ApiClient(
        ApiConfig(base_url=str(settings["API_BASE_URL"]), timeout=float(settings.get("API_TIMEOUT", 20))),
        tokens,
        session=session,
    )

    auth_repo = HttpAuthRepository(api_client)
    employees_repo = HttpEmployeeRepository(api_client)
    companies_repo = HttpCompanyRepository(api_client)
    departments_repo = HttpDepartmentRepository(api_client)
    designations_repo = HttpDesignationRepository(api_client)
    attendance_repo = HttpAttendanceRepository(api_client)
    attendance_sheets_repo = HttpAttendanceSheetRepository(api_client)
    payroll_repo = HttpPayrollRepository(api_client)
    salary_schedules_repo = HttpSalaryRateScheduleRepository(api_client)
    dashboard_repo = HttpDashboardRepository(api_client)

    return Container(
        api_client=api_client,
        tokens=tokens,
        auth_repo=auth_repo,
        employees_repo=employees_repo,
        companies_repo=companies_repo,
        departments_repo=departments_repo,
        designations_repo=designations_repo,
        attendance_repo=attendance_repo,
        attendance_sheets_repo=attendance_sheets_repo,
        payroll_repo=payroll_repo,
        salary_schedules_repo=salary_schedules_repo,
        dashboard_repo=dashboard_repo,
        auth_service=AuthService(auth_repo, tokens),
        employee_service=EmployeeService(employees_repo),
        company_service=CompanyService(companies_repo),
        department_service=DepartmentService(departments_repo),
        designation_service=DesignationService(designations_repo),
        attendance_service=AttendanceService(
            attendance_repo,
            attendance_sheets_repo,
            max_upload_bytes=int(settings.get("MAX_UPLOAD_MB", 10)) * 1024 * 1024,
        ),
        payroll_service=PayrollService(payroll_repo),
        salary_schedule_service=SalaryRateScheduleService(salary_schedules_repo),
        dashboard_service=DashboardService(dashboard_repo, companies_repo),
    )
