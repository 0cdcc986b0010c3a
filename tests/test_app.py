import html
import io
import re
from types import SimpleNamespace

import pytest

from hrms_portal.auth.model import SessionUser
from hrms_portal.companies.salary_template import default_salary_template_config
from hrms_portal.core.enums import Role
from hrms_portal.core.exceptions import ApiNoResponseError, AuthenticationError, NotFoundError, ValidationError
from hrms_portal.dashboard.model import DashboardReport
from hrms_portal.main import create_app
from hrms_portal.payroll.model import PayrollCalculation
from hrms_portal.payroll.service import PayrollService, admin_input_name

CALCULATION = {
    "companyId": "c1",
    "companyName": "Acme Security",
    "payrollMonth": "2025-03",
    "totalEmployees": 2,
    "payrollResults": [
        {"employeeId": "e1", "employeeName": "Ravi", "presentDays": 26, "salary": {"grossSalary": 18000, "netSalary": 16000}},
        {"employeeId": "e2", "employeeName": "Asha", "presentDays": 0, "salary": {}, "error": "No attendance found"},
    ],
}


class FakeAuth:
    def login(self, email, password):
        if password != "secret123":
            raise AuthenticationError("Invalid email or password")
        return SessionUser(user_id="u1", name="Priya", email=email, role=Role.HR, department_id=None)


class FakeEmployees:
    def __init__(self):
        self.created = []
        self.error = None

    def get(self, employee_id):
        raise NotFoundError(f"Employee {employee_id} not found")

    def create(self, form, files):
        if self.error:
            raise self.error
        photo = files.get("photo")
        self.created.append((form.get("firstName"), photo.filename if photo else None))
        return SimpleNamespace(id="e9")


class FakeDashboard:
    def __init__(self):
        self.error = None

    def report(self, days_ahead):
        if self.error:
            raise self.error
        return DashboardReport.from_api({"employeeStats": {"byDepartment": [{"departmentName": "Security", "count": 3}]}})


class FakeAttendance:
    def __init__(self):
        self.error = None
        self.imported = []

    def check_attendance_exists(self, employee_id, month):
        if self.error:
            raise self.error
        return employee_id == "e1" and month == "2025-03"

    def import_excel(self, company_id, month, upload):
        self.imported.append((company_id, month, upload.filename, upload.stream.read()))
        parsed = SimpleNamespace(rows=[{"employeeId": "e1"}, {"employeeId": "e2"}])
        return parsed, SimpleNamespace(created=1, failed=1, errors=["Row 3: employee e2 is not active"])


class FakeCompanies:
    def all_companies(self):
        return []

    def get(self, company_id):
        return SimpleNamespace(id=company_id, name="Acme Security", salary_template_config=None)

    def employees(self, company_id):
        return [
            SimpleNamespace(id="e1", employee_id="EMP001", full_name="Ravi Kumar"),
            SimpleNamespace(id="e2", employee_id="EMP002", full_name="Asha Rao"),
        ]

    def template_config(self, company):
        return default_salary_template_config()


class FakeLookups:
    def list_all(self):
        return []

    def employee_departments(self):
        return []


class InMemoryPayroll:
    def __init__(self):
        self.calculated = []
        self.finalized = []

    def calculate(self, payload):
        self.calculated.append(payload)
        return PayrollCalculation.from_api(CALCULATION)

    def finalize(self, payload):
        self.finalized.append(payload)
        return {}

    def by_month(self, company_id, month):
        return None


@pytest.fixture
def payroll_repo():
    return InMemoryPayroll()


@pytest.fixture
def services(payroll_repo):
    return SimpleNamespace(
        auth_service=FakeAuth(),
        employee_service=FakeEmployees(),
        dashboard_service=FakeDashboard(),
        attendance_service=FakeAttendance(),
        company_service=FakeCompanies(),
        department_service=FakeLookups(),
        designation_service=FakeLookups(),
        payroll_service=PayrollService(payroll_repo),
        salary_schedule_service=None,
    )


@pytest.fixture
def client(services):
    app = create_app({"SECRET_KEY": "test-secret", "TESTING": True, "COMPANY_BRAND_NAME": "Test Brand"}, container=services)
    return app.test_client()


def sign_in(client):
    with client.session_transaction() as s:
        s["user_id"] = "u1"
        s["name"] = "Priya"


def test_pages_require_login(client):
    response = client.get("/dashboard")
    assert response.status_code == 302
    assert "/login?next=" in response.headers["Location"]


def test_login_stores_user_and_follows_next(client):
    response = client.post("/login?next=/employees", data={"email": "hr@example.com", "password": "secret123"})
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/employees")
    with client.session_transaction() as s:
        assert s["user_id"] == "u1"
        assert s["role"] == "HR"


def test_login_rejects_external_next(client):
    response = client.post("/login?next=//evil.test", data={"email": "hr@example.com", "password": "secret123"})
    assert response.headers["Location"].endswith("/dashboard")


def test_failed_login_shows_message(client):
    response = client.post("/login", data={"email": "hr@example.com", "password": "wrong-pass"})
    assert response.status_code == 200
    assert b"Invalid email or password" in response.data
    with client.session_transaction() as s:
        assert "user_id" not in s


def test_missing_employee_renders_404(client):
    sign_in(client)
    response = client.get("/employees/e404")
    assert response.status_code == 404
    assert b"Employee e404 not found" in response.data


def test_chart_data(client):
    sign_in(client)
    response = client.get("/api/dashboard/charts")
    assert response.status_code == 200
    assert response.get_json()["departments"] == {"labels": ["Security"], "values": [3]}


def test_chart_data_when_backend_is_down(client, services):
    sign_in(client)
    services.dashboard_service.error = ApiNoResponseError("connection refused")
    response = client.get("/api/dashboard/charts")
    assert response.status_code == 502
    assert response.get_json()["error"]


def test_attendance_exists(client):
    sign_in(client)
    assert client.get("/api/attendance/exists?employeeId=e1&month=2025-03").get_json() == {"exists": True}
    assert client.get("/api/attendance/exists?employeeId=e2&month=2025-03").get_json() == {"exists": False}


def test_expired_session_goes_back_to_login(client, services):
    sign_in(client)
    services.attendance_service.error = AuthenticationError("Session expired")
    response = client.get("/api/attendance/exists?employeeId=e1&month=2025-03")
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/login")
    with client.session_transaction() as s:
        assert "user_id" not in s


def hidden_calculation(page: bytes) -> str:
    match = re.search(r'name="calculation" value="([^"]*)"', page.decode())
    assert match, "review page has no calculation field"
    return html.unescape(match.group(1))


def test_calculate_review_then_finalize_payroll(client, payroll_repo):
    sign_in(client)
    response = client.post(
        "/payroll/calculate",
        data={"companyId": "c1", "month": "2025-03", admin_input_name("e1", "bonus"): "500"},
    )
    assert response.status_code == 200
    assert b"Acme Security" in response.data
    assert payroll_repo.calculated == [
        {"companyId": "c1", "payrollMonth": "2025-03", "adminInputs": {"e1": {"bonus": 500.0}}}
    ]

    response = client.post("/payroll/finalize", data={"calculation": hidden_calculation(response.data)})
    assert response.status_code == 302
    assert "/payroll/reports" in response.headers["Location"]
    assert "companyId=c1" in response.headers["Location"]
    assert payroll_repo.finalized == [
        {
            "companyId": "c1",
            "payrollMonth": "2025-03",
            "payrollRecords": [{"employeeId": "e1", "salary": {"grossSalary": 18000, "netSalary": 16000}}],
        }
    ]


def test_calculate_payroll_rejects_bad_admin_input(client, payroll_repo):
    sign_in(client)
    response = client.post(
        "/payroll/calculate",
        data={"companyId": "c1", "month": "2025-03", admin_input_name("e1", "bonus"): "nan"},
        follow_redirects=True,
    )
    assert response.status_code == 200
    assert b"must be a number" in response.data
    assert payroll_repo.calculated == []


def test_finalize_with_tampered_calculation_goes_back(client, payroll_repo):
    sign_in(client)
    response = client.post("/payroll/finalize", data={"calculation": "{not json"})
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/payroll")
    assert payroll_repo.finalized == []


def test_import_attendance_upload(client, services):
    sign_in(client)
    response = client.post(
        "/attendance/import",
        data={"companyId": "c1", "month": "2025-03", "file": (io.BytesIO(b"xlsx-bytes"), "march.xlsx")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 302
    assert "companyId=c1" in response.headers["Location"]
    assert services.attendance_service.imported == [("c1", "2025-03", "march.xlsx", b"xlsx-bytes")]
    with client.session_transaction() as s:
        messages = [message for _category, message in s["_flashes"]]
    assert messages == ["Imported 2 row(s): 1 created, 1 failed", "Row 3: employee e2 is not active"]


def test_add_employee_redirects_to_profile(client, services):
    sign_in(client)
    response = client.post(
        "/employees/add",
        data={"firstName": "Ravi", "lastName": "Kumar", "photo": (io.BytesIO(b"jpeg"), "ravi.jpg")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/employees/e9")
    assert services.employee_service.created == [("Ravi", "ravi.jpg")]


def test_add_employee_shows_field_errors(client, services):
    sign_in(client)
    services.employee_service.error = ValidationError(errors={"lastName": "Last name is required"})
    response = client.post("/employees/add", data={"firstName": "Ravi"})
    assert response.status_code == 200
    assert b"Last name is required" in response.data
    assert b'value="Ravi"' in response.data


def test_unexpected_error_renders_page_without_flash(client, services):
    sign_in(client)
    services.dashboard_service.error = RuntimeError("boom")
    response = client.get("/api/dashboard/charts")
    assert response.status_code == 500
    assert b"An unexpected error occurred." in response.data
    with client.session_transaction() as s:
        assert "_flashes" not in s
