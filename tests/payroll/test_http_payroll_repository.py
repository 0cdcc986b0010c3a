import pytest

from hrms_portal.core.exceptions import ApiResponseError
from hrms_portal.payroll.http_repository import HttpPayrollRepository


class FakeClient:
    def __init__(self, body=None, error=None):
        self.body = body
        self.error = error
        self.calls = []

    def get(self, path, params=None):
        self.calls.append((path, params))
        if self.error:
            raise self.error
        return self.body

    def post(self, path, payload):
        self.calls.append((path, payload))
        return self.body


def test_by_month_reads_records():
    client = FakeClient({"data": {"records": [{"id": "p1", "employeeId": "e1", "month": "2025-03"}]}})
    records = HttpPayrollRepository(client).by_month("c1", "2025-03")
    assert client.calls[0][0] == "/payroll/by-month/c1/2025-03"
    assert [r.id for r in records] == ["p1"]


def test_by_month_missing_is_none():
    client = FakeClient(error=ApiResponseError(404, {"message": "No payroll found"}))
    assert HttpPayrollRepository(client).by_month("c1", "2025-03") is None


def test_by_month_other_errors_propagate():
    client = FakeClient(error=ApiResponseError(500))
    with pytest.raises(ApiResponseError):
        HttpPayrollRepository(client).by_month("c1", "2025-03")


def test_calculate_keeps_requested_company():
    client = FakeClient({"data": {"payrollMonth": "2025-03", "payrollResults": []}})
    calculation = HttpPayrollRepository(client).calculate({"companyId": "c1", "payrollMonth": "2025-03"})
    assert calculation.company_id == "c1"
    assert calculation.total_employees == 0


def test_report_page():
    client = FakeClient({"data": {"records": [{"id": "p1"}, {"id": "p2"}], "total": 12}})
    page = HttpPayrollRepository(client).report({"page": 2, "limit": 10})
    assert [r.id for r in page.items] == ["p1", "p2"]
    assert page.page == 2
