"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PAGE_SIZE = 10
DEFAULT_DASHBOARD_DAYS_AHEAD = 30
MAX_PRESENT_DAYS = 31
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
MIN_PASSWORD_LENGTH = 6
MAX_DESIGNATION_NAME_LENGTH = 100

MOBILE_NUMBER_PATTERN = r"^\d{10}$"
AADHAAR_NUMBER_PATTERN = r"^\d{12}$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"

SPREADSHEET_EXTENSIONS = (".xlsx", ".xls")
XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Excel attendance import/template columns
ATTENDANCE_SHEET_HEADERS = ("Employee ID", "Employee Name", "Present Days Count")

# Endpoint of the token refresh call; never retried on 401
REFRESH_TOKEN_PATH = "/users/refresh-token"
