SECRET_KEY = "test-secret"

API_BASE_URL = "http://backend.test"
API_TIMEOUT = 5.0

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

SESSION_DAYS = 1
COMPANY_BRAND_NAME = "Test Brand"
MAX_UPLOAD_MB = 10
