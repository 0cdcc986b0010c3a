import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# Backend REST API consumed by the portal
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:3000/api")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "20"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
COMPANY_BRAND_NAME = os.getenv("COMPANY_BRAND_NAME", "Tulsyan Security Solutions")
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "10"))
