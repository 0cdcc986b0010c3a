import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

API_BASE_URL = os.getenv("API_BASE_URL", "https://api.example.com")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "20"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
COMPANY_BRAND_NAME = os.getenv("COMPANY_BRAND_NAME", "Tulsyan Security Solutions")
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "10"))
