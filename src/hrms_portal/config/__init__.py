import os


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "hrms_portal.config.production"

    if env in {"test", "testing"}:
        return "hrms_portal.config.testing"

    return "hrms_portal.config.development"
