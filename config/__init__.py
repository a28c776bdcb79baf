import os

_ALIASES = {
    "prod": "production",
    "production": "production",
    "test": "testing",
    "testing": "testing",
    "dev": "development",
    "development": "development",
}


def get_settings_module(env: str | None = None) -> str:
    # APP_ENV chọn module cấu hình; giá trị lạ -> development
    name = (env or os.getenv("APP_ENV") or "development").strip().lower()
    return f"config.{_ALIASES.get(name, 'development')}"
