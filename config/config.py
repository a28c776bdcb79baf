import os


def _env_bool(name: str, default: str) -> bool:
    return bool(int(os.environ.get(name, default)))


class Config:
    APP_TITLE = os.environ.get("APP_TITLE", "UNC Tenting Schedules")
    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-secret-key"

    # Cấu hình DB (interactive client)
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "shift_attendance")

    # Elevated credential for the sweep job; no default on purpose.
    SWEEP_DB_USER = os.environ.get("SWEEP_DB_USER", "")
    SWEEP_DB_PASSWORD = os.environ.get("SWEEP_DB_PASSWORD", "")

    # Admin "login name" (shared secret, not a security boundary)
    ADMIN_NAME = os.environ.get("ADMIN_NAME", "secret")

    # 35°59'49.7"N 78°56'29.5"W
    TARGET_LAT = float(os.environ.get("TARGET_LAT", "35.9971389"))
    TARGET_LON = float(os.environ.get("TARGET_LON", "-78.9415278"))
    MAX_DISTANCE_METERS = float(os.environ.get("MAX_DISTANCE_METERS", "200"))
    LOCATION_TIMEOUT_SECONDS = float(os.environ.get("LOCATION_TIMEOUT_SECONDS", "15"))
    LOCATION_MAX_AGE_SECONDS = float(os.environ.get("LOCATION_MAX_AGE_SECONDS", "30"))

    SCHEDULE_CSV_PATH = os.environ.get("SCHEDULE_CSV_PATH", "data/schedule.csv")
    # Empty = interpret timetable times in this process's local calendar.
    SCHEDULE_TIMEZONE = os.environ.get("SCHEDULE_TIMEZONE", "")
    DAYS_PER_WEEK = int(os.environ.get("DAYS_PER_WEEK", "7"))
    CHECKIN_WINDOW_MINUTES = int(os.environ.get("CHECKIN_WINDOW_MINUTES", "15"))

    SWEEP_GRACE_MINUTES = int(os.environ.get("SWEEP_GRACE_MINUTES", "10"))
    SWEEP_CHUNK_SIZE = int(os.environ.get("SWEEP_CHUNK_SIZE", "500"))
    ADMIN_MISSED_LIMIT = int(os.environ.get("ADMIN_MISSED_LIMIT", "300"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    AUTO_INIT_DB = _env_bool("AUTO_INIT_DB", "0")


def build_db_config(*, user: str | None = None, password: str | None = None) -> dict:
    return {
        "host": Config.DB_HOST,
        "port": Config.DB_PORT,
        "user": Config.DB_USER if user is None else user,
        "password": Config.DB_PASSWORD if password is None else password,
        "database": Config.DB_NAME,
    }


def export_settings(namespace: dict) -> None:
    """Copy shared settings into an environment module's globals."""
    for key in dir(Config):
        if key.isupper():
            namespace.setdefault(key, getattr(Config, key))
    namespace.setdefault("DB_CONFIG", build_db_config())
    namespace.setdefault(
        "SWEEP_DB_CONFIG",
        build_db_config(user=Config.SWEEP_DB_USER, password=Config.SWEEP_DB_PASSWORD),
    )
