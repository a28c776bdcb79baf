from config.config import export_settings

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
SCHEDULE_CSV_PATH = "tests/data/schedule.csv"

export_settings(globals())
