STATE_DIR_NAME = ".task_engine"
CONFIG_FILE = "config.yaml"

MIN_PRIORITY = 1  # most urgent
MAX_PRIORITY = 10

DEFAULT_STRATEGY = "priority"
DEFAULT_DUE_SOON_DAYS = 3
DEFAULT_LOG_LEVEL = "INFO"
VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
