"""
System Constants

Application identity, logging defaults, queue and event channel defaults.
"""

BASE_SECOND = 1
BASE_MINUTE = 60 * BASE_SECOND
BASE_FILE_SIZE = 1024


class Application:
    """Application identity."""

    NAME = "reelmatch"
    VERSION = "0.1.0"
    DESCRIPTION = "Library reference disambiguation engine"


class Logging:
    """Logging defaults."""

    DEFAULT_LEVEL = "INFO"
    MAX_BYTES = 10 * BASE_FILE_SIZE * BASE_FILE_SIZE  # 10MB
    BACKUP_COUNT = 5


class QueueDefaults:
    """Queue runner defaults."""

    CONCURRENCY = 4
    THREAD_NAME_PREFIX = "disambiguation"


class EventChannelDefaults:
    """Event channel defaults."""

    REPLAY_LIMIT = 200
    GRACE_PERIOD_SECONDS = 60.0
    CANCEL_REASON = "User requested cancellation"


class EventNames:
    """Event names published on a disambiguation channel."""

    RESULT = "result"
    COMPLETE = "complete"
    CANCELLED = "cancelled"
    ERROR = "error"


class FileSystem:
    """File system defaults."""

    HOME_DIR = ".reelmatch"
    CONFIG_FILE = "config.toml"
    DEFAULT_DATABASE_PATH = "data/reelmatch.db"
    ENV_FILE = ".env"


class ReviewStatus:
    """Values stored in the outcome log ``reviewed`` column."""

    PENDING = 0
    CONFIRMED = 1
    REJECTED = -1
