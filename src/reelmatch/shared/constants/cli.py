"""
CLI Constants

Command names, option flags and help text for the typer application.
"""


class CLICommands:
    """Command names."""

    IMPORT_CATALOG = "import-catalog"
    RESOLVE = "resolve"
    MATCH = "match"
    PENDING = "pending"
    REVIEW = "review"


class CLIOptions:
    """Option flags."""

    DATABASE = "--db"
    YEAR = "--year"
    EXTERNAL_ID = "--external-id"
    PATH = "--path"
    CONCURRENCY = "--concurrency"
    BATCH_ID = "--batch-id"
    LIMIT = "--limit"
    ALL = "--all"


class CLIHelp:
    """Help text."""

    APP_NAME = "reelmatch"
    APP_DESCRIPTION = "Match loosely identified media references against a library catalog."
    APP_STYLE = "rich"
    VERSION_TEXT = "reelmatch v{version}"

    DATABASE_HELP = "Path to the library database (defaults to storage.database_path)"
    IMPORT_FILE_HELP = "JSON file containing a list of catalog entries"
    RESOLVE_TITLE_HELP = "Title to resolve"
    YEAR_HELP = "Release year hint"
    EXTERNAL_ID_HELP = "External identifier hint (e.g. an IMDb id)"
    PATH_HELP = "Folder path hint"
    MATCH_FILE_HELP = "JSON file containing a list of match requests"
    CONCURRENCY_HELP = "Number of concurrent workers"
    BATCH_ID_HELP = "Batch identifier (generated when omitted)"
    LIMIT_HELP = "Maximum number of outcomes to list"
    ALL_HELP = "List every unreviewed outcome, not only ambiguous ones"
    REVIEW_ID_HELP = "Outcome id from the pending list"
    REVIEW_DECISION_HELP = "Review decision: confirm or reject"


class CLIDefaults:
    """Default values."""

    PENDING_LIMIT = 100
    EXIT_SUCCESS = 0
    EXIT_ERROR = 1
    EXIT_INTERRUPTED = 130
