"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

FULL_DAY_MINUTES = 8 * 60
HALF_DAY_MINUTES = 5 * 60
WORKED_OFF_MINUTES = 5 * 60

DEFAULT_IN_TIME = "10:00"
DEFAULT_MAX_UPLOAD_MB = 10
ALLOWED_UPLOAD_EXTENSIONS = (".csv", ".dat", ".xls", ".xlsx")

EMPLOYEE_ID_MAX_LENGTH = 20
EMPLOYEE_NAME_MIN_LENGTH = 2
EMPLOYEE_NAME_MAX_LENGTH = 100

# Delimiters allowed between several times in one spreadsheet cell.
PUNCH_TOKEN_PATTERN = r"[,;\n|\s]+"

PUNCH_LIST_SEPARATOR = ", "
UPLOAD_ID_SEPARATOR = ","

PROGRESS_REPORTS_PER_BATCH = 20
