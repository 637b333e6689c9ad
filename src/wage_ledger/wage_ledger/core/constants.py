"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MIN_YEAR = 2000
# Column ranges of database/schema.sql: SMALLINT UNSIGNED year, BIGINT amounts.
MAX_YEAR = 65535
MAX_AMOUNT = 2**63 - 1
MIN_MONTH = 1
MAX_MONTH = 12

ANONYMOUS_PRINCIPAL = "2vxsx-fae"
DEFAULT_IDENTITY_HEADER = "X-Caller-Principal"
