"""Application-wide constants.

Names of the configuration properties the audit policy reads and the
formats used to persist them.
"""

# Configuration property names
GP_AUDITING_STRATEGY = "auditlog.auditingStrategy"
GP_EXCEPTIONS = "auditlog.exceptions"
GP_STORE_LAST_STATE_OF_DELETED_ITEMS = "auditlog.storeLastStateOfDeletedItems"

GP_EXCEPTIONS_DESCRIPTION = (
    "Specifies the class names of objects to audit or not depending on the "
    "auditing strategy"
)

# Exception list serialization
EXCEPTIONS_SEPARATOR = ","

# Boolean-parseable values for flag properties
TRUTHY_VALUES = frozenset({"true", "1", "yes", "on"})

# String field lengths
MAX_PROPERTY_NAME_LENGTH = 255
