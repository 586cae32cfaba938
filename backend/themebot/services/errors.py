"""
Typed gateway failures. Not-found is not an error: lookups return None and
delete/update return False when no row matched.
"""


class ThemeGatewayError(Exception):
    """Base class for every failure raised by ThemeGateway."""


class ThemeValidationError(ThemeGatewayError):
    """The requested write is invalid (unknown column, NOT NULL violation, ...)."""


class ThemeConflictError(ThemeValidationError):
    """A unique value (file_id or message_id) is already taken."""


class ThemeStoreError(ThemeGatewayError):
    """The database failed; the original exception is chained as __cause__."""
