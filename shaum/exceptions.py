"""
Domain exceptions
"""


class ShaumError(Exception):
    """Base error for the fasting engine"""


class CalendarLookupError(ShaumError):
    """Remote calendar lookup failed or returned unusable data"""

    def __init__(self, message: str, *, month: int | None = None, year: int | None = None):
        super().__init__(message)
        self.month = month
        self.year = year


class ConfigValidationError(ShaumError):
    """Stored or submitted fasting configuration is malformed"""
