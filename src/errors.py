class ValidationError(ValueError):
    """Raised when a request parameter is rejected before any computation"""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message

    def to_dict(self):
        return {"error": str(self), "field": self.field}


def validate_year(year):
    """Check a heatmap year (1-4 digit calendar year)"""
    if isinstance(year, bool) or not isinstance(year, int):
        raise ValidationError("year", "must be an integer")
    if year < 1 or year > 9999:
        raise ValidationError("year", "must be between 1 and 9999")
    return year


def validate_limit(value, field: str = "limit", maximum=None):
    """Check a top-N style limit; None passes through unchanged"""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, "must be an integer")
    if value < 0:
        raise ValidationError(field, "must not be negative")
    if maximum is not None:
        value = min(value, maximum)
    return value
