class RecordValidationError(ValueError):
    """Raised when a candidate record fails its entity's field rules"""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class DuplicateKeyError(RecordValidationError):
    """Raised when a business key collides with another record"""
