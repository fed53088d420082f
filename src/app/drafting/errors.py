"""Draft engine errors"""


class DraftValidationError(ValueError):
    """
    Local, pre-submission validation failure

    Raised for invalid overrides, empty selections and missing period fields.
    Never reaches the record store.
    """

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        super().__init__(message)
        self.code = code
        self.message = message
