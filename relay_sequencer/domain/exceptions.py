"""
Domain Layer Exceptions
"""


class MalformedProgram(Exception):
    """
    Raised when program data fails validation (bad relay index, missing or
    negative duration, iterations < 1, duplicated step id).

    Attributes:
        field: Dotted path of the offending field, e.g. 'steps.2.loopSteps.0.relay'.
        message: What is wrong with it.
    """

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message
