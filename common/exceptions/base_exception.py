class CheckedException(Exception):
    """
    Base class of expected, typed failures that callers translate into a result
    """

    def __init__(self, message: str = ""):
        self.message = message
        super(CheckedException, self).__init__(message)
