from app_mailserver.exceptions.mail_exception import MailException


class InvalidIdentifierException(MailException):
    """Externally supplied message filename is unsafe to use as a path"""

    def __init__(self, message="Invalid filename"):
        super().__init__(message)
