from app_mailserver.exceptions.mail_exception import MailException


class MetadataPersistException(MailException):
    """Read-status file could not be written"""

    def __init__(self, message="Failed to save read status"):
        super().__init__(message)
