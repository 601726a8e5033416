from app_mailserver.exceptions.mail_exception import MailException


class StoreWriteException(MailException):
    """Filesystem failure while committing a message to the Maildir"""

    def __init__(self, message="Failed to save email"):
        super().__init__(message)
