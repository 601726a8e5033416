from app_mailserver.exceptions.mail_exception import MailException


class ParseFailureException(MailException):
    def __init__(self, message="Failed to parse email"):
        super().__init__(message)
