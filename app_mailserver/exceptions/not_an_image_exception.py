from app_mailserver.exceptions.mail_exception import MailException


class NotAnImageException(MailException):
    def __init__(self, message="Not an image attachment"):
        super().__init__(message)
