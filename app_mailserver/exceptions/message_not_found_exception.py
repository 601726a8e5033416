from app_mailserver.exceptions.mail_exception import MailException


class MessageNotFoundException(MailException):
    """Message not found in any folder"""

    def __init__(self, message="Message not found"):
        super().__init__(message)


class AttachmentNotFoundException(MessageNotFoundException):
    """Attachment index outside the parsed attachment list"""

    def __init__(self, message="Attachment not found"):
        super().__init__(message)
