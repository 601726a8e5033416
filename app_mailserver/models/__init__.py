from app_mailserver.models.maildir_folder import MaildirFolder, MessageLocation
from app_mailserver.models.parsed_message import (
    MailAddress,
    ParsedAttachment,
    ParsedMessage,
    format_addresses,
)

__all__ = [
    'MaildirFolder',
    'MessageLocation',
    'MailAddress',
    'ParsedAttachment',
    'ParsedMessage',
    'format_addresses',
]
