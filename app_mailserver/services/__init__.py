from app_mailserver.services.mail_parser import MailParser
from app_mailserver.services.mail_query_service import MailQueryService
from app_mailserver.services.attachment_service import AttachmentService
from app_mailserver.services.service_factory import (
    get_query_service,
    get_attachment_service,
    get_maildir_writer,
    get_read_status_store,
    initialize_store,
)

__all__ = [
    'MailParser',
    'MailQueryService',
    'AttachmentService',
    'get_query_service',
    'get_attachment_service',
    'get_maildir_writer',
    'get_read_status_store',
    'initialize_store',
]
