"""
Service factory

Builds the process-wide service graph from the mail server configuration.
Every component receives its collaborators through its constructor; these
functions are the only place that reads the configuration to wire them.
"""
import logging
from functools import lru_cache

from app_mailserver.config import get_app_config
from app_mailserver.services.attachment_service import AttachmentService
from app_mailserver.services.folder_enumerator import FolderEnumerator
from app_mailserver.services.mail_parser import MailParser
from app_mailserver.services.mail_query_service import MailQueryService
from app_mailserver.services.mail_reader import MailReader
from app_mailserver.services.maildir_writer import MaildirWriter
from app_mailserver.services.read_status_store import ReadStatusStore
from app_mailserver.services.thumbnail_renderer import ThumbnailRenderer

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def get_config() -> dict:
    return get_app_config()


def get_read_status_store() -> ReadStatusStore:
    return ReadStatusStore(get_config()['metadata_file'])


@lru_cache(maxsize=None)
def get_maildir_writer() -> MaildirWriter:
    config = get_config()
    return MaildirWriter(
        maildir_path=config['maildir_path'],
        host_tag=config['host_tag'],
        file_uid=config['file_uid'],
        file_gid=config['file_gid'],
        file_mode=config['file_mode'],
    )


@lru_cache(maxsize=None)
def get_query_service() -> MailQueryService:
    config = get_config()
    parser = MailParser()
    read_status_store = get_read_status_store()
    return MailQueryService(
        folder_enumerator=FolderEnumerator(config['maildir_path']),
        reader=MailReader(parser, read_status_store),
        read_status_store=read_status_store,
        parser=parser,
        writer=get_maildir_writer(),
    )


@lru_cache(maxsize=None)
def get_attachment_service() -> AttachmentService:
    return AttachmentService(get_query_service(), ThumbnailRenderer())


def get_smtp_handler():
    from app_mailserver.servers.smtp_server import SMTPHandler
    return SMTPHandler(get_maildir_writer(), MailParser(), get_config()['mailbox_address'])


def initialize_store():
    """
    Create the Maildir structure and load the read status into memory

    Returns:
        The configuration the store was initialized from
    """
    config = get_config()
    get_maildir_writer().ensure_structure()
    read_status = get_read_status_store().load()
    logger.info(f"[initialize_store] Mail store ready: maildir={config['maildir_path']}, "
                f"mailbox={config['mailbox_address']}, read_flags={len(read_status)}")
    return config
