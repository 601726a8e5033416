"""
Mail reader

Turns the files of one Maildir folder into message summaries. One unreadable
or malformed file is logged and skipped; it never hides the rest of the
folder.
"""
import logging
import os
import re
from typing import Any, Dict, List, Optional

from app_mailserver.exceptions.parse_failure_exception import ParseFailureException
from app_mailserver.models.maildir_folder import MESSAGE_SUBFOLDERS, MaildirFolder, get_base_name
from app_mailserver.models.parsed_message import format_addresses
from app_mailserver.services.mail_parser import MailParser
from app_mailserver.services.read_status_store import ReadStatusStore

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 200

# files the IMAP reader keeps next to messages
METADATA_FILE_PATTERN = re.compile(r'^(\.|dovecot|maildirfolder|courier|subscriptions)')


def is_metadata_file(filename: str) -> bool:
    return bool(METADATA_FILE_PATTERN.match(filename))


def parse_filename_timestamp(filename: str) -> Optional[int]:
    """
    "1714492800.3f2a9c0d1e4b5a6f.mailrider" -> 1714492800

    @return: None when the filename does not start with epoch seconds
    """
    prefix = filename.split('.', 1)[0]
    if prefix.isdigit():
        return int(prefix)
    return None


class MailReader:

    def __init__(self, parser: MailParser, read_status_store: ReadStatusStore):
        self.parser = parser
        self.read_status_store = read_status_store

    def list_message_files(self, folder: MaildirFolder, subfolder: str) -> List[str]:
        """
        Message filenames in one subfolder, sorted, metadata files excluded

        A missing subfolder is empty; other listing errors are logged.
        """
        directory = folder.subfolder_path(subfolder)
        try:
            names = sorted(os.listdir(directory))
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.warning(f"[list_message_files] Failed to list {directory}: {e}")
            return []
        return [name for name in names if not is_metadata_file(name)]

    def read_folder(self, folder: MaildirFolder) -> List[Dict[str, Any]]:
        """
        Summarize every message of a folder, new/ first, then cur/

        Args:
            folder: Folder to read

        Returns:
            List of summary dictionaries
        """
        summaries = []
        for subfolder in MESSAGE_SUBFOLDERS:
            for filename in self.list_message_files(folder, subfolder):
                summary = self._summarize(folder, subfolder, filename)
                if summary is not None:
                    summaries.append(summary)
        return summaries

    def _summarize(self, folder: MaildirFolder, subfolder: str, filename: str) -> Optional[Dict[str, Any]]:
        path = os.path.join(folder.subfolder_path(subfolder), filename)
        try:
            stat = os.stat(path)
            if not os.path.isfile(path):
                return None
            with open(path, 'rb') as f:
                content = f.read()
            parsed = self.parser.parse(content)
        except (OSError, ParseFailureException) as e:
            logger.warning(f"[_summarize] Skipping email {folder.name}/{subfolder}/{filename}: {e}")
            return None

        timestamp = parse_filename_timestamp(filename)
        if timestamp is None:
            timestamp = int(stat.st_mtime)

        return {
            'filename': filename,
            'folder': folder.name,
            'subfolder': subfolder,
            'timestamp': timestamp,
            'size': stat.st_size,
            'from': format_addresses(parsed.from_addresses),
            'to': format_addresses(parsed.to_addresses),
            'subject': parsed.display_subject,
            'preview': (parsed.text_body or '')[:PREVIEW_LENGTH],
            'attachment_count': len(parsed.attachments),
            'is_read': self.read_status_store.is_read(get_base_name(filename)),
        }
