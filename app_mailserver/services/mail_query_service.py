"""
Mail query service

This service answers the query/mutation surface of the message store:
- Listing all messages across folders, newest first
- Locating, reading and exporting a single message
- Read/unread flags
- Deleting one or all messages
- Importing raw messages
"""
import logging
import os
from typing import Any, Dict, Iterable, List, Optional, Tuple

from app_mailserver.exceptions.message_not_found_exception import MessageNotFoundException
from app_mailserver.exceptions.store_write_exception import StoreWriteException
from app_mailserver.models.maildir_folder import (
    INFO_SEPARATOR,
    MESSAGE_SUBFOLDERS,
    SUBFOLDER_CUR,
    MessageLocation,
    get_base_name,
)
from app_mailserver.models.parsed_message import ParsedMessage, format_addresses
from app_mailserver.services.filename_guard import validate_filename
from app_mailserver.services.folder_enumerator import FolderEnumerator
from app_mailserver.services.mail_parser import MailParser
from app_mailserver.services.mail_reader import MailReader
from app_mailserver.services.maildir_writer import MaildirWriter
from app_mailserver.services.read_status_store import ReadStatusStore
from common.utils.date_util import get_iso_str_of_datetime

logger = logging.getLogger(__name__)


def _attachment_to_dict(index: int, attachment) -> Dict[str, Any]:
    return {
        'index': index,
        'filename': attachment.filename,
        'content_type': attachment.content_type,
        'size': attachment.size,
        'content_id': attachment.content_id,
        'is_image': attachment.is_image,
    }


class MailQueryService:
    """Mail query service"""

    def __init__(
            self,
            folder_enumerator: FolderEnumerator,
            reader: MailReader,
            read_status_store: ReadStatusStore,
            parser: MailParser,
            writer: MaildirWriter,
    ):
        self.folder_enumerator = folder_enumerator
        self.reader = reader
        self.read_status_store = read_status_store
        self.parser = parser
        self.writer = writer

    def list_folders(self) -> List[Dict[str, Any]]:
        return [folder.to_dict() for folder in self.folder_enumerator.list_folders()]

    def list_all(self) -> Dict[str, Any]:
        """
        List all messages of all folders

        Returns:
            Dictionary with total, total_size and messages (newest first;
            messages with equal timestamps keep folder/filename order)
        """
        messages = []
        for folder in self.folder_enumerator.list_folders():
            messages.extend(self.reader.read_folder(folder))

        messages.sort(key=lambda message: message['timestamp'], reverse=True)

        return {
            'total': len(messages),
            'total_size': sum(message['size'] for message in messages),
            'messages': messages,
        }

    def find_by_filename(self, filename: str) -> Optional[MessageLocation]:
        """
        Find a message in every folder's new/ then cur/

        Args:
            filename: Message filename; in cur/ the name may carry a ':2,<flags>' suffix

        Returns:
            First matching location, or None

        Raises:
            InvalidIdentifierException: If the filename is unsafe
        """
        validate_filename(filename)

        for folder in self.folder_enumerator.list_folders():
            for subfolder in MESSAGE_SUBFOLDERS:
                directory = folder.subfolder_path(subfolder)
                path = os.path.join(directory, filename)
                if os.path.isfile(path):
                    return MessageLocation(folder=folder, subfolder=subfolder, filename=filename, path=path)

                if subfolder == SUBFOLDER_CUR and INFO_SEPARATOR not in filename:
                    flagged_name = self._find_flagged_name(folder, subfolder, filename)
                    if flagged_name:
                        return MessageLocation(
                            folder=folder,
                            subfolder=subfolder,
                            filename=flagged_name,
                            path=os.path.join(directory, flagged_name),
                        )
        return None

    def _find_flagged_name(self, folder, subfolder: str, filename: str) -> Optional[str]:
        prefix = filename + INFO_SEPARATOR
        for name in self.reader.list_message_files(folder, subfolder):
            if name.startswith(prefix):
                return name
        return None

    def locate(self, filename: str) -> MessageLocation:
        location = self.find_by_filename(filename)
        if location is None:
            raise MessageNotFoundException(f"Email not found: {filename}")
        return location

    def read_raw(self, location: MessageLocation) -> bytes:
        try:
            with open(location.path, 'rb') as f:
                return f.read()
        except FileNotFoundError as e:
            # deleted between locate and read
            raise MessageNotFoundException(f"Email not found: {location.filename}") from e

    def read_parsed(self, filename: str) -> Tuple[MessageLocation, bytes, ParsedMessage]:
        location = self.locate(filename)
        content = self.read_raw(location)
        return location, content, self.parser.parse(content)

    def get_detail(self, filename: str) -> Dict[str, Any]:
        """
        Get full email detail with all parts

        Raises:
            InvalidIdentifierException: If the filename is unsafe
            MessageNotFoundException: If no folder holds the message
            ParseFailureException: If the message cannot be parsed
        """
        location, content, parsed = self.read_parsed(filename)

        return {
            'filename': location.filename,
            'folder': location.folder.name,
            'subfolder': location.subfolder,
            'message_id': parsed.message_id,
            'from': format_addresses(parsed.from_addresses),
            'to': format_addresses(parsed.to_addresses),
            'cc': format_addresses(parsed.cc_addresses) if parsed.cc_addresses else None,
            'subject': parsed.display_subject,
            'date': get_iso_str_of_datetime(parsed.date),
            'headers': parsed.headers,
            'text_body': parsed.text_body,
            'html_body': parsed.html_body,
            'raw_content': content.decode('utf-8', errors='replace'),
            'size': len(content),
            'attachments': [
                _attachment_to_dict(index, attachment)
                for index, attachment in enumerate(parsed.attachments)
            ],
            'is_read': self.read_status_store.is_read(get_base_name(location.filename)),
        }

    def export_raw(self, filename: str) -> Tuple[bytes, str]:
        """
        Get the stored bytes of a message, unchanged

        Returns:
            Tuple of (content, filename)
        """
        location = self.locate(filename)
        return self.read_raw(location), location.filename

    def mark_read(self, filename: str) -> bool:
        """Flags are keyed by base name, so they survive the move to cur/"""
        validate_filename(filename)
        is_read = self.read_status_store.mark_read(get_base_name(filename))
        logger.debug(f"[mark_read] Email marked as read: {filename}")
        return is_read

    def mark_unread(self, filename: str) -> bool:
        validate_filename(filename)
        is_read = self.read_status_store.mark_unread(get_base_name(filename))
        logger.debug(f"[mark_unread] Email marked as unread: {filename}")
        return is_read

    def delete_one(self, filename: str) -> str:
        """
        Delete one email and its read flag

        Returns:
            Filename of the deleted message

        Raises:
            MessageNotFoundException: If no folder holds the message
        """
        location = self.locate(filename)
        try:
            os.unlink(location.path)
        except FileNotFoundError as e:
            raise MessageNotFoundException(f"Email not found: {filename}") from e

        self.read_status_store.remove(get_base_name(location.filename))

        logger.info(f"[delete_one] Email deleted: {location.folder.name}/{location.subfolder}/{location.filename}")
        return location.filename

    def delete_all(self) -> int:
        """
        Delete every message of every folder, then reset all read flags

        Per-file failures are logged and skipped.

        Returns:
            Number of deleted files
        """
        deleted_count = 0
        for folder in self.folder_enumerator.list_folders():
            for subfolder in MESSAGE_SUBFOLDERS:
                directory = folder.subfolder_path(subfolder)
                for filename in self.reader.list_message_files(folder, subfolder):
                    path = os.path.join(directory, filename)
                    if not os.path.isfile(path):
                        continue
                    try:
                        os.unlink(path)
                        deleted_count += 1
                    except OSError as e:
                        logger.warning(f"[delete_all] Failed to delete email {path}: {e}")

        self.read_status_store.clear_all()

        logger.info(f"[delete_all] Bulk delete completed: deleted_count={deleted_count}")
        return deleted_count

    def import_messages(self, messages: Iterable[Tuple[str, bytes]]) -> Dict[str, Any]:
        """
        Import raw messages into the root folder

        Args:
            messages: (name, raw bytes) pairs; name only labels errors

        Returns:
            Dictionary with imported and failed counts, per-item errors and
            the stored filenames
        """
        imported = []
        errors = []
        for name, email_data in messages:
            if not email_data:
                errors.append({'name': name, 'error': 'Empty message'})
                continue
            try:
                path = self.writer.commit(email_data)
            except StoreWriteException as e:
                errors.append({'name': name, 'error': str(e)})
                continue
            imported.append(os.path.basename(path))

        logger.info(f"[import_messages] Imported emails: imported={len(imported)}, failed={len(errors)}")
        return {
            'imported': len(imported),
            'failed': len(errors),
            'filenames': imported,
            'errors': errors,
        }
