"""
Maildir writer

Commits one inbound message into the Maildir tree:

    tmp/<name>  --write, fsync, chown, chmod-->  rename  -->  new/<name>

The rename within one filesystem is the atomicity boundary: a partially
written message is only ever visible under tmp/, never under new/. The IMAP
reader moves it from new/ to cur/ when a client sees it.

Maildir naming convention: {timestamp}.{unique}.{hostname}
"""
import logging
import os
import secrets
from typing import Optional

from app_mailserver.exceptions.store_write_exception import StoreWriteException
from app_mailserver.models.maildir_folder import SUBFOLDER_NEW, SUBFOLDER_CUR, SUBFOLDER_TMP
from common.utils.date_util import get_now_timestamp

logger = logging.getLogger(__name__)

UNIQUE_TOKEN_BYTES = 8


class MaildirWriter:
    """Atomic message writer for the root folder of a Maildir"""

    def __init__(
            self,
            maildir_path: str,
            host_tag: str = "mailrider",
            file_uid: Optional[int] = None,
            file_gid: Optional[int] = None,
            file_mode: int = 0o600,
    ):
        self.maildir_path = maildir_path
        self.host_tag = host_tag
        self.file_uid = file_uid
        self.file_gid = file_gid
        self.file_mode = file_mode
        self.new_dir = os.path.join(maildir_path, SUBFOLDER_NEW)
        self.cur_dir = os.path.join(maildir_path, SUBFOLDER_CUR)
        self.tmp_dir = os.path.join(maildir_path, SUBFOLDER_TMP)

    def ensure_structure(self):
        """Create new/, cur/ and tmp/ if they do not exist"""
        try:
            for directory in (self.new_dir, self.cur_dir, self.tmp_dir):
                os.makedirs(directory, exist_ok=True)
            logger.info(f"[ensure_structure] Maildir structure initialized: {self.maildir_path}")
        except OSError as e:
            logger.error(f"[ensure_structure] Failed to create Maildir structure: {e}")
            raise StoreWriteException(f"Failed to create Maildir structure: {e}") from e

    def generate_filename(self) -> str:
        timestamp = get_now_timestamp()
        unique = secrets.token_hex(UNIQUE_TOKEN_BYTES)
        return f"{timestamp}.{unique}.{self.host_tag}"

    def commit(self, email_data: bytes) -> str:
        """
        Save email to the new/ subdirectory

        Args:
            email_data: Raw email content

        Returns:
            Path of the committed message under new/

        Raises:
            StoreWriteException: If any filesystem step fails
        """
        filename = self.generate_filename()
        tmp_path = os.path.join(self.tmp_dir, filename)
        new_path = os.path.join(self.new_dir, filename)

        try:
            with open(tmp_path, "xb") as f:
                f.write(email_data)
                f.flush()
                os.fsync(f.fileno())

            self._apply_ownership(tmp_path)
            os.chmod(tmp_path, self.file_mode)

            os.rename(tmp_path, new_path)
        except OSError as e:
            logger.error(f"[commit] Failed to save email to Maildir: filename={filename}, error={e}")
            self._cleanup(tmp_path)
            raise StoreWriteException(f"Failed to save email {filename}: {e}") from e

        logger.info(f"[commit] Email saved to Maildir: filename={filename}, size={len(email_data)}")
        return new_path

    def _apply_ownership(self, path: str):
        if self.file_uid is None and self.file_gid is None:
            return
        uid = -1 if self.file_uid is None else self.file_uid
        gid = -1 if self.file_gid is None else self.file_gid
        os.chown(path, uid, gid)

    def _cleanup(self, tmp_path: str):
        # must never mask the original error
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"[_cleanup] Failed to remove temporary file {tmp_path}: {e}")
