"""
Folder enumerator

The filesystem is the source of truth for which folders exist: the root
Maildir is the INBOX, and each sub-directory named ".<Name>" is folder <Name>.
"""
import logging
import os
from typing import List

from app_mailserver.models.maildir_folder import MaildirFolder, ROOT_FOLDER_NAME, FOLDER_MARKER

logger = logging.getLogger(__name__)


class FolderEnumerator:

    def __init__(self, maildir_path: str):
        self.maildir_path = maildir_path

    def root_folder(self) -> MaildirFolder:
        return MaildirFolder(name=ROOT_FOLDER_NAME, path=self.maildir_path, is_root=True)

    def list_folders(self) -> List[MaildirFolder]:
        """
        List logical folders, root first, extra folders sorted by name

        A scan failure degrades to the root folder only.
        """
        folders = [self.root_folder()]

        try:
            with os.scandir(self.maildir_path) as entries:
                names = sorted(
                    entry.name for entry in entries
                    if entry.name.startswith(FOLDER_MARKER)
                    and len(entry.name) > len(FOLDER_MARKER)
                    and entry.is_dir()
                )
        except OSError as e:
            logger.warning(f"[list_folders] Failed to scan folders in {self.maildir_path}: {e}")
            return folders

        for name in names:
            folders.append(MaildirFolder(
                name=name[len(FOLDER_MARKER):],
                path=os.path.join(self.maildir_path, name),
            ))

        return folders
