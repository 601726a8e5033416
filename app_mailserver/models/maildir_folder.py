"""
Logical folders of the Maildir tree

The root Maildir directory is the INBOX; every sub-directory whose name starts
with the folder marker is an extra folder named without the marker.
"""
import os
from dataclasses import dataclass

ROOT_FOLDER_NAME = "INBOX"
FOLDER_MARKER = "."

SUBFOLDER_NEW = "new"
SUBFOLDER_CUR = "cur"
SUBFOLDER_TMP = "tmp"

# order in which messages are looked up and listed
MESSAGE_SUBFOLDERS = (SUBFOLDER_NEW, SUBFOLDER_CUR)

# separates the base name from the flags the IMAP reader appends in cur/
INFO_SEPARATOR = ":"


def get_base_name(filename: str) -> str:
    """
    "1714492800.3f2a9c0d1e4b5a6f.mailrider:2,S" -> "1714492800.3f2a9c0d1e4b5a6f.mailrider"

    The base name stays the same when the message moves from new/ to cur/,
    so read flags are keyed by it.
    """
    return filename.split(INFO_SEPARATOR, 1)[0]


@dataclass(frozen=True)
class MaildirFolder:
    name: str
    path: str
    is_root: bool = False

    def subfolder_path(self, subfolder: str) -> str:
        return os.path.join(self.path, subfolder)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "path": self.path,
            "is_root": self.is_root,
        }


@dataclass(frozen=True)
class MessageLocation:
    folder: MaildirFolder
    subfolder: str
    filename: str
    path: str
