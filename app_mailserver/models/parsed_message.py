"""
Parsed representation of a stored message

Produced fresh by the mail parser on every read and never persisted.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

UNKNOWN_ADDRESS = "Unknown"
NO_SUBJECT = "(No subject)"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class MailAddress:
    name: str = ""
    address: str = ""

    def format(self) -> str:
        """Render as 'Name <address>', bare address, or Unknown"""
        if self.name and self.address:
            return f"{self.name} <{self.address}>"
        if self.address:
            return self.address
        return UNKNOWN_ADDRESS


def format_addresses(addresses: List[MailAddress]) -> str:
    """
    Join addresses for display

    Args:
        addresses: Parsed address list, possibly empty

    Returns:
        Comma separated rendering, or Unknown for an empty list
    """
    if not addresses:
        return UNKNOWN_ADDRESS
    return ", ".join(address.format() for address in addresses)


@dataclass
class ParsedAttachment:
    filename: str
    content_type: str = DEFAULT_CONTENT_TYPE
    content_disposition: str = "attachment"
    content_id: Optional[str] = None
    data: bytes = b""

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_image(self) -> bool:
        return (self.content_type or "").lower().startswith("image/")


@dataclass
class ParsedMessage:
    message_id: str = ""
    subject: str = ""
    from_addresses: List[MailAddress] = field(default_factory=list)
    to_addresses: List[MailAddress] = field(default_factory=list)
    cc_addresses: List[MailAddress] = field(default_factory=list)
    date: Optional[datetime] = None
    headers: Dict[str, str] = field(default_factory=dict)
    text_body: str = ""
    html_body: str = ""
    attachments: List[ParsedAttachment] = field(default_factory=list)

    @property
    def display_subject(self) -> str:
        return self.subject or NO_SUBJECT
