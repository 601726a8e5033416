"""
Mail parsing service

This service parses raw RFC 822 messages into a ParsedMessage:
- Metadata (From, To, Cc, Subject, Date, Message-ID, all headers)
- Body (text and HTML)
- Attachments in parse order (filename, content type, content id, payload)
"""
import logging
import re
from email import message_from_bytes
from email.header import decode_header, make_header
from email.message import Message
from email.utils import collapse_rfc2231_value, getaddresses, parsedate_to_datetime
from typing import Dict, Iterator, List, Optional, Tuple

from app_mailserver.exceptions.parse_failure_exception import ParseFailureException
from app_mailserver.models.parsed_message import (
    DEFAULT_CONTENT_TYPE,
    MailAddress,
    ParsedAttachment,
    ParsedMessage,
)
from common.components.singleton import Singleton

logger = logging.getLogger(__name__)

_FILENAME_QUOTED = re.compile(r'filename="([^"]+)"')
_FILENAME_BARE = re.compile(r'filename=([^;]+)')

RFC822_CONTENT_TYPE = 'message/rfc822'


def decode_header_value(value) -> str:
    """Decode RFC 2047 encoded words, keeping the raw value if decoding fails"""
    if value is None:
        return ""
    value = str(value)
    try:
        return str(make_header(decode_header(value)))
    except (ValueError, LookupError, UnicodeError):
        return value


class MailParser(Singleton):
    """Mail parser service"""

    def parse(self, email_data: bytes) -> ParsedMessage:
        """
        Parse email message from bytes

        Args:
            email_data: Raw email data as bytes

        Returns:
            ParsedMessage

        Raises:
            ParseFailureException: If the data cannot be parsed
        """
        if not isinstance(email_data, (bytes, bytearray)):
            raise ParseFailureException(f"Failed to parse email: expected bytes, got {type(email_data).__name__}")

        try:
            msg = message_from_bytes(bytes(email_data))

            date = None
            date_str = msg.get('Date', '')
            if date_str:
                try:
                    date = parsedate_to_datetime(str(date_str))
                except (TypeError, ValueError, IndexError) as e:
                    logger.warning(f"[parse] Failed to parse date '{date_str}': {e}")

            text_body, html_body, attachments = self._extract_body_and_attachments(msg)

            return ParsedMessage(
                message_id=decode_header_value(msg.get('Message-ID', '')).strip(),
                subject=decode_header_value(msg.get('Subject', '')).strip(),
                from_addresses=self._extract_addresses(msg, 'From'),
                to_addresses=self._extract_addresses(msg, 'To'),
                cc_addresses=self._extract_addresses(msg, 'Cc'),
                date=date,
                headers=self._extract_headers(msg),
                text_body=text_body,
                html_body=html_body,
                attachments=attachments,
            )
        except ParseFailureException:
            raise
        except Exception as e:
            logger.warning(f"[parse] Failed to parse email: {e}")
            raise ParseFailureException(f"Failed to parse email: {e}") from e

    @staticmethod
    def _extract_headers(msg: Message) -> Dict[str, str]:
        """Header map keyed by lower-case name, repeated headers joined with ', '"""
        headers: Dict[str, List[str]] = {}
        for key, value in msg.items():
            headers.setdefault(key.lower(), []).append(decode_header_value(value))
        return {key: ", ".join(values) for key, values in headers.items()}

    @staticmethod
    def _extract_addresses(msg: Message, header_name: str) -> List[MailAddress]:
        values = [str(value) for value in msg.get_all(header_name, [])]
        addresses = []
        for name, address in getaddresses(values):
            name = decode_header_value(name).strip()
            address = address.strip()
            if name or address:
                addresses.append(MailAddress(name=name, address=address))
        return addresses

    @staticmethod
    def _is_attachment(part: Message) -> bool:
        content_disposition = str(part.get('Content-Disposition', '')).lower()
        if 'attachment' in content_disposition:
            return True
        if part.get_filename():
            return True
        # inline images and other non-text inline parts are attachments too
        return 'inline' in content_disposition and part.get_content_maintype() != 'text'

    @staticmethod
    def _decode_text(part: Message) -> str:
        payload = part.get_payload(decode=True)
        if not payload:
            return ""
        charset = part.get_content_charset() or 'utf-8'
        try:
            return payload.decode(charset, errors='replace')
        except LookupError:
            return payload.decode('utf-8', errors='replace')

    def _extract_body_and_attachments(self, msg: Message) -> Tuple[str, str, List[ParsedAttachment]]:
        """
        Walk the message tree and split it into bodies and attachments

        Args:
            msg: Email message object

        Returns:
            Tuple of (text_body, html_body, attachments)
        """
        text_body = ""
        html_body = ""
        attachments = []

        for part in self._iter_leaf_parts(msg, is_root=True):
            content_type = part.get_content_type()

            if self._is_attachment(part):
                attachment = self._extract_attachment(part, len(attachments))
                if attachment:
                    attachments.append(attachment)
            elif content_type == 'text/plain':
                text_body += self._decode_text(part)
            elif content_type == 'text/html':
                html_body += self._decode_text(part)

        return text_body, html_body, attachments

    def _iter_leaf_parts(self, part: Message, is_root: bool = False) -> Iterator[Message]:
        """
        Yield the leaf parts of the tree in walk order

        An attached message/rfc822 part is yielded whole; its own parts belong
        to the forwarded message, not to this one.
        """
        if not is_root and part.get_content_type() == RFC822_CONTENT_TYPE and self._is_attachment(part):
            yield part
            return

        if part.is_multipart():
            for sub_part in part.get_payload():
                yield from self._iter_leaf_parts(sub_part)
            return

        yield part

    def _extract_attachment(self, part: Message, index: int) -> Optional[ParsedAttachment]:
        """
        Extract attachment data from email part

        Args:
            part: Email message part
            index: Position of the attachment, used for the default filename

        Returns:
            ParsedAttachment, or None if the part carries no payload
        """
        payload = self._get_attachment_payload(part)
        if payload is None:
            logger.debug(f"[_extract_attachment] Skipping attachment without payload at index {index}")
            return None

        content_type = part.get_content_type() or DEFAULT_CONTENT_TYPE
        filename = self._extract_filename(part)
        if not filename:
            extension = self._get_extension_from_content_type(content_type)
            filename = f"attachment-{index}{extension}"

        content_id = str(part.get('Content-ID', '')).strip().strip('<>') or None

        return ParsedAttachment(
            filename=filename,
            content_type=content_type,
            content_disposition=str(part.get('Content-Disposition', 'attachment')),
            content_id=content_id,
            data=payload,
        )

    @staticmethod
    def _get_attachment_payload(part: Message) -> Optional[bytes]:
        if part.get_content_type() == RFC822_CONTENT_TYPE:
            # the payload of a message/rfc822 part is the parsed inner message
            inner_messages = part.get_payload()
            if isinstance(inner_messages, list):
                return inner_messages[0].as_bytes() if inner_messages else None
        return part.get_payload(decode=True)

    @staticmethod
    def _extract_filename(part: Message) -> Optional[str]:
        filename = part.get_filename()
        if filename:
            return decode_header_value(filename)

        # fall back to a raw look at Content-Disposition, then the Content-Type name
        content_disposition = str(part.get('Content-Disposition', ''))
        match = _FILENAME_QUOTED.search(content_disposition) or _FILENAME_BARE.search(content_disposition)
        if match:
            return match.group(1).strip()

        name = part.get_param('name')
        if name:
            return decode_header_value(collapse_rfc2231_value(name))
        return None

    @staticmethod
    def _get_extension_from_content_type(content_type: str) -> str:
        """Get file extension from MIME content type"""
        extension_map = {
            'text/plain': '.txt',
            'text/html': '.html',
            'text/calendar': '.ics',
            'image/jpeg': '.jpg',
            'image/png': '.png',
            'image/gif': '.gif',
            'image/webp': '.webp',
            'application/pdf': '.pdf',
            'application/zip': '.zip',
            'application/json': '.json',
            'message/rfc822': '.eml',
        }
        return extension_map.get(content_type, '.bin')
