"""
Ingestion session policy

One inbound SMTP transaction:

    CONNECTED -> RECIPIENT_ACCEPTED -> RECEIVING -> COMMITTED | REJECTED

Every recipient is accepted (catch-all): all mail, whatever the address or
domain, is routed into the single configured mailbox. At end of data the
message is committed to the Maildir; a failed write rejects the transaction
with a temporary failure so the sender retries later.
"""
import logging
from typing import List, Optional

from app_mailserver.enums.ingestion_state_enum import IngestionStateEnum
from app_mailserver.exceptions.parse_failure_exception import ParseFailureException
from app_mailserver.exceptions.store_write_exception import StoreWriteException
from app_mailserver.models.parsed_message import ParsedMessage, format_addresses
from app_mailserver.services.mail_parser import MailParser
from app_mailserver.services.maildir_writer import MaildirWriter

logger = logging.getLogger(__name__)

REPLY_OK = '250 OK'
REPLY_ACCEPTED = '250 Message accepted for delivery'
REPLY_TEMPORARY_FAILURE = '451 Requested action aborted: failed to save message'


class IngestionSession:
    """Catch-all policy for one SMTP transaction"""

    def __init__(self, writer: MaildirWriter, parser: MailParser, mailbox_address: str):
        self.writer = writer
        self.parser = parser
        self.mailbox_address = mailbox_address
        self.state = IngestionStateEnum.CONNECTED
        self.recipients: List[str] = []
        self.stored_path: Optional[str] = None

    def accept_recipient(self, address: str) -> str:
        """
        Accept any recipient address

        Returns:
            SMTP reply
        """
        recipient = (address or '').lower()
        self.recipients.append(recipient)
        self.state = IngestionStateEnum.RECIPIENT_ACCEPTED

        logger.debug(f"[accept_recipient] Catch-all routing: recipient={recipient}, routed_to={self.mailbox_address}")
        return REPLY_OK

    def receive(self, email_data: bytes, mail_from: Optional[str] = None) -> str:
        """
        Commit a complete message buffer

        Args:
            email_data: Raw message as received after DATA
            mail_from: Envelope sender, for logging

        Returns:
            SMTP reply, 250 when committed, 451 when the write failed
        """
        self.state = IngestionStateEnum.RECEIVING

        metadata = self._extract_metadata(email_data)
        logger.info(f"[receive] Receiving email: from={mail_from}, to={self.recipients}, "
                    f"subject={metadata.display_subject if metadata else None}, size={len(email_data)}")

        try:
            self.stored_path = self.writer.commit(email_data)
        except StoreWriteException as e:
            self.state = IngestionStateEnum.REJECTED
            logger.error(f"[receive] Failed to process email: from={mail_from}, error={e}")
            return REPLY_TEMPORARY_FAILURE

        self.state = IngestionStateEnum.COMMITTED
        if metadata:
            logger.debug(f"[receive] Stored email: message_id={metadata.message_id}, "
                         f"from={format_addresses(metadata.from_addresses)}, path={self.stored_path}")
        return REPLY_ACCEPTED

    def _extract_metadata(self, email_data: bytes) -> Optional[ParsedMessage]:
        # observability only, never blocks the commit
        try:
            return self.parser.parse(email_data)
        except ParseFailureException as e:
            logger.warning(f"[_extract_metadata] Failed to parse email metadata: {e}")
            return None
