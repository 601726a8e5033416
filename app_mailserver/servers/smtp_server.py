"""
SMTP server implementation

This module implements the catch-all SMTP server using aiosmtpd. Every
recipient is accepted and every message is committed to the Maildir through
an IngestionSession, one per SMTP transaction.
"""
import logging
import weakref
from typing import Optional

from aiosmtpd.controller import Controller
from aiosmtpd.smtp import SMTP, Session, Envelope
from asgiref.sync import sync_to_async

from app_mailserver.config import get_app_config
from app_mailserver.services.ingestion_session import IngestionSession
from app_mailserver.services.mail_parser import MailParser
from app_mailserver.services.maildir_writer import MaildirWriter

logger = logging.getLogger(__name__)

SMTP_BANNER = 'Mailrider Catch-all SMTP Server'


class SMTPHandler:
    """SMTP handler for processing incoming emails"""

    def __init__(self, writer: MaildirWriter, parser: MailParser, mailbox_address: str):
        self.writer = writer
        self.parser = parser
        self.mailbox_address = mailbox_address
        # aiosmtpd creates a fresh Envelope per transaction
        self._sessions = weakref.WeakKeyDictionary()

    def ingestion_for(self, envelope: Envelope) -> IngestionSession:
        ingestion = self._sessions.get(envelope)
        if ingestion is None:
            ingestion = IngestionSession(self.writer, self.parser, self.mailbox_address)
            self._sessions[envelope] = ingestion
        return ingestion

    async def handle_RCPT(
            self,
            server: SMTP,
            session: Session,
            envelope: Envelope,
            address: str,
            rcpt_options: list
    ) -> str:
        """
        Accept any recipient, on any domain

        Returns:
            Response string
        """
        reply = self.ingestion_for(envelope).accept_recipient(address)
        envelope.rcpt_tos.append(address)
        envelope.rcpt_options.extend(rcpt_options)
        return reply

    async def handle_DATA(
            self,
            server: SMTP,
            session: Session,
            envelope: Envelope
    ) -> str:
        """
        Handle incoming email data

        Args:
            server: SMTP server instance
            session: SMTP session
            envelope: Email envelope (contains From, To, etc.)

        Returns:
            Response string, 250 when stored, 451 when the write failed
        """
        ingestion = self.ingestion_for(envelope)
        email_data = envelope.original_content or envelope.content or b''
        if isinstance(email_data, str):
            email_data = email_data.encode('utf-8')

        return await sync_to_async(ingestion.receive)(email_data, envelope.mail_from)


class SMTPServer:
    """SMTP server wrapper"""

    def __init__(self, handler: Optional[SMTPHandler] = None, config: Optional[dict] = None):
        self.config = config or get_app_config()
        self.host = self.config.get('server_host', '0.0.0.0')
        self.port = self.config.get('smtp_port', 2587)
        self.handler = handler
        self.controller: Optional[Controller] = None

    def start(self):
        """Start SMTP server"""
        if self.handler is None:
            from app_mailserver.services.service_factory import get_smtp_handler
            self.handler = get_smtp_handler()
        try:
            self.controller = Controller(
                self.handler,
                hostname=self.host,
                port=self.port,
                ident=SMTP_BANNER,
            )
            self.controller.start()
            logger.info(f"[SMTPServer] Started SMTP server on {self.host}:{self.port}, "
                        f"mailbox={self.handler.mailbox_address}")
        except Exception as e:
            logger.exception(f"[SMTPServer] Failed to start SMTP server: {e}")
            raise

    def stop(self):
        """Stop SMTP server"""
        if self.controller:
            self.controller.stop()
            self.controller = None
            logger.info("[SMTPServer] Stopped SMTP server")
