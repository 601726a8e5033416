"""
Attachment service

Extracts one attachment of a stored message by its 0-based parse-order index
and renders thumbnails of image attachments.
"""
import logging

from app_mailserver.exceptions.message_not_found_exception import AttachmentNotFoundException
from app_mailserver.exceptions.not_an_image_exception import NotAnImageException
from app_mailserver.models.parsed_message import ParsedAttachment
from app_mailserver.services.mail_query_service import MailQueryService
from app_mailserver.services.thumbnail_renderer import ThumbnailRenderer, THUMBNAIL_BOX

logger = logging.getLogger(__name__)


class AttachmentService:

    def __init__(self, query_service: MailQueryService, renderer: ThumbnailRenderer):
        self.query_service = query_service
        self.renderer = renderer

    def get_attachment(self, filename: str, index: int) -> ParsedAttachment:
        """
        Get one attachment of a message

        Args:
            filename: Message filename
            index: 0-based attachment index

        Returns:
            ParsedAttachment with payload, content type and filename

        Raises:
            MessageNotFoundException: If the message does not exist
            AttachmentNotFoundException: If index is out of range
        """
        _, _, parsed = self.query_service.read_parsed(filename)

        if index < 0 or index >= len(parsed.attachments):
            raise AttachmentNotFoundException(
                f"Attachment not found: {filename} has {len(parsed.attachments)} attachments, index={index}"
            )

        return parsed.attachments[index]

    def get_thumbnail(self, filename: str, index: int) -> bytes:
        """
        Render a PNG thumbnail of an image attachment

        Raises:
            NotAnImageException: If the attachment is not image/*
        """
        attachment = self.get_attachment(filename, index)

        if not attachment.is_image:
            raise NotAnImageException(
                f"Not an image attachment: {attachment.filename} ({attachment.content_type})"
            )

        thumbnail = self.renderer.render_thumbnail(attachment.data, THUMBNAIL_BOX)
        logger.debug(f"[get_thumbnail] Thumbnail generated: {filename}#{index}, size={len(thumbnail)}")
        return thumbnail
