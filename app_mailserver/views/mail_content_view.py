"""
Mail content views

Binary endpoints: raw message export, attachment download and attachment
thumbnails. They answer with the bytes themselves, or a plain-text error
with HTTP 400/404/500.
"""
import logging

from django.http import HttpResponse
from rest_framework.views import APIView

from app_mailserver.exceptions.invalid_identifier_exception import InvalidIdentifierException
from app_mailserver.exceptions.message_not_found_exception import MessageNotFoundException
from app_mailserver.exceptions.not_an_image_exception import NotAnImageException
from app_mailserver.exceptions.parse_failure_exception import ParseFailureException
from app_mailserver.services.service_factory import get_attachment_service, get_query_service
from common.utils.url_util import quote_header_filename

logger = logging.getLogger(__name__)

RAW_CONTENT_TYPE = 'message/rfc822'
THUMBNAIL_CONTENT_TYPE = 'image/png'
THUMBNAIL_CACHE_CONTROL = 'public, max-age=86400'


def _content_disposition(disposition: str, filename: str) -> str:
    return f'{disposition}; filename="{quote_header_filename(filename)}"'


class MailMessageRawView(APIView):
    """Export the stored bytes of an email: GET messages/<id>/raw"""

    def get(self, request, filename: str):
        try:
            service = get_query_service()
            content, _ = service.export_raw(filename)

            response = HttpResponse(content, content_type=RAW_CONTENT_TYPE)
            response['Content-Length'] = str(len(content))
            response['Content-Disposition'] = _content_disposition('attachment', f"{filename}.eml")
            return response

        except InvalidIdentifierException as e:
            logger.warning(f"[MailMessageRawView] Invalid filename: {e}")
            return HttpResponse(str(e), status=400)
        except MessageNotFoundException:
            return HttpResponse("Not Found", status=404)
        except Exception as e:
            logger.exception(f"[MailMessageRawView] Error exporting {filename}: {e}")
            return HttpResponse(str(e), status=500)


class MailAttachmentView(APIView):
    """Download an attachment: GET messages/<id>/attachments/<index>"""

    def get(self, request, filename: str, index: int):
        try:
            service = get_attachment_service()
            attachment = service.get_attachment(filename, index)

            response = HttpResponse(attachment.data, content_type=attachment.content_type)
            response['Content-Length'] = str(attachment.size)
            response['Content-Disposition'] = _content_disposition('attachment', attachment.filename)
            return response

        except InvalidIdentifierException as e:
            logger.warning(f"[MailAttachmentView] Invalid filename: {e}")
            return HttpResponse(str(e), status=400)
        except MessageNotFoundException:
            # also covers AttachmentNotFoundException
            return HttpResponse("Not Found", status=404)
        except ParseFailureException as e:
            logger.warning(f"[MailAttachmentView] Unparseable email {filename}: {e}")
            return HttpResponse(str(e), status=500)
        except Exception as e:
            logger.exception(f"[MailAttachmentView] Error getting attachment {filename}#{index}: {e}")
            return HttpResponse(str(e), status=500)


class MailThumbnailView(APIView):
    """Thumbnail of an image attachment: GET messages/<id>/attachments/<index>/thumb"""

    def get(self, request, filename: str, index: int):
        try:
            service = get_attachment_service()
            thumbnail = service.get_thumbnail(filename, index)

            response = HttpResponse(thumbnail, content_type=THUMBNAIL_CONTENT_TYPE)
            response['Content-Length'] = str(len(thumbnail))
            response['Cache-Control'] = THUMBNAIL_CACHE_CONTROL
            return response

        except InvalidIdentifierException as e:
            logger.warning(f"[MailThumbnailView] Invalid filename: {e}")
            return HttpResponse(str(e), status=400)
        except NotAnImageException as e:
            return HttpResponse(str(e), status=400)
        except MessageNotFoundException:
            return HttpResponse("Not Found", status=404)
        except Exception as e:
            logger.exception(f"[MailThumbnailView] Error rendering thumbnail {filename}#{index}: {e}")
            return HttpResponse(str(e), status=500)
