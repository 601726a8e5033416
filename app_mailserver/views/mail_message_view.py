"""
Mail message REST API views

JSON endpoints for listing, reading, flagging, deleting and importing the
messages of the catch-all mailbox. Views only translate HTTP to service calls
and typed exceptions to response codes; the logic lives in MailQueryService.
"""
import logging

from rest_framework import status as http_status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.views import APIView

from app_mailserver.exceptions.invalid_identifier_exception import InvalidIdentifierException
from app_mailserver.exceptions.message_not_found_exception import MessageNotFoundException
from app_mailserver.exceptions.parse_failure_exception import ParseFailureException
from app_mailserver.services.service_factory import get_query_service
from common.consts.response_const import (
    RET_INVALID_PARAM,
    RET_MISSING_PARAM,
    RET_RESOURCE_NOT_FOUND,
    RET_BUSINESS_ERROR,
    RET_FILE_IO_ERROR,
)
from common.utils.http_util import resp_ok, resp_warn, resp_err, resp_exception

logger = logging.getLogger(__name__)

IMPORT_FIELD = 'files'


class MailMessageListView(APIView):
    """List all emails, or delete them all"""

    def get(self, request, *args, **kwargs):
        """
        List emails of every folder, newest first

        Response data:
        {
            "total": 2,
            "total_size": 2048,
            "messages": [{"filename", "folder", "subfolder", "timestamp", "size", "from",
                          "to", "subject", "preview", "attachment_count", "is_read"}]
        }
        """
        try:
            service = get_query_service()
            return resp_ok(service.list_all())
        except Exception as e:
            logger.exception(f"[MailMessageListView.get] Error listing emails: {e}")
            return resp_exception(e)

    def delete(self, request, *args, **kwargs):
        """Delete all emails and reset every read flag"""
        try:
            service = get_query_service()
            deleted_count = service.delete_all()
            return resp_ok({"deleted_count": deleted_count})
        except OSError as e:
            logger.error(f"[MailMessageListView.delete] File error deleting emails: {e}")
            return resp_err(str(e), code=RET_FILE_IO_ERROR, status=http_status.HTTP_200_OK)
        except Exception as e:
            logger.exception(f"[MailMessageListView.delete] Error deleting emails: {e}")
            return resp_exception(e)


class MailMessageImportView(APIView):
    """Import raw RFC 822 messages"""

    parser_classes = [MultiPartParser, FormParser]

    def post(self, request, *args, **kwargs):
        """
        Import one or more raw messages

        Request body, either:
        - multipart/form-data with one or more "files" parts
        - a raw message with Content-Type message/rfc822

        Response data:
        {
            "imported": 1,
            "failed": 1,
            "filenames": ["1714492800.3f2a9c0d1e4b5a6f.mailrider"],
            "errors": [{"name": "broken.eml", "error": "Empty message"}]
        }
        """
        try:
            if request.content_type.startswith('multipart/'):
                uploads = request.FILES.getlist(IMPORT_FIELD) or list(request.FILES.values())
                messages = [(upload.name, upload.read()) for upload in uploads]
            else:
                body = request.body
                messages = [('body', body)] if body else []

            if not messages:
                return resp_err("No messages to import", code=RET_MISSING_PARAM,
                                status=http_status.HTTP_200_OK)

            service = get_query_service()
            result = service.import_messages(messages)

            if result['failed']:
                return resp_warn(f"{result['failed']} of {len(messages)} messages failed to import", result)
            return resp_ok(result)

        except Exception as e:
            logger.exception(f"[MailMessageImportView.post] Error importing emails: {e}")
            return resp_exception(e)


class MailFolderListView(APIView):
    """List logical folders of the Maildir"""

    def get(self, request, *args, **kwargs):
        try:
            service = get_query_service()
            return resp_ok(service.list_folders())
        except Exception as e:
            logger.exception(f"[MailFolderListView.get] Error listing folders: {e}")
            return resp_exception(e)


class MailMessageDetailView(APIView):
    """Get or delete a specific email"""

    def get(self, request, filename, *args, **kwargs):
        """
        Get full email detail with headers, bodies, raw content and attachments

        URL parameter:
        - filename: Maildir filename of the email
        """
        try:
            service = get_query_service()
            return resp_ok(service.get_detail(filename))

        except InvalidIdentifierException as e:
            logger.warning(f"[MailMessageDetailView.get] Invalid filename: {e}")
            return resp_err(str(e), code=RET_INVALID_PARAM, status=http_status.HTTP_200_OK)
        except MessageNotFoundException as e:
            return resp_err(str(e), code=RET_RESOURCE_NOT_FOUND, status=http_status.HTTP_200_OK)
        except ParseFailureException as e:
            logger.warning(f"[MailMessageDetailView.get] Unparseable email {filename}: {e}")
            return resp_err(str(e), code=RET_BUSINESS_ERROR, status=http_status.HTTP_200_OK)
        except Exception as e:
            logger.exception(f"[MailMessageDetailView.get] Error getting email: {e}")
            return resp_exception(e)

    def delete(self, request, filename, *args, **kwargs):
        """
        Delete an email and its read flag

        URL parameter:
        - filename: Maildir filename of the email
        """
        try:
            service = get_query_service()
            deleted = service.delete_one(filename)
            return resp_ok({"filename": deleted})

        except InvalidIdentifierException as e:
            logger.warning(f"[MailMessageDetailView.delete] Invalid filename: {e}")
            return resp_err(str(e), code=RET_INVALID_PARAM, status=http_status.HTTP_200_OK)
        except MessageNotFoundException as e:
            return resp_err(str(e), code=RET_RESOURCE_NOT_FOUND, status=http_status.HTTP_200_OK)
        except OSError as e:
            logger.error(f"[MailMessageDetailView.delete] File error deleting email {filename}: {e}")
            return resp_err(str(e), code=RET_FILE_IO_ERROR, status=http_status.HTTP_200_OK)
        except Exception as e:
            logger.exception(f"[MailMessageDetailView.delete] Error deleting email: {e}")
            return resp_exception(e)


class MailReadStatusView(APIView):
    """Mark an email as read or unread"""

    is_read = True

    def post(self, request, filename, *args, **kwargs):
        """
        URL parameter:
        - filename: Maildir filename of the email

        Response data:
        {"filename": "...", "is_read": true}
        """
        try:
            service = get_query_service()
            if self.is_read:
                is_read = service.mark_read(filename)
            else:
                is_read = service.mark_unread(filename)
            return resp_ok({"filename": filename, "is_read": is_read})

        except InvalidIdentifierException as e:
            logger.warning(f"[MailReadStatusView.post] Invalid filename: {e}")
            return resp_err(str(e), code=RET_INVALID_PARAM, status=http_status.HTTP_200_OK)
        except Exception as e:
            logger.exception(f"[MailReadStatusView.post] Error updating read status: {e}")
            return resp_exception(e)
