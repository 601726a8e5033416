from django.urls import path

from app_mailserver.views.mail_content_view import (
    MailMessageRawView,
    MailAttachmentView,
    MailThumbnailView,
)
from app_mailserver.views.mail_message_view import (
    MailMessageListView,
    MailMessageImportView,
    MailFolderListView,
    MailMessageDetailView,
    MailReadStatusView,
)

# URL patterns for the mail query REST API
# SMTP ingestion is handled separately via the start_mail_server command

urlpatterns = [
    path('messages', MailMessageListView.as_view(), name='mail-message-list'),
    # before messages/<str:filename> so "import" is not taken for a filename
    path('messages/import', MailMessageImportView.as_view(), name='mail-message-import'),
    path('folders', MailFolderListView.as_view(), name='mail-folder-list'),
    path('messages/<str:filename>', MailMessageDetailView.as_view(), name='mail-message-detail'),
    path('messages/<str:filename>/raw', MailMessageRawView.as_view(), name='mail-message-raw'),
    path('messages/<str:filename>/read', MailReadStatusView.as_view(is_read=True), name='mail-message-read'),
    path('messages/<str:filename>/unread', MailReadStatusView.as_view(is_read=False), name='mail-message-unread'),
    path('messages/<str:filename>/attachments/<int:index>', MailAttachmentView.as_view(),
         name='mail-attachment'),
    path('messages/<str:filename>/attachments/<int:index>/thumb', MailThumbnailView.as_view(),
         name='mail-attachment-thumb'),
]
