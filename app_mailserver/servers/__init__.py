from app_mailserver.servers.smtp_server import SMTPServer, SMTPHandler

__all__ = [
    'SMTPServer',
    'SMTPHandler',
]
