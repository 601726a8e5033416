"""
Django management command to start the mail server (SMTP and HTTP query API)

Usage:
    python manage.py start_mail_server
    python manage.py start_mail_server --smtp-only
    python manage.py start_mail_server --web-only
"""
import logging
import signal
import threading

from django.core.management.base import BaseCommand, CommandError
from django.core.servers.basehttp import ThreadedWSGIServer, WSGIRequestHandler, get_internal_wsgi_application

from app_mailserver.servers.smtp_server import SMTPServer
from app_mailserver.services.service_factory import initialize_store

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Start the catch-all SMTP server and the mail query HTTP server'

    def add_arguments(self, parser):
        parser.add_argument(
            '--smtp-only',
            action='store_true',
            help='Start only SMTP server',
        )
        parser.add_argument(
            '--web-only',
            action='store_true',
            help='Start only the HTTP query server',
        )

    def handle(self, *args, **options):
        """Start mail servers"""
        smtp_only = options.get('smtp_only', False)
        web_only = options.get('web_only', False)
        if smtp_only and web_only:
            raise CommandError('--smtp-only and --web-only are mutually exclusive')

        stop_event = threading.Event()
        smtp_server = None
        httpd = None

        try:
            config = initialize_store()
            self.stdout.write(self.style.SUCCESS(
                f"Maildir ready at {config['maildir_path']} for {config['mailbox_address']}"
            ))

            # Start SMTP server
            if not web_only:
                smtp_server = SMTPServer(config=config)
                smtp_server.start()
                self.stdout.write(self.style.SUCCESS(
                    f"SMTP server started on {config['server_host']}:{config['smtp_port']}"
                ))

            # Start HTTP query server
            if not smtp_only:
                httpd = self._start_web_server(config['server_host'], config['web_port'])
                self.stdout.write(self.style.SUCCESS(
                    f"HTTP server started on {config['server_host']}:{config['web_port']}"
                ))

            signal.signal(signal.SIGTERM, lambda signum, frame: stop_event.set())
            self.stdout.write(self.style.SUCCESS('Mail servers are running. Press Ctrl+C to stop.'))

            # Keep main thread alive
            try:
                while not stop_event.wait(1):
                    pass
            except KeyboardInterrupt:
                pass

        except Exception as e:
            self.stdout.write(self.style.ERROR(f'Failed to start mail servers: {e}'))
            logger.exception("Failed to start mail servers")
            raise
        finally:
            self.stdout.write(self.style.WARNING('\nStopping mail servers...'))
            if smtp_server:
                smtp_server.stop()
            if httpd:
                httpd.shutdown()
                httpd.server_close()
            self.stdout.write(self.style.SUCCESS('Mail servers stopped'))

    @staticmethod
    def _start_web_server(host: str, port: int) -> ThreadedWSGIServer:
        """Serve the Django application from a daemon thread"""
        httpd = ThreadedWSGIServer((host, port), WSGIRequestHandler)
        httpd.daemon_threads = True
        httpd.set_app(get_internal_wsgi_application())

        web_thread = threading.Thread(target=httpd.serve_forever, name='mail-web', daemon=True)
        web_thread.start()
        logger.info(f"[start_mail_server] HTTP server listening on {host}:{port}")
        return httpd
