"""
Pytest configuration file.

This file ensures Django settings are loaded before any tests run,
which in turn loads environment variables from .env files. The mail store
defaults to a throwaway directory so no test touches /var/mail.
"""
import os
import tempfile

import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "mailrider.settings")
os.environ.setdefault("RUN_ENV", "test")
os.environ.setdefault("MAIL_MAILDIR_BASE", tempfile.mkdtemp(prefix="mailrider-test-"))
django.setup()

from django.conf import settings

if "testserver" not in settings.ALLOWED_HOSTS:
    settings.ALLOWED_HOSTS.append("testserver")
