"""
Django settings for mailrider project.

Values come from the environment, loaded in layers by common.utils.env_util
(.env, then .env.test or .env.prod selected by RUN_ENV).
"""
from pathlib import Path

from common.utils.env_util import load_env

BASE_DIR = Path(__file__).resolve().parent.parent

env = load_env(BASE_DIR)

SECRET_KEY = env("SECRET_KEY", default="mailrider-insecure-dev-key")

DEBUG = env.bool("DEBUG", default=False)

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["localhost", "127.0.0.1"])

APP_MAILSERVER_ENABLED = env.bool("APP_MAILSERVER_ENABLED", default=True)

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
]

if APP_MAILSERVER_ENABLED:
    INSTALLED_APPS.append("app_mailserver")

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "mailrider.urls"

WSGI_APPLICATION = "mailrider.wsgi.application"

# The message store lives on the filesystem
DATABASES = {}

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
        "rest_framework.parsers.MultiPartParser",
        "rest_framework.parsers.FormParser",
    ],
}

# Uploaded messages are read into memory whole
DATA_UPLOAD_MAX_MEMORY_SIZE = env.int("DATA_UPLOAD_MAX_MEMORY_SIZE", default=50 * 1024 * 1024)
FILE_UPLOAD_MAX_MEMORY_SIZE = DATA_UPLOAD_MAX_MEMORY_SIZE

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

MAIL_LOG_LEVEL = env("MAIL_LOG_LEVEL", default="INFO").upper()
MAIL_SMTP_DEBUG = env.bool("MAIL_SMTP_DEBUG", default=False)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "app_mailserver": {
            "handlers": ["console"],
            "level": MAIL_LOG_LEVEL,
            "propagate": False,
        },
        "common": {
            "handlers": ["console"],
            "level": MAIL_LOG_LEVEL,
            "propagate": False,
        },
        "mail.log": {
            "handlers": ["console"],
            "level": "DEBUG" if MAIL_SMTP_DEBUG else "WARNING",
            "propagate": False,
        },
    },
}
