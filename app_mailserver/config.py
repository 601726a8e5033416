"""
Mail server application configuration

This module loads the mail server settings from environment variables
(layered .env, .env.test, .env.prod) and derives the on-disk locations of
the Maildir tree and of the read-status metadata file.
"""
import os
from pathlib import Path
from typing import Dict, Any

from common.utils.env_util import load_env

DEFAULT_SMTP_PORT = 2587
DEFAULT_WEB_PORT = 8082
DEFAULT_MAILDIR_BASE = "/var/mail/mailrider"
DEFAULT_USER = "inbox"
DEFAULT_DOMAIN = "mailrider.local"
DEFAULT_HOST_TAG = "mailrider"
DEFAULT_FILE_MODE = "600"

MAILDIR_NAME = "Maildir"
METADATA_FILE_NAME = ".read-status.json"


def get_base_dir() -> Path:
    """
    Get the project root directory.

    Returns:
        Path to the project root directory
    """
    # app_mailserver/config.py -> app_mailserver -> project root
    return Path(__file__).resolve().parent.parent


def get_env():
    """
    Load and return environment variables with layered support.

    Returns:
        environ.Env instance with loaded environment variables
    """
    base_dir = get_base_dir()
    return load_env(base_dir)


def _optional_int(env, name: str):
    value = env(name, default=None)
    if value is None or str(value).strip() == "":
        return None
    return int(value)


def get_app_config() -> Dict[str, Any]:
    """
    Get mail server configuration from environment variables.

    Returns:
        Dictionary containing mail server configuration values, including the
        derived maildir_path, metadata_file and mailbox_address

    Raises:
        ConfigurationErrorException: If configuration values are invalid
    """
    from common.exceptions.configuration_error_exception import ConfigurationErrorException

    env = get_env()

    try:
        server_host = env("MAIL_SERVER_HOST", default="0.0.0.0")
        smtp_port = env.int("MAIL_SMTP_PORT", default=DEFAULT_SMTP_PORT)
        web_port = env.int("MAIL_WEB_PORT", default=DEFAULT_WEB_PORT)

        maildir_base = env("MAIL_MAILDIR_BASE", default=DEFAULT_MAILDIR_BASE)
        user = env("MAIL_USER", default=DEFAULT_USER)
        domain = env("MAIL_DOMAIN", default=DEFAULT_DOMAIN)
        if not maildir_base:
            raise ConfigurationErrorException("MAIL_MAILDIR_BASE is required")
        if not user or os.sep in user or user.startswith("."):
            raise ConfigurationErrorException(f"MAIL_USER is not a valid directory name: {user!r}")

        log_level = env("MAIL_LOG_LEVEL", default="INFO").upper()
        smtp_debug = env.bool("MAIL_SMTP_DEBUG", default=False)

        host_tag = env("MAIL_HOST_TAG", default=DEFAULT_HOST_TAG)
        file_uid = _optional_int(env, "MAIL_FILE_UID")
        file_gid = _optional_int(env, "MAIL_FILE_GID")
        file_mode = int(env("MAIL_FILE_MODE", default=DEFAULT_FILE_MODE), 8)

        user_dir = Path(maildir_base) / user

        return {
            "server_host": server_host,
            "smtp_port": smtp_port,
            "web_port": web_port,
            "maildir_base": str(maildir_base),
            "user": user,
            "domain": domain,
            "mailbox_address": f"{user}@{domain}",
            "maildir_path": str(user_dir / MAILDIR_NAME),
            "metadata_file": str(user_dir / METADATA_FILE_NAME),
            "log_level": log_level,
            "smtp_debug": smtp_debug,
            "host_tag": host_tag,
            "file_uid": file_uid,
            "file_gid": file_gid,
            "file_mode": file_mode,
        }
    except ConfigurationErrorException:
        raise
    except Exception as e:
        raise ConfigurationErrorException(
            f"Failed to load mail server configuration: {str(e)}"
        ) from e
