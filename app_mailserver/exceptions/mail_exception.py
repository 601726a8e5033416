"""
Base exception for mail server
"""

from common.exceptions.base_exception import CheckedException


class MailException(CheckedException):
    """Base exception for mail server errors"""
    pass
