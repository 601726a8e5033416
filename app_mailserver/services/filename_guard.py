"""
Filename guard

Every message filename that comes from outside (URL path segments, CLI
arguments) passes through validate_filename before it is joined to a Maildir
path, so it can never leave its directory or name a hidden/control file.
"""
from app_mailserver.exceptions.invalid_identifier_exception import InvalidIdentifierException


def validate_filename(filename) -> str:
    """
    Validate a message filename

    Args:
        filename: Candidate filename

    Returns:
        The filename unchanged

    Raises:
        InvalidIdentifierException: If the filename is empty, not a string,
            contains a path separator, '..', a null byte, or starts with a dot
    """
    if not filename or not isinstance(filename, str):
        raise InvalidIdentifierException("Invalid filename: empty or not a string")

    if "/" in filename or "\\" in filename:
        raise InvalidIdentifierException("Invalid filename: contains path separators")

    if ".." in filename:
        raise InvalidIdentifierException("Invalid filename: contains parent directory reference")

    if "\0" in filename:
        raise InvalidIdentifierException("Invalid filename: contains null byte")

    if filename.startswith("."):
        raise InvalidIdentifierException("Invalid filename: starts with dot")

    return filename
