from datetime import datetime
from typing import Optional


def get_now_timestamp() -> int:
    """
    Get the current timestamp in seconds
    """
    now = datetime.now()
    return int(now.timestamp())


def get_date_str_of_datetime(date_obj: datetime, date_format: str) -> str:
    """
    Convert datetime to date string
    2024-05-01 00:00:00 -> "20240501"

    @param date_obj:
    @param date_format:
    @return: date string
    """
    return date_obj.strftime(date_format)


def get_iso_str_of_datetime(date_obj: Optional[datetime]) -> Optional[str]:
    """
    Convert datetime to ISO-8601 string, None stays None
    """
    if date_obj is None:
        return None
    return date_obj.isoformat()
