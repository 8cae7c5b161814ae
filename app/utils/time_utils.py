import pytz
from datetime import date, datetime

BULAN = (
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
)


def get_jakarta_time():
    """
    Returns the current time in Asia/Jakarta (WIB) as a naive datetime.
    """
    return datetime.now(pytz.timezone("Asia/Jakarta")).replace(tzinfo=None)


def format_tanggal(value: date) -> str:
    """Long Indonesian date, e.g. 19 Oktober 2026."""
    return f"{value.day} {BULAN[value.month - 1]} {value.year}"
