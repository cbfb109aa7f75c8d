"""Utility functions and helpers."""

from labinventory.utils.datetime_utils import ensure_utc, to_api_timezone
from labinventory.utils.serials import calc_check_digit, format_serial, is_valid_serial, year_prefix

__all__ = [
    "ensure_utc",
    "to_api_timezone",
    "calc_check_digit",
    "format_serial",
    "is_valid_serial",
    "year_prefix",
]
