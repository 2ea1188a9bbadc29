"""Utility functions for lendtrack."""

from lendtrack.utils.date_parser import parse_date, parse_datetime
from lendtrack.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_datetime", "parse_amount"]
