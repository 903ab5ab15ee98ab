"""Utility functions for chaintrack."""

from chaintrack.utils.date_parser import parse_date, format_export_date
from chaintrack.utils.amount_parser import format_amount, parse_minor_units

__all__ = ["parse_date", "format_export_date", "format_amount", "parse_minor_units"]
