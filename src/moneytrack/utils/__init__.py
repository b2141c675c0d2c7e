"""Utility functions for moneytrack."""

from moneytrack.utils.date_parser import parse_date, parse_month
from moneytrack.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_month", "parse_amount"]
