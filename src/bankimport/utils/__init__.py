"""Utility functions for bankimport."""

from bankimport.utils.date_parser import parse_date, parse_statement_date
from bankimport.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_statement_date", "parse_amount"]
