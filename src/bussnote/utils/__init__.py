"""Utility functions for bussnote."""

from bussnote.utils.date_parser import parse_date
from bussnote.utils.money import parse_money, standard_round, truncate_round

__all__ = ["parse_date", "parse_money", "standard_round", "truncate_round"]
