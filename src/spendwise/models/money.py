"""Column sizing shared by every money and rating field."""

STORED_PLACES = 4
"""Decimal places kept by Numeric columns; configured precision may not exceed it."""

MONEY_DIGITS = 16
RATING_DIGITS = 12
