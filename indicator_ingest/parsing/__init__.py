"""Tokenizer and row validator for indicator data uploads."""

from .tokenizer import tokenize
from .validator import parse_and_validate_file, validate_row

__all__ = [
    "parse_and_validate_file",
    "tokenize",
    "validate_row",
]
