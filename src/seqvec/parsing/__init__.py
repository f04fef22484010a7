"""Input parsing."""

from .csv_records import parse_line, parse_lines, read_records

__all__ = ["parse_line", "parse_lines", "read_records"]
