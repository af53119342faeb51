"""File readers for survey datasets and level books."""

from .readers import parse_points_csv, parse_level_book_csv

__all__ = ["parse_points_csv", "parse_level_book_csv"]
