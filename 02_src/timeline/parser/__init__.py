"""History parsing module."""

from .parser import HistoryParser, IHistoryParser

__all__ = ["HistoryParser", "IHistoryParser"]
