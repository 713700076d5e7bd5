"""Logging setup package for text and JSON line output."""

from .formatting import JsonLineFormatter, KeyValueFormatter, logs_configure, logs_record_attributes

__all__ = ["JsonLineFormatter", "KeyValueFormatter", "logs_configure", "logs_record_attributes"]
