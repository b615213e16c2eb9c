"""Token usage helpers."""

from .extraction import extract_usage

__all__ = ["extract_usage"]
