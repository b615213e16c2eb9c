"""AUTO backend resolution from model identifiers."""

from .adapter import AutoAdapter, translate_any_chunk
from .client import AutoProvider
from .resolver import AutoResolver

__all__ = ["AutoAdapter", "AutoProvider", "AutoResolver", "translate_any_chunk"]
