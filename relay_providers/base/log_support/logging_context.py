"""Structured logging context object.

:class:`LogContext` carries the fields shared by every event of one
generation: provider, model and, once the provider assigned one, the
generation id. Anything else goes to ``extra``. ``to_dict`` flattens ``extra``
into the payload and prunes ``None`` values.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class LogContext:
    """Context merged into ``log_event`` payloads."""

    provider: Optional[str] = None
    model: Optional[str] = None
    generation_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def bind(self, **values: Any) -> "LogContext":
        """Return a copy with ``values`` set; unknown keys land in ``extra``."""
        known = {f.name for f in fields(self)} - {"extra"}
        direct = {k: v for k, v in values.items() if k in known}
        extra = {**self.extra, **{k: v for k, v in values.items() if k not in known}}
        return replace(self, extra=extra, **direct)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update(extra)
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
