"""
Shared base for the canonical model types.

Purpose
-------
Every canonical type (``Message``, ``Action``, ``Prompt``, ``Response`` and
their parts) derives from :class:`CanonicalModel`, which adds three behaviors
on top of Pydantic:

- Pydantic validation failures surface as the package's
  :class:`~relay_providers.base.errors.ValidationError`, naming the offending
  field as a dotted path (``messages.0.role``).
- :meth:`CanonicalModel.coerce` accepts either a mapping or an instance of the
  target type. An instance is returned as-is (no copy, no defaults
  re-applied); anything else is rejected.
- :meth:`CanonicalModel.to_dict` serializes without ``None`` placeholders.

External dependencies: Pydantic v2 only.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Type, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError

M = TypeVar("M", bound="CanonicalModel")


def _field_path(loc: tuple) -> str:
    return ".".join(str(p) for p in loc if not (isinstance(p, str) and p.startswith("function-")))


def validation_error_from(exc: PydanticValidationError, model_name: str) -> ValidationError:
    """Translate the first Pydantic error into the package ValidationError."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = _field_path(tuple(first.get("loc", ()))) or None
    msg = first.get("msg", str(exc))
    if field:
        message = f"{model_name}.{field}: {msg}"
    else:
        message = f"{model_name}: {msg}"
    return ValidationError(message=message, field=field, raw=exc)


class CanonicalModel(BaseModel):
    """Pydantic base with package-level validation errors and coercion."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except PydanticValidationError as exc:
            raise validation_error_from(exc, type(self).__name__) from None

    # Nested fields keep pydantic's own validation so the outermost model
    # reports the full location.
    __init__.__pydantic_base_init__ = True  # type: ignore[attr-defined]

    @classmethod
    def coerce(cls: Type[M], value: Any) -> M:
        """Return ``value`` as an instance of ``cls``.

        Instances of ``cls`` are returned unchanged; mappings are validated;
        any other shape raises :class:`ValidationError`.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls(**dict(value))
        raise ValidationError(
            message=f"{cls.__name__}: expected a mapping or {cls.__name__}, got {type(value).__name__}",
            field=cls.__name__.lower(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to plain data, omitting absent optional fields."""
        return self.model_dump(exclude_none=True)


__all__ = ["CanonicalModel", "validation_error_from"]
