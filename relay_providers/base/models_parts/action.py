"""
Action (tool) model.

An ``Action`` plays two roles:

- a *declaration* offered to the model (``name``, ``description`` and a JSON
  ``parameters`` schema), listed on ``Prompt.actions``;
- an *invocation* requested by the model (``id``, ``name``, ``params``),
  listed on an assistant ``Message.requested_actions``.

Declarations may also be given in the OpenAI chat shape
(``{"type": "function", "function": {...}}``), which is unwrapped on input.

``params`` distinguishes "called with no arguments" (``{}``) from "arguments
never received" (``None``). The latter is kept in serialized output because
the ``null`` carries meaning.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from pydantic import model_validator

from .canonical import CanonicalModel

MALFORMED_ARGUMENTS = "malformed_arguments"


class Action(CanonicalModel):
    """Tool declaration or tool invocation."""

    id: Optional[str] = None
    name: Optional[str] = None
    params: Optional[Dict[str, Any]] = None
    description: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None
    status: Optional[str] = None
    result: Optional[Any] = None
    raw_arguments: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _unwrap_function_shape(cls, data: Any) -> Any:
        if not isinstance(data, Mapping) or data.get("type") not in (None, "function"):
            return data
        unwrapped = {k: v for k, v in data.items() if k not in ("function", "type")}
        fn = data.get("function")
        if isinstance(fn, Mapping):
            for key in ("name", "description", "parameters"):
                if key in fn:
                    unwrapped.setdefault(key, fn[key])
        return unwrapped

    @property
    def is_declaration(self) -> bool:
        """True when this action declares a schema rather than invoking one."""
        return self.id is None and (self.parameters is not None or self.description is not None)

    @property
    def is_malformed(self) -> bool:
        return self.status == MALFORMED_ARGUMENTS

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump(exclude_none=True)
        if not self.is_declaration:
            data["params"] = self.params
        return data


__all__ = ["Action", "MALFORMED_ARGUMENTS"]
