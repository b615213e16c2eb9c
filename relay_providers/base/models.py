"""
Canonical model public surface.

This module re-exports the one-class-per-file implementations under
``relay_providers.base.models_parts``.
"""

from .models_parts.canonical import CanonicalModel
from .models_parts.content_part import ContentPart, ContentPartType
from .models_parts.action import Action, MALFORMED_ARGUMENTS
from .models_parts.message import Message, Role, VALID_ROLES
from .models_parts.prompt_options import PromptOptions, ToolChoice
from .models_parts.prompt import Prompt
from .models_parts.usage import Usage
from .models_parts.response import Response
from .models_parts.wire_request import WireRequest, StreamFraming

__all__ = [
    "CanonicalModel",
    "ContentPart",
    "ContentPartType",
    "Action",
    "MALFORMED_ARGUMENTS",
    "Message",
    "Role",
    "VALID_ROLES",
    "PromptOptions",
    "ToolChoice",
    "Prompt",
    "Usage",
    "Response",
    "WireRequest",
    "StreamFraming",
]
