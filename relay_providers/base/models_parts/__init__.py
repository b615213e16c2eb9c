"""Models parts package public surface.

Re-exports individual canonical types so callers can import from
`relay_providers.base.models_parts` if needed, while `relay_providers.base.models`
remains the primary stable import path.
"""

from .canonical import CanonicalModel
from .content_part import ContentPart, ContentPartType
from .action import Action, MALFORMED_ARGUMENTS
from .message import Message, Role, VALID_ROLES
from .prompt_options import PromptOptions, ToolChoice
from .prompt import Prompt
from .usage import Usage
from .response import Response
from .wire_request import WireRequest, StreamFraming

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
