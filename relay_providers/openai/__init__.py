"""OpenAI family: chat completions and Responses adapters plus the provider."""

from .chat_adapter import ChatAdapter
from .client import OpenAIProvider
from .responses_adapter import ResponsesAdapter
from .stream_translators import translate_chat_chunk, translate_openai_chunk, translate_responses_event

__all__ = [
    "ChatAdapter",
    "ResponsesAdapter",
    "OpenAIProvider",
    "translate_chat_chunk",
    "translate_responses_event",
    "translate_openai_chunk",
]
