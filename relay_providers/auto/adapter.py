"""AUTO adapter: pick the backend adapter from the model id at run time.

Request building delegates to the adapter of the resolved backend.
Responses and stream chunks are parsed by shape, so a single AUTO adapter
can parse payloads from any supported family:

- ``choices`` -> chat completions; ``output`` -> Responses;
  ``content`` blocks -> Anthropic Messages.
- Anthropic stream event types go to the Anthropic translator, everything
  else to the OpenAI-family dispatcher.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from ..anthropic.adapter import AnthropicAdapter
from ..anthropic.stream_helpers import ANTHROPIC_EVENT_TYPES, translate_stream_chunk
from ..base.adapter_kind import AdapterKind
from ..base.interfaces import ProviderAdapter
from ..base.models import Prompt, Response, WireRequest
from ..base.streaming import ChunkOp, Translator
from ..openai.chat_adapter import ChatAdapter
from ..openai.responses_adapter import ResponsesAdapter
from ..openai.stream_translators import translate_openai_chunk
from .resolver import AutoResolver

AdapterFactory = Callable[[str, Prompt], ProviderAdapter]


def translate_any_chunk(chunk: Dict[str, Any]) -> Iterable[ChunkOp]:
    if chunk.get("type") in ANTHROPIC_EVENT_TYPES:
        return translate_stream_chunk(chunk)
    return translate_openai_chunk(chunk)


class AutoAdapter:
    """Adapter resolving its backend from ``prompt.options.model``."""

    kind = AdapterKind.AUTO

    def __init__(self, factory: AdapterFactory, *, resolver: Optional[AutoResolver] = None, model: Optional[str] = None) -> None:
        self._factory = factory
        self.resolver = resolver or AutoResolver()
        self.model = model
        self._parsers = {
            "chat": ChatAdapter(provider="auto", require_api_key=False),
            "responses": ResponsesAdapter(provider="auto", require_api_key=False),
            "anthropic": AnthropicAdapter(provider="auto"),
        }

    @property
    def supports_streaming(self) -> bool:
        return True

    def stream_translator(self) -> Translator:
        return translate_any_chunk

    def model_for(self, prompt: Prompt) -> Optional[str]:
        return prompt.options.model or self.model

    def backend_for(self, prompt: Prompt) -> str:
        return self.resolver.resolve(self.model_for(prompt))

    def resolve(self, prompt: Prompt) -> ProviderAdapter:
        """Concrete adapter for ``prompt``'s model."""
        return self._factory(self.backend_for(prompt), prompt)

    def build_request(self, prompt: Prompt, *, stream: bool = False) -> WireRequest:
        adapter = self.resolve(prompt)
        model = self.model_for(prompt)
        if model and prompt.options.model != model:
            prompt = prompt.model_copy(update={"options": prompt.options.model_copy(update={"model": model})})
        return adapter.build_request(prompt, stream=stream)

    def parse_response(self, wire: Mapping[str, Any], prompt: Optional[Prompt] = None) -> Response:
        if "choices" in wire:
            return self._parsers["chat"].parse_response(wire, prompt)
        if "output" in wire:
            return self._parsers["responses"].parse_response(wire, prompt)
        return self._parsers["anthropic"].parse_response(wire, prompt)


__all__ = ["AutoAdapter", "AdapterFactory", "translate_any_chunk"]
