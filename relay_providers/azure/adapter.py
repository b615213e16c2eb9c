"""Azure OpenAI adapter.

Purpose:
- Serve chat completions and Responses bodies from an Azure OpenAI
  resource. Bodies are identical to OpenAI's; only addressing and auth
  differ:

  - chat completions go to the deployment,
    ``https://{resource}.openai.azure.com/openai/deployments/{deployment}``
    (or an explicit ``base_url``), with ``api-version`` ``2024-10-21``
    (``AZURE_OPENAI_API_VERSION``);
  - Responses go to the resource-level ``.../openai/responses`` route with
    the deployment name as ``model`` and a preview ``api-version``
    (``2025-03-01-preview``, ``AZURE_OPENAI_RESPONSES_API_VERSION``);
  - ``api-key`` header instead of a bearer token.

Missing resource, deployment or key raises ``ConfigurationError`` when the
adapter is constructed.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional, Union

from ..base.adapter_kind import AdapterKind, select_openai_family
from ..base.errors import ConfigurationError
from ..base.models import Prompt, Response, WireRequest
from ..base.streaming import Translator
from ..config.defaults import (
    AZURE_BASE_URL_TEMPLATE,
    AZURE_DEFAULT_API_VERSION,
    AZURE_RESPONSES_API_VERSION,
    AZURE_RESPONSES_BASE_URL_TEMPLATE,
)
from ..openai.chat_adapter import ChatAdapter
from ..openai.responses_adapter import ResponsesAdapter
from ..openai.stream_translators import translate_openai_chunk

_DEPLOYMENT_SUFFIX = re.compile(r"/deployments/[^/]+/?$")


def azure_base_url(resource: Optional[str], deployment: Optional[str]) -> str:
    if not resource:
        raise ConfigurationError(message="missing Azure OpenAI resource name", provider="azure")
    if not deployment:
        raise ConfigurationError(message="missing Azure OpenAI deployment name", provider="azure")
    return AZURE_BASE_URL_TEMPLATE.format(resource=resource, deployment=deployment)


def azure_responses_base_url(resource: Optional[str], base_url: Optional[str] = None) -> str:
    """Resource-level root serving ``/responses``.

    An explicit deployment ``base_url`` is reused with its
    ``/deployments/<name>`` suffix removed.
    """
    if base_url:
        return _DEPLOYMENT_SUFFIX.sub("", base_url.rstrip("/"))
    return AZURE_RESPONSES_BASE_URL_TEMPLATE.format(resource=resource)


class AzureAdapter:
    """Chat/Responses family addressed through an Azure resource."""

    kind = AdapterKind.AZURE

    def __init__(
        self,
        *,
        resource: Optional[str] = None,
        deployment: Optional[str] = None,
        api_key: Optional[str] = None,
        api_version: Optional[str] = None,
        responses_api_version: Optional[str] = None,
        base_url: Optional[str] = None,
        provider: str = "azure",
    ) -> None:
        self.provider = provider
        self.deployment = deployment
        if base_url:
            if not deployment:
                raise ConfigurationError(message="missing Azure OpenAI deployment name", provider=provider)
            self.base_url = base_url
        else:
            self.base_url = azure_base_url(resource, deployment)
        self.responses_base_url = azure_responses_base_url(resource, base_url)
        if not api_key:
            raise ConfigurationError(message="missing Azure OpenAI API key", provider=provider)
        self.api_key = api_key
        self.api_version = api_version or AZURE_DEFAULT_API_VERSION
        self.responses_api_version = responses_api_version or AZURE_RESPONSES_API_VERSION
        common = dict(provider=provider, model=deployment, require_api_key=False)
        self._chat = ChatAdapter(base_url=self.base_url, **common)
        self._responses = ResponsesAdapter(base_url=self.responses_base_url, **common)

    @property
    def supports_streaming(self) -> bool:
        return True

    def stream_translator(self) -> Translator:
        return translate_openai_chunk

    def family_for(self, prompt: Prompt) -> Union[ChatAdapter, ResponsesAdapter]:
        if select_openai_family(prompt) is AdapterKind.RESPONSES:
            return self._responses
        return self._chat

    def build_request(self, prompt: Prompt, *, stream: bool = False) -> WireRequest:
        family = self.family_for(prompt)
        request = family.build_request(prompt, stream=stream)
        headers: Dict[str, str] = {k: v for k, v in request.headers.items() if k.lower() != "authorization"}
        headers["api-key"] = self.api_key
        request.headers = headers
        version = self.responses_api_version if family is self._responses else self.api_version
        request.params = {**request.params, "api-version": version}
        return request

    def parse_response(self, wire: Mapping[str, Any], prompt: Optional[Prompt] = None) -> Response:
        if "choices" in wire:
            return self._chat.parse_response(wire, prompt)
        return self._responses.parse_response(wire, prompt)


__all__ = ["AzureAdapter", "azure_base_url", "azure_responses_base_url"]
