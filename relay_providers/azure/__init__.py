"""Azure OpenAI deployments (chat completions and Responses)."""

from .adapter import AzureAdapter, azure_base_url, azure_responses_base_url
from .client import AzureOpenAIProvider

__all__ = ["AzureAdapter", "AzureOpenAIProvider", "azure_base_url", "azure_responses_base_url"]
