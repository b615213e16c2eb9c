"""AWS Bedrock gateway for Anthropic models."""

from .adapter import BedrockAdapter, rewrite_body
from .client import BedrockProvider

__all__ = ["BedrockAdapter", "BedrockProvider", "rewrite_body"]
