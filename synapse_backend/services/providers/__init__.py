"""LLM provider adapters and the router that selects between them"""

from .anthropic import AnthropicAdapter
from .base import ProviderAdapter
from .gemini import GeminiAdapter, build_gemini_contents
from .openai import OpenAIAdapter
from .router import ProviderEntry, ProviderRouter

__all__ = [
    "AnthropicAdapter",
    "GeminiAdapter",
    "OpenAIAdapter",
    "ProviderAdapter",
    "ProviderEntry",
    "ProviderRouter",
    "build_gemini_contents",
]
