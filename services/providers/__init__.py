"""
LLM provider clients
"""
from config import settings, ProviderDescriptor
from .base import ProviderClient, ProviderResponse, build_system_prompt
from .openai_compatible import OpenAICompatibleClient
from .anthropic import AnthropicClient
from .gemini import GeminiClient

CLIENT_CLASSES: dict[str, type[ProviderClient]] = {
    "groq": OpenAICompatibleClient,
    "claude": AnthropicClient,
    "gemini": GeminiClient,
}


def build_clients(descriptors: dict[str, ProviderDescriptor] | None = None) -> dict[str, ProviderClient]:
    """One client per known provider, keyed by provider name"""
    descriptors = descriptors or settings.provider_descriptors()
    return {
        name: CLIENT_CLASSES[name](descriptor)
        for name, descriptor in descriptors.items()
        if name in CLIENT_CLASSES
    }


__all__ = [
    "ProviderDescriptor",
    "ProviderClient",
    "ProviderResponse",
    "build_system_prompt",
    "OpenAICompatibleClient",
    "AnthropicClient",
    "GeminiClient",
    "CLIENT_CLASSES",
    "build_clients",
]
