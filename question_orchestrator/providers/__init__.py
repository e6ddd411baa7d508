"""LLM provider descriptors and dispatch."""

from .descriptors import ProviderDescriptor, build_provider_descriptors
from .dispatcher import ProviderDispatcher

__all__ = ["ProviderDescriptor", "ProviderDispatcher", "build_provider_descriptors"]
