from .settings import settings, Settings, ProviderDescriptor

__all__ = ["settings", "Settings", "ProviderDescriptor"]
