from .client import ClientConfig, load_config

__all__ = [
    "ClientConfig",
    "load_config",
]
