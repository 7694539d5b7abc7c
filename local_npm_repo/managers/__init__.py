from .base_manager import BaseRegistryClient, RegistryError
from .npm_manager import NPMRegistryClient
from .http_registry import HttpRegistryClient

__all__ = ['BaseRegistryClient', 'RegistryError', 'NPMRegistryClient', 'HttpRegistryClient']
