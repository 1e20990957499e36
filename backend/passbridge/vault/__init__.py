"""Vault module: in-memory session and password-manager CLI access."""

from .fetcher import CredentialFetcher
from .models import Failure, Property, RetrievalRequest, RetrievalResult, Secret
from .providers import BitwardenProvider, PasswordManager, VaultProvider, get_provider
from .session import VaultSession

__all__ = [
    'BitwardenProvider',
    'CredentialFetcher',
    'Failure',
    'PasswordManager',
    'Property',
    'RetrievalRequest',
    'RetrievalResult',
    'Secret',
    'VaultProvider',
    'VaultSession',
    'get_provider',
]
