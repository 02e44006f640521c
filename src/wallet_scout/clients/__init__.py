"""API clients for the chain-indexing service"""

from .alchemy import AlchemyClient
from .base import BaseAPIClient, ChainQueryClient

__all__ = ["AlchemyClient", "BaseAPIClient", "ChainQueryClient"]
