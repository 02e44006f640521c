"""
Wallet Scout - on-chain holdings inspection for EVM wallets
"""

__version__ = "1.0.0"
__author__ = "Wallet Scout Team"

from .config import Config
from .inspector import HoldingsInspector, NATIVE_DECIMALS
from .matcher import MetadataMatcher, matches
from .models import Chain, InventorySummary, NFTFilter, TokenAmount, TransferRecord
from .pagination import PageAggregator, drain

__all__ = [
    "Config",
    "HoldingsInspector",
    "NATIVE_DECIMALS",
    "MetadataMatcher",
    "matches",
    "Chain",
    "InventorySummary",
    "NFTFilter",
    "TokenAmount",
    "TransferRecord",
    "PageAggregator",
    "drain",
]
