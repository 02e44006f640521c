"""Exception hierarchy for Wallet Scout"""

from typing import Optional


class WalletScoutError(Exception):
    """Base exception for Wallet Scout errors"""


class ConfigError(WalletScoutError, ValueError):
    """Missing or invalid configuration"""


class InvalidAddressError(WalletScoutError, ValueError):
    """Address is not a valid EVM account address"""


class ChainQueryError(WalletScoutError):
    """The chain-indexing service answered with an error payload"""

    def __init__(self, message: str, method: Optional[str] = None, code: Optional[int] = None):
        super().__init__(message)
        self.method = method
        self.code = code

    def __str__(self) -> str:
        base = super().__str__()
        if self.method:
            base = f"{self.method}: {base}"
        if self.code is not None:
            base = f"{base} (code {self.code})"
        return base
