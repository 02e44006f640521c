"""
Pydantic models for wallet holdings
"""

from decimal import ROUND_DOWN, Decimal, localcontext
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Chain(str, Enum):
    """Supported EVM networks"""
    ETHEREUM = "ethereum"
    SEPOLIA = "sepolia"
    POLYGON = "polygon"
    ARBITRUM = "arbitrum"
    OPTIMISM = "optimism"
    BASE = "base"

    @classmethod
    def from_string(cls, chain_str: str) -> "Chain":
        """Convert string to Chain enum"""
        chain_str = chain_str.lower().strip()
        mapping = {
            "eth": cls.ETHEREUM,
            "ethereum": cls.ETHEREUM,
            "mainnet": cls.ETHEREUM,
            "sepolia": cls.SEPOLIA,
            "polygon": cls.POLYGON,
            "matic": cls.POLYGON,
            "arbitrum": cls.ARBITRUM,
            "arb": cls.ARBITRUM,
            "optimism": cls.OPTIMISM,
            "op": cls.OPTIMISM,
            "base": cls.BASE,
        }
        return mapping.get(chain_str, cls.ETHEREUM)

    @property
    def network(self) -> str:
        """Alchemy network slug"""
        return {
            Chain.ETHEREUM: "eth-mainnet",
            Chain.SEPOLIA: "eth-sepolia",
            Chain.POLYGON: "polygon-mainnet",
            Chain.ARBITRUM: "arb-mainnet",
            Chain.OPTIMISM: "opt-mainnet",
            Chain.BASE: "base-mainnet",
        }[self]


class TokenAmount(BaseModel):
    """Integer base-unit balance plus its decimal-place count"""

    model_config = ConfigDict(frozen=True)

    balance: int = Field(ge=0)
    decimals: int = Field(ge=0)

    def _precision(self, places: int = 0) -> int:
        return max(28, len(str(self.balance)) + self.decimals + places + 1)

    @property
    def display_value(self) -> Decimal:
        with localcontext() as ctx:
            ctx.prec = self._precision()
            return Decimal(self.balance).scaleb(-self.decimals)

    def format(self, places: int = 4) -> str:
        """Rounded down for display only"""
        with localcontext() as ctx:
            ctx.prec = self._precision(places)
            quantum = Decimal(1).scaleb(-places)
            return str(self.display_value.quantize(quantum, rounding=ROUND_DOWN))


class TransferRecord(BaseModel):
    """Asset transfer; `to_address` is None for contract creation"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_address: str = Field(alias="from")
    to_address: Optional[str] = Field(default=None, alias="to")
    hash: str
    value: Optional[Union[int, float]] = None

    @property
    def is_deployment(self) -> bool:
        return self.to_address is None


class OwnedNFT(BaseModel):
    """One NFT held by a wallet, as reported by the indexer"""
    token_id: str
    token_type: Optional[str] = None
    balance: Any = None  # Raw service representation, parsed later
    contract_address: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class NFTFilter(BaseModel):
    """Caller-supplied NFT filter: optional token id plus a metadata filter"""
    token_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.token_id is None and not self.metadata


class InventorySummary(BaseModel):
    """Accumulated result of NFT inspection, in source order"""
    balance: int = 0
    nft_data: List[Dict[str, Any]] = Field(default_factory=list)


class Page(BaseModel, Generic[T]):
    """One page from a cursor-paginated source"""
    items: List[T] = Field(default_factory=list)
    cursor: Optional[Any] = None  # Opaque; only forwarded back to the source

    @property
    def has_more(self) -> bool:
        return bool(self.cursor)


class HoldingsReport(BaseModel):
    """Combined result of every inspection flow for one wallet"""
    wallet_address: str
    chain: Chain
    token_contract: Optional[str] = None
    token_balance: Optional[TokenAmount] = None
    native_balance: TokenAmount
    deployments: List[TransferRecord] = Field(default_factory=list)
    nft_contract: Optional[str] = None
    nft_inventory: Optional[InventorySummary] = None
