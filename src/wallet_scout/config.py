"""
Configuration management for Wallet Scout
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from .exceptions import ConfigError
from .models import Chain

DEFAULT_ENV_PATH = Path(__file__).parent.parent.parent / ".env"


@dataclass
class APIConfig:
    """Connection settings for the chain-indexing service"""
    key: str
    network: str
    base_url: str = "https://{network}.g.alchemy.com"

    @property
    def rpc_url(self) -> str:
        return f"{self.base_url.format(network=self.network)}/v2/{self.key}"

    @property
    def nft_url(self) -> str:
        return f"{self.base_url.format(network=self.network)}/nft/v3/{self.key}"


@dataclass
class Config:
    """Main configuration class"""

    alchemy_api_key: Optional[str] = None
    chain: Chain = Chain.ETHEREUM
    alchemy_base_url: str = "https://{network}.g.alchemy.com"

    # Request settings
    timeout: int = 30
    max_retries: int = 3
    max_workers: int = 10  # Upper bound on concurrent receipt fetches

    # NFT inventory
    nft_page_size: int = 100
    paginate_nfts: bool = False

    # Inputs for the demo command
    demo_wallet: Optional[str] = None
    demo_token_contract: Optional[str] = None
    demo_nft_contract: Optional[str] = None

    def __post_init__(self):
        if self.max_workers < 1:
            raise ConfigError("max_workers must be at least 1")
        if self.max_retries < 1:
            raise ConfigError("max_retries must be at least 1")

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None) -> "Config":
        """Load configuration from environment variables (and a .env file)"""
        load_dotenv(env_file or DEFAULT_ENV_PATH)

        def get_int(name: str, default: int) -> int:
            raw = os.getenv(name)
            if raw is None or raw.strip() == "":
                return default
            try:
                return int(raw)
            except ValueError:
                raise ConfigError(f"{name} must be an integer, got {raw!r}")

        def get_bool(name: str, default: bool) -> bool:
            raw = os.getenv(name)
            if raw is None:
                return default
            return raw.strip().lower() in ("1", "true", "yes", "on")

        return cls(
            alchemy_api_key=os.getenv("ALCHEMY_API_KEY") or None,
            chain=Chain.from_string(os.getenv("ALCHEMY_CHAIN", "ethereum")),
            timeout=get_int("TIMEOUT", 30),
            max_retries=get_int("MAX_RETRIES", 3),
            max_workers=get_int("MAX_WORKERS", 10),
            nft_page_size=get_int("NFT_PAGE_SIZE", 100),
            paginate_nfts=get_bool("PAGINATE_NFTS", False),
            demo_wallet=os.getenv("DEMO_WALLET") or None,
            demo_token_contract=os.getenv("DEMO_TOKEN_CONTRACT") or None,
            demo_nft_contract=os.getenv("DEMO_NFT_CONTRACT") or None,
        )

    def get_alchemy_config(self) -> APIConfig:
        """Get Alchemy API config"""
        if not self.alchemy_api_key:
            raise ConfigError("Alchemy API key not configured (set ALCHEMY_API_KEY)")
        return APIConfig(
            key=self.alchemy_api_key,
            network=self.chain.network,
            base_url=self.alchemy_base_url,
        )
