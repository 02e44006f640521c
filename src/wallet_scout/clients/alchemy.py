"""Alchemy API client for EVM chains"""

from typing import Any, Dict, List, Optional, Sequence

import aiohttp
from loguru import logger

from ..config import Config
from ..models import Page
from ..utils import parse_quantity
from .base import BaseAPIClient


class AlchemyClient(BaseAPIClient):
    """Alchemy API client"""

    def __init__(self, config: Config, session: Optional[aiohttp.ClientSession] = None):
        super().__init__(timeout=config.timeout, max_retries=config.max_retries, session=session)
        self.api_config = config.get_alchemy_config()
        self.page_size = config.nft_page_size

    @property
    def network(self) -> str:
        return self.api_config.network

    async def _call(self, method: str, params: List[Any]) -> Any:
        try:
            return await self._rpc(self.api_config.rpc_url, method, params)
        except Exception as e:
            logger.error(f"Alchemy {method} error: {e}")
            raise

    async def get_token_metadata(self, contract_address: str) -> Dict[str, Any]:
        """alchemy_getTokenMetadata"""
        return await self._call("alchemy_getTokenMetadata", [contract_address]) or {}

    async def get_token_balances(
        self,
        wallet_address: str,
        contract_addresses: Sequence[str],
    ) -> List[Dict[str, Any]]:
        """alchemy_getTokenBalances restricted to `contract_addresses`"""
        result = await self._call("alchemy_getTokenBalances", [wallet_address, list(contract_addresses)])
        return (result or {}).get("tokenBalances", [])

    async def get_native_balance(self, wallet_address: str) -> int:
        """eth_getBalance at the latest block"""
        result = await self._call("eth_getBalance", [wallet_address, "latest"])
        return parse_quantity(result)

    async def get_asset_transfers(self, query: Dict[str, Any]) -> Page:
        """alchemy_getAssetTransfers; `query` is passed through as the single param object"""
        result = await self._call("alchemy_getAssetTransfers", [query]) or {}
        return Page(items=result.get("transfers", []), cursor=result.get("pageKey"))

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        """eth_getTransactionReceipt"""
        return await self._call("eth_getTransactionReceipt", [tx_hash])

    async def get_nfts_for_owner(
        self,
        wallet_address: str,
        contract_addresses: Sequence[str],
        page_key: Optional[str] = None,
    ) -> Page:
        """NFT API v3 getNFTsForOwner"""
        params: List[Any] = [
            ("owner", wallet_address),
            ("withMetadata", "true"),
            ("pageSize", str(min(self.page_size, 100))),
        ]
        params.extend(("contractAddresses[]", address) for address in contract_addresses)
        if page_key:
            params.append(("pageKey", page_key))

        url = f"{self.api_config.nft_url}/getNFTsForOwner"
        try:
            response = await self._request("GET", url, params=params)
        except Exception as e:
            logger.error(f"Alchemy get_nfts_for_owner error: {e}")
            raise

        logger.debug(f"getNFTsForOwner: {len(response.get('ownedNfts', []))} of {response.get('totalCount')} NFTs")
        return Page(items=response.get("ownedNfts", []), cursor=response.get("pageKey"))
