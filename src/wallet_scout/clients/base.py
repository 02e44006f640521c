"""Base client with common functionality"""

import asyncio
from abc import ABC, abstractmethod
from itertools import count
from typing import Any, Dict, List, Optional, Sequence

import aiohttp
from loguru import logger
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..exceptions import ChainQueryError
from ..models import Page


class ChainQueryClient(ABC):
    """Chain-query capabilities consumed by the holdings inspector"""

    @abstractmethod
    async def get_token_metadata(self, contract_address: str) -> Dict[str, Any]:
        """Token metadata; `decimals` may be missing or None"""

    @abstractmethod
    async def get_token_balances(
        self,
        wallet_address: str,
        contract_addresses: Sequence[str],
    ) -> List[Dict[str, Any]]:
        """Entries of `{contractAddress, tokenBalance}`; `tokenBalance` may be None"""

    @abstractmethod
    async def get_native_balance(self, wallet_address: str) -> int:
        """Native balance in base units at the latest block"""

    @abstractmethod
    async def get_asset_transfers(self, query: Dict[str, Any]) -> Page:
        """One page of transfers; the cursor is the service's `pageKey`"""

    @abstractmethod
    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        """Receipt with `transactionHash`, or None when unknown"""

    @abstractmethod
    async def get_nfts_for_owner(
        self,
        wallet_address: str,
        contract_addresses: Sequence[str],
        page_key: Optional[str] = None,
    ) -> Page:
        """One page of raw owned-NFT entries"""


class BaseAPIClient(ChainQueryClient):
    """HTTP plumbing with retry logic; the session lives for one `async with` block"""

    def __init__(
        self,
        timeout: int = 30,
        max_retries: int = 3,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.timeout = timeout
        self.max_retries = max_retries
        self._session = session
        self._own_session = session is None
        self._ids = count(1)

    async def __aenter__(self) -> "BaseAPIClient":
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"Content-Type": "application/json"},
            )
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._own_session and self._session is not None:
            await self._session.close()
            self._session = None

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError(f"{type(self).__name__} used outside 'async with'")
        return self._session

    async def _request(
        self,
        method: str,
        url: str,
        params: Optional[Any] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Make HTTP request with retry logic"""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            retry=retry_if_exception_type((aiohttp.ClientError, asyncio.TimeoutError)),
            reraise=True,
        ):
            with attempt:
                try:
                    async with self.session.request(
                        method=method,
                        url=url,
                        params=params,
                        json=json_data,
                    ) as response:
                        response.raise_for_status()
                        return await response.json()
                except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                    logger.error(f"Request failed (attempt {attempt.retry_state.attempt_number}): {e}")
                    raise

    async def _rpc(self, url: str, method: str, params: List[Any]) -> Any:
        """JSON-RPC 2.0 call returning the unwrapped `result`"""
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        logger.debug(f"RPC {method}")
        body = await self._request("POST", url, json_data=payload)

        if not isinstance(body, dict):
            raise ChainQueryError("Malformed JSON-RPC response", method=method)
        if body.get("error"):
            error = body["error"]
            if not isinstance(error, dict):
                raise ChainQueryError(str(error), method=method)
            raise ChainQueryError(error.get("message", "Unknown error"), method=method, code=error.get("code"))
        if "result" not in body:
            raise ChainQueryError("JSON-RPC response has no result", method=method)
        return body["result"]
