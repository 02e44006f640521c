"""Shared fixtures: an in-memory chain-query client"""

from typing import Any, Dict, List, Optional, Sequence

import pytest

from wallet_scout.clients.base import ChainQueryClient
from wallet_scout.config import Config
from wallet_scout.models import Page

WALLET = "0x1111111111111111111111111111111111111111"
TOKEN = "0x2222222222222222222222222222222222222222"
NFT_CONTRACT = "0x3333333333333333333333333333333333333333"


class FakeChainClient(ChainQueryClient):
    """Serves canned responses and records every call"""

    def __init__(
        self,
        token_metadata: Optional[Dict[str, Any]] = None,
        token_balances: Optional[List[Dict[str, Any]]] = None,
        native_balance: int = 0,
        transfer_pages: Optional[List[Page]] = None,
        receipts: Optional[Dict[str, Any]] = None,
        nft_pages: Optional[List[Page]] = None,
    ):
        self.token_metadata = token_metadata or {}
        self.token_balances = token_balances or []
        self.native_balance = native_balance
        self.transfer_pages = transfer_pages or [Page()]
        self.receipts = receipts or {}
        self.nft_pages = nft_pages or [Page()]
        self.calls: List[tuple] = []

    async def __aenter__(self) -> "FakeChainClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        return None

    async def get_token_metadata(self, contract_address: str) -> Dict[str, Any]:
        self.calls.append(("get_token_metadata", contract_address))
        return self.token_metadata

    async def get_token_balances(self, wallet_address: str, contract_addresses: Sequence[str]) -> List[Dict[str, Any]]:
        self.calls.append(("get_token_balances", wallet_address, list(contract_addresses)))
        return self.token_balances

    async def get_native_balance(self, wallet_address: str) -> int:
        self.calls.append(("get_native_balance", wallet_address))
        return self.native_balance

    async def get_asset_transfers(self, query: Dict[str, Any]) -> Page:
        self.calls.append(("get_asset_transfers", dict(query)))
        index = sum(1 for call in self.calls if call[0] == "get_asset_transfers") - 1
        return self.transfer_pages[index]

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        self.calls.append(("get_transaction_receipt", tx_hash))
        receipt = self.receipts.get(tx_hash, {"transactionHash": tx_hash})
        if isinstance(receipt, Exception):
            raise receipt
        return receipt

    async def get_nfts_for_owner(
        self,
        wallet_address: str,
        contract_addresses: Sequence[str],
        page_key: Optional[str] = None,
    ) -> Page:
        self.calls.append(("get_nfts_for_owner", wallet_address, list(contract_addresses), page_key))
        index = sum(1 for call in self.calls if call[0] == "get_nfts_for_owner") - 1
        return self.nft_pages[index]

    def calls_to(self, name: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == name]


def make_transfer(tx_hash: str, to: Optional[str] = "0x4444444444444444444444444444444444444444") -> Dict[str, Any]:
    return {"from": WALLET, "to": to, "hash": tx_hash, "value": 0.5, "category": "external"}


def make_nft(token_id: str, balance: Any = "1", metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {
        "contract": {"address": NFT_CONTRACT},
        "tokenId": token_id,
        "tokenType": "ERC721",
        "balance": balance,
        "raw": {"metadata": metadata if metadata is not None else {}},
    }


@pytest.fixture
def config() -> Config:
    return Config(alchemy_api_key="test-key", max_workers=2)


@pytest.fixture
def fake_client() -> FakeChainClient:
    return FakeChainClient()
