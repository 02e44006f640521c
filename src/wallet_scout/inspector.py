"""
Wallet holdings inspection flows
"""

import asyncio
from typing import Any, Dict, List, Optional

from loguru import logger

from .clients.base import ChainQueryClient
from .config import Config
from .matcher import MetadataMatcher
from .models import (
    HoldingsReport,
    InventorySummary,
    NFTFilter,
    OwnedNFT,
    Page,
    TokenAmount,
    TransferRecord,
)
from .normalizer import Normalizer
from .pagination import PageAggregator, as_page
from .utils import parse_count, parse_quantity

# Fixed for the supported EVM chains. Not read from the chain: a network whose
# native unit has a different precision would report wrong display values.
NATIVE_DECIMALS = 18

DEPLOYMENT_TRANSFER_QUERY = {
    "fromBlock": "0x0",
    "toBlock": "latest",
    "category": ["external"],
    "excludeZeroValue": False,
}


class HoldingsInspector:
    """Runs the inspection flows for a wallet against a chain-query client"""

    def __init__(
        self,
        client: ChainQueryClient,
        config: Optional[Config] = None,
        matcher: Optional[MetadataMatcher] = None,
    ):
        self.client = client
        self.config = config or Config()
        self.matcher = matcher or MetadataMatcher()
        self.normalizer = Normalizer()

    async def get_token_balance(self, wallet_address: str, contract_address: str) -> TokenAmount:
        """Balance of one fungible token; `{0, 0}` when not held or decimals are unknown"""
        metadata, balances = await asyncio.gather(
            self.client.get_token_metadata(contract_address),
            self.client.get_token_balances(wallet_address, [contract_address]),
        )

        decimals = (metadata or {}).get("decimals")
        entry = next(
            (
                b for b in balances or []
                if (b.get("contractAddress") or "").lower() == contract_address.lower()
            ),
            None,
        )
        if entry is None or decimals is None:
            logger.warning(f"No balance for {contract_address} in {wallet_address} (held={entry is not None}, decimals={decimals})")
            return TokenAmount(balance=0, decimals=0)

        amount = TokenAmount(balance=parse_quantity(entry.get("tokenBalance")), decimals=int(decimals))
        logger.info(f"Token balance for {wallet_address}: {amount.format()} ({contract_address})")
        return amount

    async def get_native_balance(self, wallet_address: str) -> TokenAmount:
        """Native coin balance at the latest block"""
        balance = await self.client.get_native_balance(wallet_address)
        amount = TokenAmount(balance=balance, decimals=NATIVE_DECIMALS)
        logger.info(f"Native balance for {wallet_address}: {amount.format()}")
        return amount

    async def get_deployments(self, wallet_address: str) -> List[TransferRecord]:
        """
        Contract-creation transactions sent by the wallet.

        Every outbound external transfer is drained first, then the ones with
        no recipient have their receipts fetched concurrently (at most
        `config.max_workers` in flight). Results keep the transfer order. Any
        failing receipt fetch fails the whole call.
        """
        query = dict(DEPLOYMENT_TRANSFER_QUERY, fromAddress=wallet_address)
        transfers = await PageAggregator(self.client.get_asset_transfers).drain(query)
        records = [
            t if isinstance(t, TransferRecord) else self.normalizer.normalize_alchemy_transfer(t)
            for t in transfers
        ]
        creations = [r for r in records if r.is_deployment]
        logger.info(f"{len(creations)} deployment transactions among {len(records)} transfers from {wallet_address}")

        semaphore = asyncio.Semaphore(self.config.max_workers)

        async def fetch_receipt(tx_hash: str) -> Optional[Dict[str, Any]]:
            async with semaphore:
                logger.debug(f"Fetching receipt {tx_hash}")
                return await self.client.get_transaction_receipt(tx_hash)

        receipts = await asyncio.gather(*[fetch_receipt(r.hash) for r in creations], return_exceptions=True)

        deployments = []
        for record, receipt in zip(creations, receipts):
            if isinstance(receipt, BaseException):
                logger.error(f"Receipt fetch failed for {record.hash}: {receipt}")
                raise receipt
            if not receipt:
                logger.warning(f"No receipt for {record.hash}, keeping transfer hash")
                tx_hash = record.hash
            else:
                tx_hash = receipt.get("transactionHash") or record.hash
            deployments.append(
                TransferRecord(from_address=wallet_address, to_address=None, hash=tx_hash, value=0)
            )
        return deployments

    async def _fetch_owned_nfts(self, wallet_address: str, contract_address: str) -> List[Dict[str, Any]]:
        async def fetch_page(query: Dict[str, Any]) -> Page:
            return await self.client.get_nfts_for_owner(
                wallet_address, [contract_address], page_key=query.get("pageKey")
            )

        if self.config.paginate_nfts:
            return await PageAggregator(fetch_page).drain({})

        page = as_page(await fetch_page({}))
        if page.has_more:
            logger.warning(f"NFT inventory for {wallet_address} has more pages; only the first was read")
        return list(page.items)

    def nft_matches(self, nft: OwnedNFT, nft_filter: Optional[NFTFilter]) -> bool:
        """Token-id and metadata checks for one owned NFT"""
        if nft_filter is None or nft_filter.is_empty:
            return True
        # An empty metadata object is still metadata; only a missing one skips the check
        if nft.metadata is not None and nft_filter.metadata:
            if not self.matcher.matches(nft.metadata, nft_filter.metadata):
                return False
        if nft_filter.token_id is not None and str(nft_filter.token_id) != str(nft.token_id):
            return False
        return True

    async def get_nft_inventory(
        self,
        wallet_address: str,
        contract_address: str,
        nft_filter: Optional[NFTFilter] = None,
    ) -> InventorySummary:
        """Count and collect the wallet's NFTs in one contract that pass `nft_filter`"""
        raw_nfts = await self._fetch_owned_nfts(wallet_address, contract_address)
        summary = InventorySummary()

        for raw in raw_nfts:
            nft = raw if isinstance(raw, OwnedNFT) else self.normalizer.normalize_alchemy_nft(raw)
            if not self.nft_matches(nft, nft_filter):
                continue

            count = parse_count(nft.balance)
            if count is None:
                logger.warning(f"Unparseable balance {nft.balance!r} for token {nft.token_id}, counting as 0")
            else:
                summary.balance += count
            summary.nft_data.append(self.normalizer.tag_metadata(nft))

        logger.info(f"{wallet_address} holds {summary.balance} matching NFTs in {contract_address} ({len(summary.nft_data)} tokens)")
        return summary

    async def inspect(
        self,
        wallet_address: str,
        token_contract: Optional[str] = None,
        nft_contract: Optional[str] = None,
        nft_filter: Optional[NFTFilter] = None,
    ) -> HoldingsReport:
        """Run every flow in turn and collect the results"""
        report = HoldingsReport(
            wallet_address=wallet_address,
            chain=self.config.chain,
            token_contract=token_contract,
            nft_contract=nft_contract,
            native_balance=await self.get_native_balance(wallet_address),
        )
        if token_contract:
            report.token_balance = await self.get_token_balance(wallet_address, token_contract)
        report.deployments = await self.get_deployments(wallet_address)
        if nft_contract:
            report.nft_inventory = await self.get_nft_inventory(wallet_address, nft_contract, nft_filter)
        return report
