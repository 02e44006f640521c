"""Normalize indexer responses to models"""

from typing import Any, Dict, Optional

from loguru import logger

from .models import OwnedNFT, TransferRecord
from .utils import parse_token_id


class Normalizer:
    """Convert Alchemy-specific payloads to models"""

    @staticmethod
    def normalize_alchemy_transfer(data: Dict[str, Any]) -> TransferRecord:
        """Normalize an alchemy_getAssetTransfers entry; a null `to` is kept as None"""
        return TransferRecord(
            from_address=data.get("from") or "",
            to_address=data.get("to") or None,
            hash=data.get("hash", ""),
            value=data.get("value"),
        )

    @staticmethod
    def normalize_alchemy_nft(data: Dict[str, Any]) -> OwnedNFT:
        """Normalize a getNFTsForOwner (v3) entry"""
        raw = data.get("raw") or {}
        metadata = raw.get("metadata")
        if metadata is not None and not isinstance(metadata, dict):
            # Unparseable tokenURI payloads come back as strings
            logger.debug(f"Ignoring non-object metadata for token {data.get('tokenId')}")
            metadata = None

        return OwnedNFT(
            token_id=str(data.get("tokenId", "")),
            token_type=data.get("tokenType"),
            balance=data.get("balance"),
            contract_address=(data.get("contract") or {}).get("address"),
            metadata=metadata,
        )

    @staticmethod
    def tag_metadata(nft: OwnedNFT) -> Dict[str, Any]:
        """Copy of the NFT's metadata tagged with its numeric token id and token type"""
        tagged: Dict[str, Any] = dict(nft.metadata or {})
        tagged["tokenId"] = Normalizer.numeric_token_id(nft.token_id)
        tagged["tokenType"] = nft.token_type
        return tagged

    @staticmethod
    def numeric_token_id(token_id: str) -> Optional[int]:
        try:
            return parse_token_id(token_id)
        except ValueError:
            logger.warning(f"Token id {token_id!r} is not numeric")
            return None
