#!/usr/bin/env python3
"""
Check Alchemy API Connection
Quick check that the configured key and network answer the calls the inspector needs
"""

import asyncio
import sys

from wallet_scout.clients.alchemy import AlchemyClient
from wallet_scout.config import Config
from wallet_scout.exceptions import WalletScoutError

# Well-known mainnet addresses
PROBE_WALLET = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"
PROBE_TOKEN = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"  # USDC


async def check_alchemy(config: Config) -> bool:
    """Call the native-balance and token-metadata endpoints once each"""
    print(f"🔍 Checking Alchemy on {config.chain.value}...")
    print("=" * 50)

    try:
        async with AlchemyClient(config) as client:
            print("  ✅ Client created")

            balance = await client.get_native_balance(PROBE_WALLET)
            print(f"  ✅ eth_getBalance answered ({balance} wei for the probe wallet)")

            metadata = await client.get_token_metadata(PROBE_TOKEN)
            print(f"  ✅ alchemy_getTokenMetadata answered (symbol={metadata.get('symbol', 'N/A')}, decimals={metadata.get('decimals', 'N/A')})")
            return True
    except WalletScoutError as e:
        print(f"  ❌ {e}")
        print("  💡 Check ALCHEMY_API_KEY and ALCHEMY_CHAIN in your .env file")
        return False
    except Exception as e:
        error_msg = str(e)
        if "401" in error_msg or "403" in error_msg:
            print(f"  ❌ API Key Error: {e}")
            print("  💡 Your Alchemy API key may be invalid or lack access to this network")
        else:
            print(f"  ❌ Request failed: {e}")
            print("  💡 This might be a temporary issue or network problem")
        return False


def main() -> int:
    config = Config.from_env()
    ok = asyncio.run(check_alchemy(config))
    print()
    print("=" * 50)
    print("✅ Alchemy is configured and working!" if ok else "❌ Alchemy check failed")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
