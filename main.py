#!/usr/bin/env python3
"""
Wallet Scout CLI entrypoint
"""

from wallet_scout.cli import app

if __name__ == "__main__":
    app()
