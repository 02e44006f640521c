"""
Wallet Scout CLI
"""

import asyncio
import json
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, TypeVar

import typer
from loguru import logger
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .clients.alchemy import AlchemyClient
from .config import Config
from .exceptions import ConfigError
from .inspector import HoldingsInspector
from .logging import configure_logging
from .models import Chain, HoldingsReport, InventorySummary, NFTFilter, TokenAmount, TransferRecord
from .utils import require_address, shorten

T = TypeVar("T")

app = typer.Typer(help="Wallet Scout - inspect a wallet's on-chain holdings")
console = Console()

# Swapped out in tests
client_factory: Callable[[Config], AlchemyClient] = AlchemyClient


@app.callback()
def main(
    ctx: typer.Context,
    chain: Optional[str] = typer.Option(None, help="Network (ethereum, sepolia, polygon, arbitrum, optimism, base)"),
    env_file: Optional[str] = typer.Option(None, "--env-file", help="Path to a .env file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors"),
):
    """Inspect fungible, native and NFT holdings plus contract deployments"""
    configure_logging("DEBUG" if verbose else "WARNING" if quiet else "INFO")
    try:
        config = Config.from_env(env_file)
    except ConfigError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        raise typer.Exit(code=1)
    if chain:
        config.chain = Chain.from_string(chain)
    ctx.obj = config


def _run(config: Config, description: str, flow: Callable[[HoldingsInspector], Awaitable[T]]) -> T:
    """Run one flow inside a client session; the only place failures are caught"""

    async def runner() -> T:
        async with client_factory(config) as client:
            inspector = HoldingsInspector(client, config)
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                progress.add_task(description, total=None)
                return await flow(inspector)

    try:
        return asyncio.run(runner())
    except Exception as e:
        logger.debug(f"{description} failed: {e!r}")
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)


def _address(value: str, label: str) -> str:
    try:
        return require_address(value, label)
    except ValueError as e:
        console.print(f"[bold red]{e}[/bold red]")
        raise typer.Exit(code=2)


def _split_pair(text: str, option: str) -> Tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep or not key.strip():
        raise typer.BadParameter(f"expected KEY=VALUE, got {text!r}", param_hint=option)
    return key.strip(), value.strip()


def _scalar(value: str) -> Any:
    """JSON scalars (numbers, true/false, null) are decoded; anything else stays a string"""
    try:
        decoded = json.loads(value)
    except ValueError:
        return value
    return decoded if not isinstance(decoded, (dict, list)) else value


def build_filter(fields: List[str], traits: List[str], token_id: Optional[str]) -> NFTFilter:
    """NFTFilter from repeated --field KEY=VALUE and --trait TYPE=VALUE options"""
    metadata: Dict[str, Any] = {}
    for item in fields:
        key, value = _split_pair(item, "--field")
        metadata[key] = _scalar(value)
    if traits:
        metadata["attributes"] = [
            {"trait_type": name, "value": value}
            for name, value in (_split_pair(item, "--trait") for item in traits)
        ]
    return NFTFilter(token_id=token_id, metadata=metadata)


def print_amount(title: str, amount: TokenAmount, unit: str = "") -> None:
    console.print(
        f"[bold green]{title}:[/bold green] {amount.format()} {unit}".rstrip()
        + f" [dim]({amount.balance} base units, {amount.decimals} decimals)[/dim]"
    )


def print_deployments(deployments: List[TransferRecord]) -> None:
    console.print(f"\n[bold green]Found {len(deployments)} contract deployments[/bold green]")
    if not deployments:
        return
    table = Table(title="Deployments")
    table.add_column("#", style="dim")
    table.add_column("From", style="cyan")
    table.add_column("Transaction", style="yellow")
    for index, record in enumerate(deployments, start=1):
        table.add_row(str(index), shorten(record.from_address), record.hash)
    console.print(table)


def print_inventory(summary: InventorySummary, limit: int = 20) -> None:
    console.print(
        f"\n[bold green]Matching NFT balance: {summary.balance}[/bold green] "
        f"({len(summary.nft_data)} tokens)"
    )
    if not summary.nft_data:
        return
    table = Table(title="NFTs")
    table.add_column("Token ID", style="yellow")
    table.add_column("Type", style="magenta")
    table.add_column("Name", style="white")
    table.add_column("Traits", style="cyan")
    for item in summary.nft_data[:limit]:
        traits = ", ".join(
            f"{attr.get('trait_type')}={attr.get('value')}"
            for attr in item.get("attributes") or []
            if isinstance(attr, dict)
        )
        token_id = str(item.get("tokenId"))
        table.add_row(
            token_id[:20] + "..." if len(token_id) > 20 else token_id,
            item.get("tokenType") or "-",
            str(item.get("name") or "Unnamed"),
            traits or "-",
        )
    console.print(table)
    if len(summary.nft_data) > limit:
        console.print(f"\n[dim]... and {len(summary.nft_data) - limit} more[/dim]")


def print_report(report: HoldingsReport) -> None:
    console.print(f"\n[bold]Holdings for {report.wallet_address} on {report.chain.value}[/bold]")
    print_amount("Native balance", report.native_balance)
    if report.token_balance is not None:
        print_amount(f"Token balance ({shorten(report.token_contract)})", report.token_balance)
    print_deployments(report.deployments)
    if report.nft_inventory is not None:
        print_inventory(report.nft_inventory)


@app.command("token-balance")
def token_balance(
    ctx: typer.Context,
    wallet: str = typer.Argument(..., help="Wallet address"),
    contract: str = typer.Argument(..., help="ERC-20 contract address"),
):
    """Balance of one fungible token"""
    wallet, contract = _address(wallet, "wallet address"), _address(contract, "contract address")
    amount = _run(
        ctx.obj,
        f"Fetching token balance for {wallet}...",
        lambda inspector: inspector.get_token_balance(wallet, contract),
    )
    print_amount("Token balance", amount)


@app.command("native-balance")
def native_balance(
    ctx: typer.Context,
    wallet: str = typer.Argument(..., help="Wallet address"),
):
    """Native coin balance at the latest block"""
    wallet = _address(wallet, "wallet address")
    amount = _run(
        ctx.obj,
        f"Fetching native balance for {wallet}...",
        lambda inspector: inspector.get_native_balance(wallet),
    )
    print_amount("Native balance", amount)


@app.command()
def deployments(
    ctx: typer.Context,
    wallet: str = typer.Argument(..., help="Wallet address"),
):
    """Contracts deployed by the wallet"""
    wallet = _address(wallet, "wallet address")
    result = _run(
        ctx.obj,
        f"Scanning transfers from {wallet}...",
        lambda inspector: inspector.get_deployments(wallet),
    )
    print_deployments(result)


@app.command()
def nfts(
    ctx: typer.Context,
    wallet: str = typer.Argument(..., help="Wallet address"),
    contract: str = typer.Argument(..., help="NFT contract address"),
    field: List[str] = typer.Option([], "--field", "-f", help="Metadata field filter KEY=VALUE (repeatable)"),
    trait: List[str] = typer.Option([], "--trait", "-t", help="Trait filter TYPE=VALUE (repeatable)"),
    token_id: Optional[str] = typer.Option(None, "--token-id", help="Only this token id"),
    all_pages: bool = typer.Option(False, "--all-pages", help="Read every page of the inventory"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output file (JSON)"),
):
    """NFTs held in one contract, filtered by metadata"""
    wallet, contract = _address(wallet, "wallet address"), _address(contract, "contract address")
    nft_filter = build_filter(field, trait, token_id)
    config: Config = ctx.obj
    if all_pages:
        config.paginate_nfts = True

    summary = _run(
        config,
        f"Fetching NFTs for {wallet}...",
        lambda inspector: inspector.get_nft_inventory(wallet, contract, nft_filter),
    )
    print_inventory(summary)

    if output:
        with open(output, "w") as f:
            json.dump(summary.model_dump(), f, indent=2, default=str)
        console.print(f"\n[green]Saved to {output}[/green]")


@app.command()
def demo(
    ctx: typer.Context,
    wallet: Optional[str] = typer.Option(None, help="Wallet address (default: DEMO_WALLET)"),
    token_contract: Optional[str] = typer.Option(None, help="ERC-20 contract (default: DEMO_TOKEN_CONTRACT)"),
    nft_contract: Optional[str] = typer.Option(None, help="NFT contract (default: DEMO_NFT_CONTRACT)"),
    trait: List[str] = typer.Option([], "--trait", "-t", help="Trait filter TYPE=VALUE (repeatable)"),
):
    """Run every inspection flow for one wallet"""
    config: Config = ctx.obj
    wallet = wallet or config.demo_wallet
    if not wallet:
        console.print("[bold red]No wallet given (pass --wallet or set DEMO_WALLET)[/bold red]")
        raise typer.Exit(code=2)
    wallet = _address(wallet, "wallet address")
    token_contract = token_contract or config.demo_token_contract
    nft_contract = nft_contract or config.demo_nft_contract
    if token_contract:
        token_contract = _address(token_contract, "token contract")
    if nft_contract:
        nft_contract = _address(nft_contract, "NFT contract")
    nft_filter = build_filter([], trait, None)

    report = _run(
        config,
        f"Inspecting {wallet}...",
        lambda inspector: inspector.inspect(wallet, token_contract, nft_contract, nft_filter),
    )
    print_report(report)


if __name__ == "__main__":
    app()
