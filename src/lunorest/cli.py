"""Typer-based CLI for the Luno REST client."""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .errors import LunoError

if TYPE_CHECKING:
    from .exchanges.luno import LunoClient


def _load_settings(config_path: Optional[Path] = None):
    from .config import load_settings
    return load_settings(config_path)


def _create_client(settings) -> "LunoClient":
    from .exchanges.init import create_client_from_settings
    return create_client_from_settings(settings)


app = typer.Typer(help="Luno exchange REST client")
console = Console()
logger = logging.getLogger(__name__)


def run_cli(argv: list[str] | None = None) -> None:
    """Run CLI with optional argv parameter."""
    app(argv)


def _run(config: Optional[Path], action: Callable[["LunoClient"], Awaitable[Any]]) -> Any:
    """Build a client, run one async action against it and always close it."""

    async def _runner() -> Any:
        client = _create_client(_load_settings(config))
        try:
            return await action(client)
        finally:
            await client.close()

    try:
        return asyncio.run(_runner())
    except (LunoError, ValueError) as e:
        logger.error("Command failed: %s", e, exc_info=True)
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _fmt(value: Decimal | None) -> str:
    return "-" if value is None else f"{value:f}"


def _parse_decimal_option(value: str, name: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation:
        raise typer.BadParameter(f"{value!r} is not a number", param_hint=name) from None


@app.command()
def markets(config: Optional[Path] = typer.Option(None, "--config", help="Path to config file")) -> None:
    """List tradable markets."""
    result = _run(config, lambda client: client.list_markets())

    table = Table(title="Markets")
    table.add_column("Symbol", style="green")
    table.add_column("Id", style="cyan")
    table.add_column("Base")
    table.add_column("Quote")
    for market in result:
        table.add_row(market.symbol, market.id, market.base, market.quote)
    console.print(table)


@app.command()
def ticker(
    symbol: str = typer.Argument(..., help="Canonical symbol, e.g. BTC/ZAR"),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config file"),
) -> None:
    """Show the ticker of one market."""
    t = _run(config, lambda client: client.get_ticker(symbol))
    console.print(Panel.fit(
        f"Bid: [green]{_fmt(t.bid)}[/green]\n"
        f"Ask: [red]{_fmt(t.ask)}[/red]\n"
        f"Last: {_fmt(t.last)}\n"
        f"24h quote volume: {_fmt(t.quote_volume)}\n"
        f"Time: {t.datetime}",
        title=f"Ticker {t.symbol}",
    ))


@app.command()
def tickers(config: Optional[Path] = typer.Option(None, "--config", help="Path to config file")) -> None:
    """Show tickers of every market."""
    result = _run(config, lambda client: client.get_tickers())

    table = Table(title="Tickers")
    table.add_column("Symbol", style="green")
    table.add_column("Bid")
    table.add_column("Ask")
    table.add_column("Last")
    table.add_column("Quote volume")
    for sym, t in result.items():
        table.add_row(sym, _fmt(t.bid), _fmt(t.ask), _fmt(t.last), _fmt(t.quote_volume))
    console.print(table)


@app.command("order-book")
def order_book(
    symbol: str = typer.Argument(..., help="Canonical symbol, e.g. BTC/ZAR"),
    depth: int = typer.Option(10, help="Levels to show per side"),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config file"),
) -> None:
    """Show the top of the order book."""
    book = _run(config, lambda client: client.get_order_book(symbol))

    table = Table(title=f"Order book {symbol} ({book.datetime})")
    table.add_column("Bid volume", style="green")
    table.add_column("Bid price", style="green")
    table.add_column("Ask price", style="red")
    table.add_column("Ask volume", style="red")
    for i in range(min(depth, max(len(book.bids), len(book.asks)))):
        bid = book.bids[i] if i < len(book.bids) else (None, None)
        ask = book.asks[i] if i < len(book.asks) else (None, None)
        table.add_row(_fmt(bid[1]), _fmt(bid[0]), _fmt(ask[0]), _fmt(ask[1]))
    console.print(table)


@app.command()
def trades(
    symbol: str = typer.Argument(..., help="Canonical symbol, e.g. BTC/ZAR"),
    since: Optional[int] = typer.Option(None, help="Only trades after this epoch-ms timestamp"),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config file"),
) -> None:
    """Show recent public trades."""
    result = _run(config, lambda client: client.get_trades(symbol, since=since))

    if not result:
        console.print("[yellow]No trades found[/yellow]")
        return

    table = Table(title=f"Trades {symbol}")
    table.add_column("Time", style="dim")
    table.add_column("Side")
    table.add_column("Price")
    table.add_column("Amount")
    for trade in result:
        style = "green" if trade.side == "buy" else "red"
        table.add_row(trade.datetime, f"[{style}]{trade.side}[/{style}]", _fmt(trade.price), _fmt(trade.amount))
    console.print(table)


@app.command()
def balance(config: Optional[Path] = typer.Option(None, "--config", help="Path to config file")) -> None:
    """Show account balances."""
    result = _run(config, lambda client: client.get_balance())

    if not len(result):
        console.print("[yellow]No balances found[/yellow]")
        return

    table = Table(title="Balances")
    table.add_column("Currency", style="cyan")
    table.add_column("Free", style="green")
    table.add_column("Used", style="yellow")
    table.add_column("Total", style="bold")
    for currency in result:
        account = result[currency]
        table.add_row(currency, _fmt(account.free), _fmt(account.used), _fmt(account.total))
    console.print(table)


@app.command("order-place")
def order_place(
    symbol: str = typer.Argument(..., help="Canonical symbol, e.g. BTC/ZAR"),
    order_type: str = typer.Option(..., "--type", help="market or limit"),
    side: str = typer.Option(..., help="buy or sell"),
    amount: str = typer.Option(..., help="Quote amount for market buys, base amount otherwise"),
    price: Optional[str] = typer.Option(None, help="Limit price"),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config file"),
) -> None:
    """Place a market or limit order."""
    amount_value = _parse_decimal_option(amount, "--amount")
    price_value = _parse_decimal_option(price, "--price") if price is not None else None

    result = _run(
        config,
        lambda client: client.place_order(symbol, order_type, side, amount_value, price_value),
    )
    console.print(Panel.fit(
        f"[green]✓ Order placed[/green]\n"
        f"Order ID: {result.id}\n"
        f"Symbol: {symbol}\n"
        f"Type: {order_type} {side}\n"
        f"Amount: {amount}" + (f"\nPrice: {price}" if price is not None else ""),
        title="Order Place",
    ))


@app.command("order-cancel")
def order_cancel(
    order_id: str = typer.Argument(..., help="Order ID to cancel"),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config file"),
) -> None:
    """Cancel an open order."""
    result = _run(config, lambda client: client.cancel_order(order_id))
    success = isinstance(result, dict) and result.get("success")
    if success:
        console.print(f"[green]✓ Order {order_id} cancelled[/green]")
    else:
        console.print(f"[yellow]Cancel request sent for {order_id}:[/yellow] {result}")


def main():
    """CLI main entry point."""
    app()


if __name__ == "__main__":
    main()
