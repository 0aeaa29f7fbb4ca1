"""Command line interface for the JustTCG client."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from justtcg.client import JustTCG
from justtcg.config import load_config
from justtcg.errors import JustTCGError
from justtcg.models import ApiResponse, BatchLookupItem, Card
from justtcg.response import describe_usage
from justtcg.state import DEFAULT_STATE_FILE, BaselineTracker
from justtcg.updates import check_for_updates

logger = logging.getLogger(__name__)

console = Console()


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Set up logging
    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )

    if not hasattr(args, "func"):
        parser.print_help()
        return

    try:
        args.func(args)
    except (JustTCGError, ValueError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="justtcg",
        description="Query the JustTCG trading card pricing API",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v info, -vv debug)",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to justtcg.yaml (default: justtcg.yaml)",
    )
    parser.add_argument(
        "--api-key",
        type=str,
        default=None,
        help="API key (overrides config and JUSTTCG_API_KEY)",
    )

    subparsers = parser.add_subparsers(title="commands", dest="command")

    # games
    games_parser = subparsers.add_parser("games", help="List supported games")
    games_parser.set_defaults(func=_cmd_games)

    # sets
    sets_parser = subparsers.add_parser("sets", help="List sets of a game")
    sets_parser.add_argument("--game", type=str, required=True, help="Game id or name, e.g. pokemon")
    sets_parser.add_argument("--query", type=str, default=None, help="Filter sets by name")
    sets_parser.add_argument("--limit", type=int, default=None, help="Page size for a single page")
    sets_parser.add_argument(
        "--all",
        action="store_true",
        help="Follow pagination and list every set",
    )
    sets_parser.set_defaults(func=_cmd_sets)

    # cards
    cards_parser = subparsers.add_parser("cards", help="Search and filter cards")
    cards_parser.add_argument("--query", type=str, default=None, help="Card name search")
    cards_parser.add_argument("--game", type=str, default=None)
    cards_parser.add_argument("--set", type=str, default=None)
    cards_parser.add_argument(
        "--condition",
        type=_csv,
        default=None,
        help="Comma-separated conditions, e.g. NM,LP",
    )
    cards_parser.add_argument(
        "--printing",
        type=_csv,
        default=None,
        help="Comma-separated printings, e.g. Foil,Normal",
    )
    cards_parser.add_argument("--order-by", choices=["price", "24h", "7d", "30d", "90d"], default=None)
    cards_parser.add_argument("--order", choices=["asc", "desc"], default=None)
    cards_parser.add_argument("--limit", type=int, default=20)
    cards_parser.set_defaults(func=_cmd_cards)

    # lookup
    lookup_parser = subparsers.add_parser("lookup", help="Batch price lookup by identifiers")
    lookup_parser.add_argument("--tcgplayer-id", action="append", default=[], help="Repeatable")
    lookup_parser.add_argument("--card-id", action="append", default=[], help="Repeatable")
    lookup_parser.add_argument("--variant-id", action="append", default=[], help="Repeatable")
    lookup_parser.set_defaults(func=_cmd_lookup)

    # watch
    watch_parser = subparsers.add_parser("watch", help="Poll a game for updated cards")
    watch_parser.add_argument("--game", type=str, required=True)
    watch_parser.add_argument(
        "--interval",
        type=float,
        default=300.0,
        help="Seconds between polls (default: 300)",
    )
    watch_parser.add_argument("--once", action="store_true", help="Run a single poll and exit")
    watch_parser.add_argument(
        "--snapshot",
        action="store_true",
        help="Fetch all cards of the game on change instead of only updated ones",
    )
    watch_parser.add_argument("--state", type=str, default=DEFAULT_STATE_FILE)
    watch_parser.set_defaults(func=_cmd_watch)

    # status
    status_parser = subparsers.add_parser("status", help="Show stored update baselines")
    status_parser.add_argument("--state", type=str, default=DEFAULT_STATE_FILE)
    status_parser.set_defaults(func=_cmd_status)

    return parser


def _csv(value: str) -> List[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def _make_client(args: argparse.Namespace) -> JustTCG:
    config = load_config(args.config)
    return JustTCG(api_key=args.api_key, config=config)


def _run(args: argparse.Namespace, command: Callable[[JustTCG], Awaitable[None]]) -> None:
    client = _make_client(args)

    async def runner() -> None:
        async with client:
            await command(client)

    asyncio.run(runner())


def _check(response: ApiResponse[Any]) -> None:
    if response.error:
        raise JustTCGError(f"API error: {response.error} (code: {response.code})")


def _format_price(value: Optional[float]) -> str:
    return "N/A" if value is None else f"${value:,.2f}"


def _format_epoch(value: Optional[int]) -> str:
    if value is None:
        return "never"
    return datetime.fromtimestamp(value, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def _cards_table(title: str, cards: List[Card]) -> Table:
    table = Table(title=title)
    table.add_column("Card", style="cyan")
    table.add_column("Set")
    table.add_column("Variant")
    table.add_column("Price", justify="right", style="green")
    table.add_column("7d", justify="right")
    for card in cards:
        variant = card.top_variant()
        if variant is None:
            table.add_row(card.name, card.set_name or card.set, "-", "N/A", "N/A")
            continue
        change = "N/A" if variant.price_change_7d is None else f"{variant.price_change_7d:+.2f}%"
        table.add_row(
            card.name,
            card.set_name or card.set,
            f"{variant.printing or 'Normal'} ({variant.condition or '?'})",
            _format_price(variant.price),
            change,
        )
    return table


# ------------------------------------------------------------------
# Command handlers
# ------------------------------------------------------------------


def _cmd_games(args: argparse.Namespace) -> None:
    async def command(client: JustTCG) -> None:
        response = await client.v1.games.list()
        _check(response)

        table = Table(title="Games")
        table.add_column("ID", style="cyan")
        table.add_column("Name")
        table.add_column("Sets", justify="right")
        table.add_column("Cards", justify="right")
        table.add_column("Last Updated")
        for g in response.data:
            table.add_row(
                g.id,
                g.name,
                "" if g.sets_count is None else str(g.sets_count),
                "" if g.cards_count is None else str(g.cards_count),
                _format_epoch(g.last_updated),
            )
        console.print(table)
        console.print(describe_usage(response.usage))

    _run(args, command)


def _cmd_sets(args: argparse.Namespace) -> None:
    async def command(client: JustTCG) -> None:
        table = Table(title=f"Sets ({args.game})")
        table.add_column("ID", style="cyan")
        table.add_column("Name")
        table.add_column("Released")

        if args.all:
            count = 0
            async with client.v1.sets.fetch_all(game=args.game, query=args.query) as sets:
                async for s in sets:
                    table.add_row(s.id, s.name, s.release_date or "")
                    count += 1
            console.print(table)
            console.print(f"Found a total of {count} sets.")
            console.print(describe_usage(sets.last_usage))
            return

        response = await client.v1.sets.list(game=args.game, query=args.query, limit=args.limit)
        _check(response)
        for s in response.data:
            table.add_row(s.id, s.name, s.release_date or "")
        console.print(table)
        if response.pagination is not None:
            console.print(
                f"Showing {len(response.data)} of {response.pagination.total} "
                f"(more: {'yes' if response.pagination.has_more else 'no'})"
            )
        console.print(describe_usage(response.usage))

    _run(args, command)


def _cmd_cards(args: argparse.Namespace) -> None:
    async def command(client: JustTCG) -> None:
        response = await client.v1.cards.get(
            query=args.query,
            game=args.game,
            set=args.set,
            condition=args.condition,
            printing=args.printing,
            order_by=args.order_by,
            order=args.order,
            limit=args.limit,
        )
        _check(response)
        if not response.data:
            console.print("No cards found matching your criteria.")
        else:
            total = response.pagination.total if response.pagination else len(response.data)
            console.print(_cards_table(f"Cards ({len(response.data)} of {total})", response.data))
        console.print(describe_usage(response.usage))

    _run(args, command)


def _cmd_lookup(args: argparse.Namespace) -> None:
    items = (
        [BatchLookupItem(tcgplayer_id=v) for v in args.tcgplayer_id]
        + [BatchLookupItem(card_id=v) for v in args.card_id]
        + [BatchLookupItem(variant_id=v) for v in args.variant_id]
    )
    if not items:
        raise ValueError("lookup needs at least one --tcgplayer-id, --card-id or --variant-id")

    async def command(client: JustTCG) -> None:
        response = await client.v1.cards.get_by_batch(items)
        _check(response)
        console.print(_cards_table("Latest Market Prices", response.data))
        console.print(describe_usage(response.usage))

    _run(args, command)


def _cmd_watch(args: argparse.Namespace) -> None:
    tracker = BaselineTracker(args.state)

    async def command(client: JustTCG) -> None:
        poll = 0
        errors = 0
        while True:
            poll += 1
            try:
                result = await check_for_updates(client, args.game, tracker, snapshot=args.snapshot)
            except JustTCGError as exc:
                if args.once:
                    raise
                errors += 1
                logger.warning("Poll %d failed: %s", poll, exc)
                console.print(
                    f"[yellow]Poll {poll}:[/yellow] failed ({errors} consecutive errors): {exc}"
                )
            else:
                errors = 0
                stamp = _format_epoch(result.current_baseline)
                if result.fetched:
                    console.print(
                        f"[green]Poll {poll}:[/green] {len(result.cards)} cards updated for "
                        f"{result.game.name} (last updated {stamp})"
                    )
                    if result.cards:
                        console.print(_cards_table("Updated cards", result.cards))
                else:
                    console.print(f"Poll {poll}: no changes for {result.game.name} (last updated {stamp})")
                console.print(describe_usage(result.usage))
            if args.once:
                return
            await asyncio.sleep(args.interval)

    try:
        _run(args, command)
    except KeyboardInterrupt:
        console.print("Stopped.")


def _cmd_status(args: argparse.Namespace) -> None:
    tracker = BaselineTracker(args.state)
    summary = tracker.summary()

    table = Table(title=f"Update baselines ({tracker.path})")
    table.add_column("Game", style="cyan")
    table.add_column("Last Updated")
    table.add_column("Checked At")
    for gid, info in summary["games"].items():
        table.add_row(gid, _format_epoch(info["last_updated"]), info["checked_at"] or "never")
    console.print(table)
    console.print(f"Games tracked: {summary['games_tracked']}")
