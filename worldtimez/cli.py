"""CLI entrypoint for the world clock board."""
from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from worldtimez.config.settings import get_settings
from worldtimez.config.timezones import count_cities, search_cities
from worldtimez.core.errors import InvalidZone
from worldtimez.data.database import create_db_engine
from worldtimez.data.persistence import EntryStore
from worldtimez.data.store import SqlKeyValueStore
from worldtimez.tasks.session import EntryView, WorldClockSession
from worldtimez.utils.logging import setup_logging
from worldtimez.utils.time_utils import parse_instant

logger = logging.getLogger("worldtimez.cli")

_PALETTES = {
    "light": {"header": "bold blue", "selected": "bold white on blue", "muted": "grey42"},
    "dark": {"header": "bold cyan", "selected": "bold black on cyan", "muted": "grey62"},
}

# Slots shown either side of the selected one.
_SLOT_SPAN = 4


def _slot_strip(view: EntryView, palette: dict[str, str]) -> Text:
    strip = Text()
    for slot in view.slots:
        if abs(slot.offset_index) > _SLOT_SPAN:
            continue
        style = palette["selected"] if slot.is_selected else palette["muted"]
        strip.append(f" {slot.label} ", style=style)
    return strip


def build_board(views: Sequence[EntryView], theme: str) -> Table:
    palette = _PALETTES.get(theme, _PALETTES["light"])
    table = Table(box=box.ROUNDED, header_style=palette["header"], expand=False)
    table.add_column("Key", style=palette["muted"])
    table.add_column("Location", style="bold")
    table.add_column("Offset")
    table.add_column("Date")
    table.add_column("Slots")
    for view in views:
        table.add_row(
            view.entry.key,
            view.entry.title,
            view.info.offset_label,
            view.info.date_label,
            _slot_strip(view, palette),
        )
    return table


def open_session(database_url: Optional[str] = None) -> WorldClockSession:
    settings = get_settings()
    engine = create_db_engine(database_url or settings.database_url)
    store = EntryStore(SqlKeyValueStore(engine), settings=settings)
    return WorldClockSession.start(store, settings=settings)


def _cmd_show(session: WorldClockSession, args: argparse.Namespace, console: Console) -> int:
    if args.at:
        try:
            session.select_slot(parse_instant(args.at))
        except (ValueError, OverflowError):
            console.print(f"Cannot read time {args.at!r}, expected ISO 8601")
            return 2
    console.print(build_board(session.render(), session.theme))
    return 0


def _cmd_search(session: WorldClockSession, args: argparse.Namespace, console: Console) -> int:
    matches = search_cities(args.query, limit=args.limit)
    if not matches:
        console.print(f"No cities match {args.query!r} ({count_cities()} cities known)")
        return 1
    for position, record in enumerate(matches, start=1):
        console.print(f"{position:>2}. {record.name}, {record.country} [{record.timezone}]", markup=False, highlight=False)
    return 0


def _cmd_add(session: WorldClockSession, args: argparse.Namespace, console: Console) -> int:
    matches = search_cities(args.query, limit=0)
    if not 1 <= args.pick <= len(matches):
        console.print(f"No match #{args.pick} for {args.query!r}")
        return 1
    try:
        entry = matches[args.pick - 1].to_entry()
    except InvalidZone as exc:
        logger.error("Cannot add %s: %s", matches[args.pick - 1].name, exc)
        return 1
    session.add(entry)
    console.print(build_board(session.render(), session.theme))
    return 0


def _cmd_remove(session: WorldClockSession, args: argparse.Namespace, console: Console) -> int:
    session.delete_key(args.key)
    console.print(build_board(session.render(), session.theme))
    return 0


def _cmd_move(session: WorldClockSession, args: argparse.Namespace, console: Console) -> int:
    session.reorder(args.from_key, args.to_key)
    console.print(build_board(session.render(), session.theme))
    return 0


def _cmd_theme(session: WorldClockSession, args: argparse.Namespace, console: Console) -> int:
    if args.toggle:
        session.toggle_theme()
    console.print(session.theme)
    return 0


def _cmd_reset(session: WorldClockSession, args: argparse.Namespace, console: Console) -> int:
    session.reset()
    console.print(build_board(session.render(), session.theme))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="worldtimez", description="Compare times across world locations")
    parser.add_argument("--database-url", default=None, help="SQLAlchemy URL of the store (defaults to settings)")
    parser.add_argument("--verbose", action="store_true", help="Log debug output")
    commands = parser.add_subparsers(dest="command", required=True)

    show = commands.add_parser("show", help="Show every tracked timezone")
    show.add_argument("--at", default=None, help="Reference time, ISO 8601 (local time when no offset)")
    show.set_defaults(handler=_cmd_show)

    search = commands.add_parser("search", help="Search the city directory")
    search.add_argument("query")
    search.add_argument("--limit", type=int, default=10)
    search.set_defaults(handler=_cmd_search)

    add = commands.add_parser("add", help="Track a city found by search")
    add.add_argument("query")
    add.add_argument("--pick", type=int, default=1, help="Which search result to add (1-based)")
    add.set_defaults(handler=_cmd_add)

    remove = commands.add_parser("remove", help="Stop tracking a timezone")
    remove.add_argument("key", help="Entry key as shown by 'show'")
    remove.set_defaults(handler=_cmd_remove)

    move = commands.add_parser("move", help="Move one entry into another entry's position")
    move.add_argument("from_key")
    move.add_argument("to_key")
    move.set_defaults(handler=_cmd_move)

    theme = commands.add_parser("theme", help="Show or toggle the colour theme")
    theme.add_argument("--toggle", action="store_true")
    theme.set_defaults(handler=_cmd_theme)

    reset = commands.add_parser("reset", help="Forget saved timezones")
    reset.set_defaults(handler=_cmd_reset)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level="DEBUG" if args.verbose else get_settings().log_level)
    session = open_session(args.database_url)
    return args.handler(session, args, Console())


if __name__ == "__main__":
    raise SystemExit(main())
