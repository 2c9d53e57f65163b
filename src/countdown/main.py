from __future__ import annotations

import argparse
import asyncio
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .bytestore import FileByteStore
from .config import AppConfig, load_config
from .form import AddMode, EditMode, FormMode, build_event, navigation_title, save_event
from .images import load_image_async, thumbnail
from .models import Color, Event
from .relative import row_label
from .store import EventStore

CONFIG_PATH_DEFAULT = "~/.config/event-countdown/config.yaml"


def _parse_date(s: str) -> datetime:
    try:
        return datetime.fromisoformat(s)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid ISO-8601 date: {s!r}") from exc


def _parse_color(s: str) -> Color:
    if s.strip().lower() == "default":
        return Color.default()
    try:
        return Color.from_hex(s)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_store(cfg: AppConfig) -> EventStore:
    return EventStore(FileByteStore(cfg.store.path), key=cfg.store.key)


def _format_row(position: int, event: Event, now: datetime) -> str:
    title, when = row_label(event, now)
    photo = " [photo]" if event.image_data is not None else ""
    return f"{position}. {title} | {when} | {event.display_color.to_hex()}{photo} | {event.id}"


def _load_image(path: Optional[str]) -> Optional[bytes]:
    if not path:
        return None
    data = asyncio.run(load_image_async(path))
    if data is None:
        print(f"Could not read image {path}; saving without it.")
    return data


def _find(events: List[Event], identifier: str) -> Optional[Event]:
    for e in events:
        if e.id == identifier:
            return e
    return None


def _report_persist(store: EventStore) -> None:
    if store.last_persist_error is not None:
        print(f"Warning: changes kept in memory only; save failed: {store.last_persist_error}")


def _write_thumbnails(events: List[Event], out_dir: str, size: int) -> None:
    target = Path(out_dir).expanduser()
    target.mkdir(parents=True, exist_ok=True)
    for e in events:
        thumbnail(e.image_data, size).save(target / f"{e.id}.png")


def list_events(store: EventStore, now: datetime) -> List[str]:
    return [_format_row(i, e, now) for i, e in enumerate(store.events)]


def run(args: argparse.Namespace, cfg: AppConfig, now: Optional[datetime] = None) -> int:
    now = now or datetime.now()
    store = build_store(cfg)
    events = store.load_all()

    if args.command == "list":
        if not events:
            print("No events.")
        for line in list_events(store, now):
            print(line)
        if args.thumbnails:
            _write_thumbnails(events, args.thumbnails, cfg.images.thumbnail_size)
        return 0

    if args.command in ("add", "edit"):
        mode: FormMode
        if args.command == "add":
            mode = AddMode()
            title, date, color, image_data = args.title, args.date, args.color, None
        else:
            existing = _find(events, args.id)
            if existing is None:
                print(f"No event with id {args.id}")
                return 1
            mode = EditMode(existing)
            title = args.title if args.title is not None else existing.title
            date = args.date if args.date is not None else existing.date
            color = args.color if args.color is not None else existing.display_color
            image_data = None if args.remove_image else existing.image_data

        if args.image:
            image_data = _load_image(args.image) or image_data

        try:
            event = build_event(mode, title, date, color, image_data)
        except ValueError as exc:
            print(f"{navigation_title(mode)}: {exc}")
            return 2
        save_event(store, mode, event)
        _report_persist(store)
        print(f"{navigation_title(mode)}: saved {event.id}")
        return 0

    if args.command == "delete":
        before = len(events)
        remaining = store.delete_by_id(args.id)
        _report_persist(store)
        print(f"Deleted {before - len(remaining)} event(s).")
        return 0

    if args.command == "delete-at":
        before = len(events)
        remaining = store.delete_by_positions(args.positions)
        _report_persist(store)
        print(f"Deleted {before - len(remaining)} event(s).")
        return 0

    return 2


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Keep a list of dated events and count down to them")
    ap.add_argument("--config", default=os.environ.get("EVENT_COUNTDOWN_CONFIG", CONFIG_PATH_DEFAULT))
    sub = ap.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list")
    list_cmd.add_argument("--thumbnails", help="Directory to write one PNG thumbnail per event")

    add = sub.add_parser("add")
    add.add_argument("--title", required=True)
    add.add_argument("--date", required=True, type=_parse_date)
    add.add_argument("--color", default=Color.default(), type=_parse_color, help="#RRGGBB[AA] or 'default'")
    add.add_argument("--image", help="Path to a photo to attach")

    edit = sub.add_parser("edit")
    edit.add_argument("id")
    edit.add_argument("--title")
    edit.add_argument("--date", type=_parse_date)
    edit.add_argument("--color", type=_parse_color, help="#RRGGBB[AA] or 'default'")
    image = edit.add_mutually_exclusive_group()
    image.add_argument("--image", help="Path to a photo to attach")
    image.add_argument("--remove-image", action="store_true")

    delete = sub.add_parser("delete")
    delete.add_argument("id")

    delete_at = sub.add_parser("delete-at")
    delete_at.add_argument("positions", nargs="+", type=int)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    cfg = load_config(args.config)
    logging.basicConfig(level=logging.getLevelName(cfg.log_level))
    return run(args, cfg)


if __name__ == "__main__":
    raise SystemExit(main())
