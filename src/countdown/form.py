from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Union

from .models import Color, Event
from .store import EventStore


@dataclass(frozen=True)
class AddMode:
    pass


@dataclass(frozen=True, eq=False)
class EditMode:
    """Editing an existing event; two modes are equal when they target the same event id."""
    event: Event

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EditMode):
            return NotImplemented
        return self.event.id == other.event.id

    def __hash__(self) -> int:
        return hash(("edit", self.event.id))


FormMode = Union[AddMode, EditMode]


def is_valid_title(title: str) -> bool:
    return bool(title.strip())


def navigation_title(mode: FormMode) -> str:
    if isinstance(mode, EditMode):
        return f"Edit {mode.event.title}"
    return "Add Event"


def build_event(
    mode: FormMode,
    title: str,
    date: datetime,
    color: Color,
    image_data: Optional[bytes] = None,
) -> Event:
    if not is_valid_title(title):
        raise ValueError("Event title must not be blank.")
    if isinstance(mode, EditMode):
        return mode.event.with_fields(title=title, date=date, display_color=color, image_data=image_data)
    return Event(title=title, date=date, display_color=color, image_data=image_data)


def save_event(store: EventStore, mode: FormMode, event: Event) -> List[Event]:
    if isinstance(mode, EditMode):
        return store.update(mode.event.id, event)
    return store.add(event)
