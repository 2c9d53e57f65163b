from __future__ import annotations

import base64
import binascii
import json
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from .errors import ColorDecodeFailure, MalformedRecord
from .models import Color, Event

log = logging.getLogger(__name__)

# Numeric dates are seconds since this instant (the original app's default date encoding).
REFERENCE_DATE = datetime(2001, 1, 1, tzinfo=timezone.utc)

_COMPONENTS = ("red", "green", "blue", "alpha")


def encode_color(color: Color) -> Dict[str, Any]:
    if color.use_default:
        return {"useDefault": True}
    return {name: getattr(color, name) for name in _COMPONENTS}


def decode_color(payload: Any) -> Color:
    if not isinstance(payload, dict):
        raise ColorDecodeFailure(f"color payload is {type(payload).__name__}, expected object")
    if payload.get("useDefault") is True:
        return Color.default()
    values = {}
    for name in _COMPONENTS:
        value = payload.get(name)
        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ColorDecodeFailure(f"color component {name!r} missing or not a number")
        values[name] = float(value)
    try:
        return Color(**values)
    except ValueError as exc:
        raise ColorDecodeFailure(str(exc)) from exc


def _decode_date(value: Any) -> datetime:
    if isinstance(value, bool):
        raise MalformedRecord("date must be a string or a number")
    if isinstance(value, (int, float)):
        try:
            return REFERENCE_DATE + timedelta(seconds=value)
        except (OverflowError, ValueError) as exc:
            raise MalformedRecord(f"date {value!r} out of range") from exc
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError as exc:
            raise MalformedRecord(f"date {value!r} is not ISO-8601") from exc
    raise MalformedRecord("date must be a string or a number")


def event_to_dict(event: Event) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "id": event.id,
        "title": event.title,
        "date": event.date.isoformat(),
        "textColor": encode_color(event.display_color),
    }
    if event.image_data is not None:
        record["imageData"] = base64.b64encode(event.image_data).decode("ascii")
    return record


def event_from_dict(record: Any) -> Event:
    if not isinstance(record, dict):
        raise MalformedRecord("event record must be an object")

    event_id = record.get("id")
    if not isinstance(event_id, str):
        raise MalformedRecord("id missing or not a string")
    try:
        uuid.UUID(event_id)
    except ValueError as exc:
        raise MalformedRecord(f"id {event_id!r} is not a UUID") from exc

    title = record.get("title")
    if not isinstance(title, str):
        raise MalformedRecord("title missing or not a string")

    if "date" not in record:
        raise MalformedRecord("date missing")
    date = _decode_date(record["date"])

    try:
        color = decode_color(record.get("textColor"))
    except ColorDecodeFailure as exc:
        log.warning("Event %s: unreadable color (%s); using default color", event_id, exc)
        color = Color.default()

    image_data = None
    raw_image = record.get("imageData")
    if raw_image is not None:
        if not isinstance(raw_image, str):
            raise MalformedRecord("imageData must be a base64 string")
        try:
            image_data = base64.b64decode(raw_image, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise MalformedRecord("imageData is not valid base64") from exc

    return Event(title=title, date=date, display_color=color, image_data=image_data, id=event_id)


def serialize_event(event: Event) -> bytes:
    return json.dumps(event_to_dict(event)).encode("utf-8")


def deserialize_event(data: bytes) -> Event:
    return event_from_dict(_load_json(data))


def encode_events(events: List[Event]) -> bytes:
    payload = [event_to_dict(e) for e in events]
    return json.dumps(payload).encode("utf-8")


def decode_events(data: bytes) -> List[Event]:
    """Decode a whole collection; any bad record fails the lot."""
    payload = _load_json(data)
    if not isinstance(payload, list):
        raise MalformedRecord("event collection must be an array")
    return [event_from_dict(item) for item in payload]


def _load_json(data: bytes) -> Any:
    try:
        return json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedRecord(f"not valid JSON: {exc}") from exc
