import base64
import json
from datetime import datetime, timezone

import pytest

from countdown.codec import (
    decode_color,
    decode_events,
    deserialize_event,
    encode_events,
    serialize_event,
)
from countdown.errors import ColorDecodeFailure, MalformedRecord
from countdown.models import Color, Event

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\xff\x10"


def _record(**overrides) -> bytes:
    record = {
        "id": "6F9619FF-8B86-D011-B42D-00C04FC964FF",
        "title": "Deadline",
        "date": "2026-04-30T17:00:00",
        "textColor": {"red": 0.2, "green": 0.4, "blue": 0.6, "alpha": 1.0},
    }
    record.update(overrides)
    return json.dumps({k: v for k, v in record.items() if v is not ...}).encode("utf-8")


def test_round_trip_keeps_exact_rgba_and_image_bytes():
    color = Color(red=0.1, green=1 / 3, blue=0.987654321, alpha=0.5)
    event = Event(title="Launch", date=datetime(2026, 7, 4, 12, 30), display_color=color, image_data=PNG_BYTES)

    restored = deserialize_event(serialize_event(event))

    assert restored == event
    assert restored.display_color.blue == 0.987654321
    assert restored.image_data == PNG_BYTES


def test_round_trip_keeps_aware_datetimes():
    event = Event(title="Call", date=datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc))

    assert deserialize_event(serialize_event(event)).date == event.date


def test_absent_image_stays_absent():
    event = Event(title="No photo", date=datetime(2026, 1, 1))

    payload = json.loads(serialize_event(event))
    restored = deserialize_event(serialize_event(event))

    assert "imageData" not in payload
    assert restored.image_data is None


def test_empty_image_is_present_not_absent():
    event = Event(title="Empty", date=datetime(2026, 1, 1), image_data=b"")

    assert deserialize_event(serialize_event(event)).image_data == b""


def test_default_color_is_stored_as_flag():
    event = Event(title="Plain", date=datetime(2026, 1, 1))

    payload = json.loads(serialize_event(event))

    assert payload["textColor"] == {"useDefault": True}
    assert deserialize_event(serialize_event(event)).display_color == Color.default()


@pytest.mark.parametrize(
    "color_payload",
    [..., None, "YnBsaXN0MDA=", {"red": 1.0}, {"red": 2, "green": 0, "blue": 0, "alpha": 1}, {"red": True, "green": 0, "blue": 0, "alpha": 1}],
)
def test_unreadable_color_degrades_to_default(color_payload, caplog):
    with caplog.at_level("WARNING"):
        event = deserialize_event(_record(textColor=color_payload))

    assert event.title == "Deadline"
    assert event.display_color == Color.default()


def test_decode_color_raises_color_decode_failure():
    with pytest.raises(ColorDecodeFailure):
        decode_color([1, 0, 0, 1])


@pytest.mark.parametrize(
    "overrides",
    [
        {"id": ...},
        {"id": 42},
        {"id": "not-a-uuid"},
        {"title": ...},
        {"title": ["x"]},
        {"date": ...},
        {"date": "tomorrow-ish"},
        {"date": {"y": 2026}},
        {"imageData": "%%%not base64%%%"},
    ],
)
def test_missing_or_wrong_shaped_fields_raise_malformed_record(overrides):
    with pytest.raises(MalformedRecord):
        deserialize_event(_record(**overrides))


def test_non_json_bytes_raise_malformed_record():
    with pytest.raises(MalformedRecord):
        deserialize_event(b"\xff\xfe")


def test_numeric_date_counts_from_2001_reference_date():
    event = deserialize_event(_record(date=86400.5))

    assert event.date == datetime(2001, 1, 2, 0, 0, 0, 500000, tzinfo=timezone.utc)


def test_image_data_is_base64_on_the_wire():
    event = Event(title="Photo", date=datetime(2026, 1, 1), image_data=PNG_BYTES)

    payload = json.loads(serialize_event(event))

    assert base64.b64decode(payload["imageData"]) == PNG_BYTES


def test_collection_round_trip_preserves_order():
    events = [Event(title=t, date=datetime(2026, 1, 1)) for t in ("b", "a", "c")]

    assert decode_events(encode_events(events)) == events


def test_collection_must_be_an_array():
    with pytest.raises(MalformedRecord):
        decode_events(b'{"id": "x"}')


def test_round_trip_keeps_lone_surrogates_in_title():
    event = Event(title="caf\udcff", date=datetime(2026, 1, 1))

    assert deserialize_event(serialize_event(event)).title == "caf\udcff"
    assert decode_events(encode_events([event]))[0].title == "caf\udcff"
