from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional, Tuple
import uuid


def _new_id() -> str:
    return str(uuid.uuid4()).upper()


def comparable_date(d: datetime) -> datetime:
    """Aware datetime for ordering; naive values are read as UTC so comparison never fails."""
    return d if d.tzinfo is not None else d.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class Color:
    red: float = 0.0
    green: float = 0.0
    blue: float = 0.0
    alpha: float = 1.0
    use_default: bool = False   # resolved to the platform text color at render time

    def __post_init__(self) -> None:
        for name in ("red", "green", "blue", "alpha"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"Color component {name}={value!r} outside [0, 1]")

    @classmethod
    def default(cls) -> "Color":
        return cls(use_default=True)

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        """Parse ``#RRGGBB`` or ``#RRGGBBAA`` (leading ``#`` optional)."""
        raw = value.strip().lstrip("#")
        if len(raw) not in (6, 8):
            raise ValueError(f"Invalid hex color: {value!r}")
        try:
            parts = [int(raw[i:i + 2], 16) for i in range(0, len(raw), 2)]
        except ValueError as exc:
            raise ValueError(f"Invalid hex color: {value!r}") from exc
        if len(parts) == 3:
            parts.append(255)
        r, g, b, a = (p / 255 for p in parts)
        return cls(red=r, green=g, blue=b, alpha=a)

    def to_rgba8(self) -> Tuple[int, int, int, int]:
        return tuple(int(round(c * 255)) for c in (self.red, self.green, self.blue, self.alpha))  # type: ignore[return-value]

    def to_hex(self) -> str:
        if self.use_default:
            return "default"
        r, g, b, a = self.to_rgba8()
        if a == 255:
            return f"#{r:02X}{g:02X}{b:02X}"
        return f"#{r:02X}{g:02X}{b:02X}{a:02X}"


@dataclass(frozen=True)
class Event:
    title: str
    date: datetime              # stored and compared as given, no tz normalization
    display_color: Color = field(default_factory=Color.default)
    image_data: Optional[bytes] = None
    id: str = field(default_factory=_new_id)

    def with_fields(
        self,
        title: str,
        date: datetime,
        display_color: Color,
        image_data: Optional[bytes],
    ) -> "Event":
        """Replace every non-identity field at once, keeping ``id``."""
        return replace(self, title=title, date=date, display_color=display_color, image_data=image_data)
