from __future__ import annotations

import base64
import binascii
import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional, Protocol

from .errors import ByteStoreError, PersistFailure

log = logging.getLogger(__name__)


class ByteStore(Protocol):
    def get(self, key: str) -> Optional[bytes]: ...

    def set(self, key: str, value: bytes) -> None: ...


class MemoryByteStore:
    def __init__(self, initial: Optional[Dict[str, bytes]] = None) -> None:
        self._data: Dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)


class FileByteStore:
    """
    Keeps every key in one JSON document on disk, values base64-encoded.
    Writes go to a sibling temp file that is then renamed over the original.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def get(self, key: str) -> Optional[bytes]:
        raw = self._read_all().get(key)
        if raw is None:
            return None
        try:
            return base64.b64decode(raw, validate=True)
        except (binascii.Error, ValueError, TypeError) as exc:
            raise ByteStoreError(f"Value for {key!r} in {self.path} is not base64") from exc

    def set(self, key: str, value: bytes) -> None:
        try:
            data = self._read_all()
        except ByteStoreError as exc:
            self._move_aside(exc)
            data = {}
        data[key] = base64.b64encode(value).decode("ascii")

        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as exc:
            raise PersistFailure(f"Could not write {self.path}: {exc}") from exc

    def _move_aside(self, reason: ByteStoreError) -> None:
        """Keep an unreadable document as <name>.corrupt instead of overwriting it."""
        aside = self.path.with_name(self.path.name + ".corrupt")
        try:
            os.replace(self.path, aside)
        except OSError as exc:
            raise PersistFailure(f"Could not move unreadable {self.path} aside: {exc}") from exc
        log.warning("Moved unreadable %s to %s before writing. Error: %s", self.path, aside, reason)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ByteStoreError(f"Could not read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ByteStoreError(f"{self.path} does not hold a JSON object")
        return data
