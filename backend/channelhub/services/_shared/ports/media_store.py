from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol
from uuid import uuid4


@dataclass(frozen=True, slots=True)
class StoredMedia:
    """
    Handle of an uploaded media object.

    :ivar url: Public URL of the object.
    :ivar public_id: Store-specific key used for deletion.
    """

    url: str
    public_id: str


class MediaStore(Protocol):
    """
    External media storage.

    Failures are reported as ``None`` rather than raised; callers decide
    whether a missing result is fatal.
    """

    def upload(self, local_path: str) -> StoredMedia | None: ...

    def delete(self, public_id: str) -> bool | None: ...


class InMemoryMediaStore(MediaStore):
    """
    Thread-safe in-memory store for tests.

    Set ``fail_uploads`` or ``fail_deletes`` to simulate an unavailable
    backend. The local file is removed after every upload attempt, like the
    real adapter does.
    """

    def __init__(self, *, base_url: str = "memory://media") -> None:
        self._lock = threading.Lock()
        self._objects: dict[str, str] = {}
        self.base_url = base_url.rstrip("/")
        self.fail_uploads = False
        self.fail_deletes = False
        self.deleted: list[str] = []

    def upload(self, local_path: str) -> StoredMedia | None:
        path = Path(local_path)
        try:
            if self.fail_uploads or not path.is_file():
                return None
            public_id = f"{uuid4().hex}{path.suffix}"
            with self._lock:
                self._objects[public_id] = path.name
            return StoredMedia(url=f"{self.base_url}/{public_id}", public_id=public_id)
        finally:
            path.unlink(missing_ok=True)

    def delete(self, public_id: str) -> bool | None:
        if self.fail_deletes:
            return None
        with self._lock:
            removed = self._objects.pop(public_id, None) is not None
            if removed:
                self.deleted.append(public_id)
        return removed

    def __contains__(self, public_id: str) -> bool:
        with self._lock:
            return public_id in self._objects
