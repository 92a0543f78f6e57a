"""Filesystem-backed media store served from a public base URL."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from uuid import uuid4

from channelhub.services._shared.ports import MediaStore, StoredMedia

log = logging.getLogger(__name__)


def _safe_join(root: Path, key: str) -> Path:
    key = key.strip("/\\")
    if not key or ".." in key or "/" in key or "\\" in key:
        raise ValueError("invalid media key")
    return (root / key).resolve()


class LocalMediaStore(MediaStore):
    """
    Move uploads under ``root`` and expose them below ``base_url``.

    Every failure is logged and reported as ``None``. The temporary upload is
    removed whether or not the move succeeded.
    """

    def __init__(self, root: str, base_url: str) -> None:
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        self.base_url = base_url.rstrip("/")

    def upload(self, local_path: str) -> StoredMedia | None:
        if not local_path:
            return None
        source = Path(local_path)
        try:
            if not source.is_file():
                log.warning("Upload source missing: %s", source.name)
                return None
            public_id = f"{uuid4().hex}{source.suffix.lower()}"
            shutil.copyfile(source, _safe_join(self.root, public_id))
            return StoredMedia(url=f"{self.base_url}/{public_id}", public_id=public_id)
        except OSError:
            log.exception("Media upload failed")
            return None
        finally:
            source.unlink(missing_ok=True)

    def delete(self, public_id: str) -> bool | None:
        try:
            path = _safe_join(self.root, public_id)
        except ValueError:
            log.warning("Refusing to delete media key %r", public_id)
            return None
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError:
            log.exception("Media delete failed")
            return None
        return True
