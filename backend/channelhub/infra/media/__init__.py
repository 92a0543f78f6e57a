from .local_media_store import LocalMediaStore

__all__ = ["LocalMediaStore"]
