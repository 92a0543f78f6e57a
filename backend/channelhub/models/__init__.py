from channelhub.models.account import Account
from channelhub.models.subscription import Subscription
from channelhub.models.video import Video
from channelhub.models.watch_history import WatchHistoryEntry

__all__ = [
    "Account",
    "Subscription",
    "Video",
    "WatchHistoryEntry",
]
