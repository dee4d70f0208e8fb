from .broadcaster import Listener, Notifier, notifier, progress_frame

__all__ = [
    "Listener",
    "Notifier",
    "notifier",
    "progress_frame",
]
