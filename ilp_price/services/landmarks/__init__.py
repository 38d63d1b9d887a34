from .store import (
    LandmarkStore,
    load_defaults,
    merge_landmarks,
    resolve_prefix,
)

__all__ = [
    "LandmarkStore",
    "load_defaults",
    "merge_landmarks",
    "resolve_prefix",
]
