"""Exchange rate discovery against ILP landmark receivers."""

from .core.errors import (
    AllLandmarksFailed,
    ConfigSourceUnavailable,
    LandmarkError,
    LandmarkQuoteFailure,
    LandmarkValidationFailure,
    NoLandmarksForCurrency,
    NoPrefixMatch,
    PriceError,
)
from .services.landmarks import LandmarkStore, merge_landmarks, resolve_prefix
from .services.price import PriceEngine

__version__ = "0.1.0"

__all__ = [
    "AllLandmarksFailed",
    "ConfigSourceUnavailable",
    "LandmarkError",
    "LandmarkQuoteFailure",
    "LandmarkStore",
    "LandmarkValidationFailure",
    "NoLandmarksForCurrency",
    "NoPrefixMatch",
    "PriceEngine",
    "PriceError",
    "merge_landmarks",
    "resolve_prefix",
]
