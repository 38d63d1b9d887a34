"""Pydantic models for landmark configuration and asset metadata."""

from .landmarks import AssetIdentity, LandmarkConfig, LedgerInfo

__all__ = [
    "AssetIdentity",
    "LandmarkConfig",
    "LedgerInfo",
]
