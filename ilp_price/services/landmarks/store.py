from __future__ import annotations

import logging
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, MutableMapping, Optional, Tuple, Union

from pydantic import ValidationError

from ilp_price.core.config import Settings
from ilp_price.core.errors import (
    ConfigSourceUnavailable,
    NoLandmarksForCurrency,
    NoPrefixMatch,
)
from ilp_price.models.landmarks import LandmarkConfig

"""Landmark configuration store.

Layers, lowest precedence first:
    1. built-in defaults (defaults.json shipped with the package)
    2. landmarks file      (settings.landmarks_file / ILP_PRICE_LANDMARKS_FILE)
    3. inline JSON         (settings.landmarks / ILP_PRICE_LANDMARKS)
    4. caller override     (passed to the engine constructor)

Each layer is validated before it is merged. File and inline layers that
cannot be read or parsed are logged and skipped. The merged result is frozen
into a LandmarkStore once and never rebuilt.
"""

logger = logging.getLogger("ilp_price.landmarks")

RawLandmarks = Dict[str, Dict[str, List[str]]]
LandmarkOverride = Union[LandmarkConfig, Mapping[str, Mapping[str, Any]]]


def merge_landmarks(base: MutableMapping, update: Mapping) -> MutableMapping:
    """Merge ``update`` into ``base`` in place and return ``base``.

    Prefixes merge at the currency level; a currency list in ``update``
    replaces the base list entirely.
    """
    for prefix, currencies in update.items():
        if prefix not in base:
            base[prefix] = currencies
            continue
        for currency, landmarks in currencies.items():
            base[prefix][currency] = landmarks
    return base


def resolve_prefix(config: Mapping[str, Any], address: str) -> str:
    """Longest configured prefix of ``address``."""
    matches = [prefix for prefix in config if address.startswith(prefix)]
    if not matches:
        raise NoPrefixMatch(address)
    return max(matches, key=len)


def load_defaults() -> LandmarkConfig:
    text = resources.files(__package__).joinpath("defaults.json").read_text("utf-8")
    return LandmarkConfig.model_validate_json(text)


def load_file(path: Path) -> LandmarkConfig:
    source = f"file:{path}"
    try:
        text = Path(path).read_text("utf-8")
    except OSError as e:
        raise ConfigSourceUnavailable(source, str(e)) from e
    return _parse(source, text)


def load_inline(text: str) -> LandmarkConfig:
    return _parse("env:ILP_PRICE_LANDMARKS", text)


def _parse(source: str, text: str) -> LandmarkConfig:
    try:
        return LandmarkConfig.model_validate_json(text)
    except ValidationError as e:
        reason = "; ".join(err["msg"] for err in e.errors()) or "invalid landmarks"
        raise ConfigSourceUnavailable(source, reason) from e


def _freeze(raw: Mapping[str, Mapping[str, List[str]]]) -> Mapping[str, Mapping[str, Tuple[str, ...]]]:
    return MappingProxyType(
        {
            prefix: MappingProxyType({cur: tuple(lms) for cur, lms in currencies.items()})
            for prefix, currencies in raw.items()
        }
    )


@dataclass(frozen=True)
class LandmarkStore:
    config: Mapping[str, Mapping[str, Tuple[str, ...]]]
    sources: Tuple[str, ...] = field(default=())

    @classmethod
    def build(
        cls,
        settings: Settings,
        override: Optional[LandmarkOverride] = None,
    ) -> "LandmarkStore":
        merged: RawLandmarks = {}
        sources: List[str] = []

        logger.debug("loading default landmarks")
        merge_landmarks(merged, load_defaults().as_dict())
        sources.append("defaults")

        optional_layers = []
        if settings.landmarks_file:
            optional_layers.append(
                (f"file:{settings.landmarks_file}", lambda: load_file(settings.landmarks_file))
            )
        if settings.landmarks:
            optional_layers.append(
                ("env:ILP_PRICE_LANDMARKS", lambda: load_inline(settings.landmarks))
            )
        for name, loader in optional_layers:
            try:
                layer = loader()
            except ConfigSourceUnavailable as e:
                logger.warning("skipping landmark layer: %s", e, extra={"source": e.source})
                continue
            logger.debug("loading landmarks from %s", name)
            merge_landmarks(merged, layer.as_dict())
            sources.append(name)

        if override is not None:
            if not isinstance(override, LandmarkConfig):
                override = LandmarkConfig.model_validate(override)
            logger.debug("loading landmarks from constructor options")
            merge_landmarks(merged, override.as_dict())
            sources.append("constructor")

        return cls(config=_freeze(merged), sources=tuple(sources))

    def prefix_for(self, address: str) -> str:
        return resolve_prefix(self.config, address)

    def landmarks_for(self, address: str, currency: str) -> Tuple[str, ...]:
        prefix = self.prefix_for(address)
        landmarks = self.config[prefix].get(currency, ())
        if not landmarks:
            logger.debug(
                "no landmarks for currency. currency=%s prefix=%s", currency, prefix
            )
            raise NoLandmarksForCurrency(currency, prefix)
        return landmarks

    def as_dict(self) -> RawLandmarks:
        return {
            prefix: {cur: list(lms) for cur, lms in currencies.items()}
            for prefix, currencies in self.config.items()
        }
