from __future__ import annotations

"""SPSP landmark lookup over HTTPS.

A landmark is addressed by payment pointer (``$host`` or ``$host/path``) or
by a plain https URL. The JSON document it serves carries the receiver's
``ledgerInfo`` plus the routing data later handed to the quoter.
"""
import asyncio
from typing import Any, Dict, Mapping

from ilp_price.core.config import Settings
from .http_client import get_json

SPSP_ACCEPT = "application/spsp4+json, application/spsp+json"
WELL_KNOWN_PATH = ".well-known/pay"


def resolve_pointer(pointer: str) -> str:
    if pointer.startswith(("https://", "http://")):
        return pointer
    if not pointer.startswith("$") or len(pointer) < 2:
        raise ValueError(f"not a payment pointer: {pointer!r}")
    host, sep, path = pointer[1:].partition("/")
    if not host:
        raise ValueError(f"payment pointer has no host: {pointer!r}")
    if not sep or not path:
        path = WELL_KNOWN_PATH
    return f"https://{host}/{path}"


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def normalize_response(document: Mapping[str, Any]) -> Dict[str, Any]:
    """Rewrite snake_case SPSP fields (``ledger_info.asset_code`` ...) as camelCase.

    Nested objects are rewritten too; list values and already camelCase keys
    pass through unchanged.
    """
    return {
        _camel(key): normalize_response(value) if isinstance(value, Mapping) else value
        for key, value in document.items()
    }


class SpspLandmarkQuery:
    def __init__(self, *, timeout: float = 5.0, retries: int = 2):
        self._timeout = timeout
        self._retries = retries

    @classmethod
    def from_settings(cls, settings: Settings) -> "SpspLandmarkQuery":
        return cls(timeout=settings.http_timeout_seconds, retries=settings.http_retries)

    async def query(self, landmark: str) -> Mapping[str, Any]:
        url = resolve_pointer(landmark)
        document = await asyncio.to_thread(
            get_json,
            url,
            headers={"Accept": SPSP_ACCEPT},
            timeout=self._timeout,
            retries=self._retries,
        )
        return normalize_response(document)
