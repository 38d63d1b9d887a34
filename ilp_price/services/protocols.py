from __future__ import annotations

"""Collaborators consumed by the price engine.

The engine never speaks a wire protocol itself. It is handed a transport plus
three protocol helpers (local asset details, landmark lookup, quoting) that
satisfy the interfaces below.
"""
import asyncio
from abc import ABC, abstractmethod
from typing import Any, Mapping, Protocol


class Transport(Protocol):
    async def connect(self) -> None: ...

    async def send_data(self, data: bytes) -> bytes: ...


class AssetDetailsFetcher(Protocol):
    """Returns ``{clientAddress, assetCode, assetScale}`` for the local account."""

    async def fetch(self, transport: Transport) -> Mapping[str, Any]: ...


class LandmarkQuery(Protocol):
    """Returns ``{ledgerInfo: {assetCode, assetScale}, ...routing data}``."""

    async def query(self, landmark: str) -> Mapping[str, Any]: ...


class Quoter(Protocol):
    """Returns ``{destinationAmount}`` for ``params`` holding routing data and sourceAmount."""

    async def quote_source_amount(
        self, transport: Transport, params: Mapping[str, Any]
    ) -> Mapping[str, Any]: ...


class LockedTransport(ABC):
    """Serializes access for transports that are not safe for concurrent callers.

    Subclasses implement ``_connect`` and ``_send_data``; ``connect`` only
    reaches ``_connect`` until it has succeeded once.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        async with self._lock:
            if self._connected:
                return
            await self._connect()
            self._connected = True

    async def send_data(self, data: bytes) -> bytes:
        async with self._lock:
            return await self._send_data(data)

    @abstractmethod
    async def _connect(self) -> None:
        raise NotImplementedError

    @abstractmethod
    async def _send_data(self, data: bytes) -> bytes:
        raise NotImplementedError
