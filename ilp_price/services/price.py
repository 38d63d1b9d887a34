from __future__ import annotations

"""Rate discovery engine.

Expresses an amount of a foreign currency in the caller's native asset by
sampling exchange rates from landmark receivers:

    - Ask the local connector for our own asset (code, scale, address).
    - Same currency: just scale the amount, no network round-trip.
    - Otherwise walk the landmarks configured for our address prefix and
      currency, strictly one at a time, until one yields a valid quote for a
      fixed probe amount.
    - rate = probe source amount / quoted destination amount; the requested
      amount times the rate is scaled by the landmark's asset scale.

A failing landmark is logged and skipped. Only exhausting the whole list is
an error for the caller.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Union

from ilp_price.core.config import Settings, get_settings
from ilp_price.core.errors import (
    AllLandmarksFailed,
    LandmarkError,
    LandmarkQuoteFailure,
    LandmarkValidationFailure,
)
from ilp_price.models.landmarks import AssetIdentity, LedgerInfo
from .landmarks import LandmarkStore
from .landmarks.store import LandmarkOverride
from .money import AmountLike, convert, exchange_rate, scale_amount, to_decimal
from .protocols import AssetDetailsFetcher, LandmarkQuery, Quoter, Transport
from .spsp import SpspLandmarkQuery

logger = logging.getLogger("ilp_price.price")


@dataclass(frozen=True)
class LandmarkSuccess:
    landmark: str
    ledger_info: LedgerInfo
    source_amount: Decimal
    destination_amount: Decimal

    @property
    def rate(self) -> Decimal:
        return exchange_rate(self.source_amount, self.destination_amount)


@dataclass(frozen=True)
class LandmarkFailure:
    landmark: str
    error: LandmarkError


AttemptResult = Union[LandmarkSuccess, LandmarkFailure]


def _is_scale(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    return isinstance(value, str) and value.isascii() and value.isdecimal()


def validate_landmark_response(
    landmark: str, response: Any, currency: str
) -> LedgerInfo:
    if not isinstance(response, Mapping) or response.get("ledgerInfo") is None:
        raise LandmarkValidationFailure(landmark, "missing asset metadata")
    info = response["ledgerInfo"]
    if not isinstance(info, Mapping):
        raise LandmarkValidationFailure(landmark, "asset metadata is not an object")
    if info.get("assetCode") != currency:
        raise LandmarkValidationFailure(
            landmark,
            f"mismatched currency. expected={currency} got={info.get('assetCode')}",
        )
    if not _is_scale(info.get("assetScale")):
        raise LandmarkValidationFailure(
            landmark, f"malformed scale. scale={info.get('assetScale')!r}"
        )
    return LedgerInfo(assetCode=info["assetCode"], assetScale=int(info["assetScale"]))


class PriceEngine:
    """Resolves ``(currency, amount)`` into an amount of the native asset.

    The landmark configuration is merged once, here in the constructor, and
    shared read-only by every ``resolve`` call on this instance.
    """

    def __init__(
        self,
        transport: Transport,
        landmarks: Optional[LandmarkOverride] = None,
        *,
        settings: Optional[Settings] = None,
        ildcp: Optional[AssetDetailsFetcher] = None,
        landmark_query: Optional[LandmarkQuery] = None,
        quoter: Optional[Quoter] = None,
    ):
        self._settings = settings or get_settings()
        self._transport = transport
        self._ildcp = ildcp
        self._query = landmark_query or SpspLandmarkQuery.from_settings(self._settings)
        self._quoter = quoter
        self._probe_amount = to_decimal(self._settings.probe_amount)
        self.store = LandmarkStore.build(self._settings, landmarks)

    @property
    def probe_amount(self) -> Decimal:
        return self._probe_amount

    async def get_asset_identity(self) -> AssetIdentity:
        if self._ildcp is None:
            raise RuntimeError("no asset details fetcher configured")
        await self._transport.connect()
        details = await self._ildcp.fetch(self._transport)
        return AssetIdentity.model_validate(details)

    async def resolve(self, currency: str, amount: AmountLike) -> str:
        amount = to_decimal(amount)
        identity = await self.get_asset_identity()

        if identity.asset_code == currency:
            logger.debug("native currency requested. currency=%s", currency)
            return scale_amount(amount, identity.asset_scale)

        landmarks = self.store.landmarks_for(identity.client_address, currency)

        failures: List[LandmarkError] = []
        for landmark in landmarks:
            result = await self._attempt(landmark, currency)
            if isinstance(result, LandmarkFailure):
                logger.warning(
                    "landmark failed. landmark=%s currency=%s error=%s",
                    landmark,
                    currency,
                    result.error,
                    extra={"landmark": landmark, "currency": currency, "error_kind": result.error.kind},
                )
                failures.append(result.error)
                continue
            rate = result.rate
            logger.debug(
                "landmark quoted. landmark=%s currency=%s rate=%s",
                landmark,
                currency,
                rate,
            )
            return scale_amount(convert(amount, rate), result.ledger_info.asset_scale)

        raise AllLandmarksFailed(currency, failures)

    fetch = resolve

    async def _attempt(self, landmark: str, currency: str) -> AttemptResult:
        if self._quoter is None:
            raise RuntimeError("no quoter configured")
        try:
            response = await self._query.query(landmark)
        except Exception as e:
            return LandmarkFailure(
                landmark, LandmarkQuoteFailure(landmark, f"query failed: {e}")
            )
        try:
            ledger_info = validate_landmark_response(landmark, response, currency)
        except LandmarkValidationFailure as e:
            return LandmarkFailure(landmark, e)

        params = {
            key: value for key, value in response.items() if key != "ledgerInfo"
        }
        params["sourceAmount"] = str(self._probe_amount)
        try:
            quote = await self._quoter.quote_source_amount(self._transport, params)
            destination = to_decimal(quote["destinationAmount"])
        except Exception as e:
            return LandmarkFailure(
                landmark, LandmarkQuoteFailure(landmark, f"quote failed: {e}")
            )
        if destination <= 0:
            return LandmarkFailure(
                landmark,
                LandmarkQuoteFailure(
                    landmark, f"non-positive destination amount. amount={destination}"
                ),
            )
        return LandmarkSuccess(
            landmark=landmark,
            ledger_info=ledger_info,
            source_amount=self._probe_amount,
            destination_amount=destination,
        )
