from __future__ import annotations

import logging
from typing import Sequence

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger("ilp_price.errors")


class PriceError(Exception):
    """Base class for every failure raised while resolving a price."""

    kind = "price_error"


class ConfigSourceUnavailable(PriceError):
    """A landmark override layer could not be read or parsed."""

    kind = "config_source_unavailable"

    def __init__(self, source: str, reason: str):
        super().__init__(f"landmark source unavailable. source={source} reason={reason}")
        self.source = source
        self.reason = reason


class NoPrefixMatch(PriceError):
    kind = "no_prefix_match"

    def __init__(self, address: str):
        super().__init__(f"no configuration for address. address={address}")
        self.address = address


class NoLandmarksForCurrency(PriceError):
    kind = "no_landmarks"

    def __init__(self, currency: str, prefix: str | None = None):
        super().__init__(f"no landmarks for currency. currency={currency}")
        self.currency = currency
        self.prefix = prefix


class LandmarkError(PriceError):
    """A single landmark could not produce a usable quote."""

    kind = "landmark_error"

    def __init__(self, landmark: str, reason: str):
        super().__init__(f"{reason}. landmark={landmark}")
        self.landmark = landmark
        self.reason = reason


class LandmarkValidationFailure(LandmarkError):
    kind = "landmark_validation_failure"


class LandmarkQuoteFailure(LandmarkError):
    kind = "landmark_quote_failure"


class AllLandmarksFailed(PriceError):
    kind = "all_landmarks_failed"

    def __init__(self, currency: str, failures: Sequence[LandmarkError]):
        super().__init__(
            f"all landmarks failed for currency. currency={currency} attempts={len(failures)}"
        )
        self.currency = currency
        self.failures = list(failures)


_STATUS_BY_KIND = {
    NoPrefixMatch.kind: status.HTTP_404_NOT_FOUND,
    NoLandmarksForCurrency.kind: status.HTTP_404_NOT_FOUND,
    AllLandmarksFailed.kind: status.HTTP_502_BAD_GATEWAY,
}


def price_error_handler(request: Request, exc: PriceError):  # type: ignore
    code = _STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if code >= 500:
        logger.warning("price resolution failed: %s", exc)
    return JSONResponse(
        status_code=code,
        content={"error": exc.kind, "detail": str(exc)},
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "detail": exc.errors(),
        },
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
