from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field

from ilp_price.services.money import to_decimal
from ilp_price.services.price import PriceEngine

"""Price router.

Endpoints:
    - GET /price/{currency}?amount=... -> amount expressed in the native asset
    - GET /landmarks                   -> merged landmark configuration
"""

router = APIRouter(tags=["price"])


def get_engine(request: Request) -> PriceEngine:
    return request.app.state.engine


class PriceOut(BaseModel):
    currency: str
    amount: str
    native_amount: str = Field(
        ..., description="Amount in the smallest unit of the native asset"
    )


class LandmarksOut(BaseModel):
    sources: List[str]
    landmarks: Dict[str, Dict[str, List[str]]]


@router.get("/price/{currency}", response_model=PriceOut, summary="Convert an amount")
async def get_price(
    currency: str,
    amount: str = Query("1", description="Whole units of the requested currency"),
    engine: PriceEngine = Depends(get_engine),
):
    try:
        value = to_decimal(amount)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    native_amount = await engine.resolve(currency, value)
    return PriceOut(currency=currency, amount=amount, native_amount=native_amount)


@router.get("/landmarks", response_model=LandmarksOut, summary="Merged landmarks")
async def get_landmarks(engine: PriceEngine = Depends(get_engine)):
    return LandmarksOut(sources=list(engine.store.sources), landmarks=engine.store.as_dict())
