from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator


class LandmarkConfig(RootModel[Dict[str, Dict[str, List[str]]]]):
    """prefix -> currency -> landmark addresses, in priority order."""

    @field_validator("root")
    @classmethod
    def non_empty_entries(
        cls, v: Dict[str, Dict[str, List[str]]]
    ) -> Dict[str, Dict[str, List[str]]]:
        for prefix, currencies in v.items():
            if not prefix:
                raise ValueError("address prefix must not be empty")
            for currency, landmarks in currencies.items():
                if not currency:
                    raise ValueError(f"empty currency code under prefix {prefix!r}")
                if any(not lm for lm in landmarks):
                    raise ValueError(
                        f"empty landmark address for {prefix!r}/{currency!r}"
                    )
        return v

    def as_dict(self) -> Dict[str, Dict[str, List[str]]]:
        # fresh lists so merging never touches the validated model
        return {
            prefix: {cur: list(lms) for cur, lms in currencies.items()}
            for prefix, currencies in self.root.items()
        }


class AssetIdentity(BaseModel):
    """The caller's own settlement asset, as reported by the local connector."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    client_address: str = Field(..., alias="clientAddress", min_length=1)
    asset_code: str = Field(..., alias="assetCode", min_length=1)
    asset_scale: int = Field(..., alias="assetScale", ge=0)


class LedgerInfo(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    asset_code: str = Field(..., alias="assetCode")
    asset_scale: int = Field(..., alias="assetScale", ge=0)
