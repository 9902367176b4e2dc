# src/ampify/dom/models.py
import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ampify.errors import DataError


def compact_json(data: Any) -> str:
    """
    Serializes data the way it is embedded in the output document (no whitespace).

    Raises:
        DataError: data holds NaN or an infinite number, which JSON cannot express.
    """
    try:
        return json.dumps(data, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    except ValueError as e:
        raise DataError(f"Cannot serialize structured data: {e}") from e


class CanonicalLink(BaseModel):
    """Reference to the authoritative URL of the source page."""
    href: str


class StructuredDataBlock(BaseModel):
    """A decoded application/ld+json block found in the source document."""
    data: Any

    def to_json(self) -> str:
        return compact_json(self.data)


class AnalyticsVars(BaseModel):
    account: str


class AnalyticsTrigger(BaseModel):
    on: str = "visible"
    request: str = "pageview"


class AnalyticsTriggers(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    track_pageview: AnalyticsTrigger = Field(default_factory=AnalyticsTrigger, alias="trackPageview")


class AnalyticsConfig(BaseModel):
    """
    Configuration embedded in the <amp-analytics> element.

    Only the account varies between builds; the trigger shape is fixed.
    """
    vars: AnalyticsVars
    triggers: AnalyticsTriggers = Field(default_factory=AnalyticsTriggers)

    @classmethod
    def for_account(cls, account: str) -> "AnalyticsConfig":
        return cls(vars=AnalyticsVars(account=account))

    def to_json(self) -> str:
        return compact_json(self.model_dump(by_alias=True))
