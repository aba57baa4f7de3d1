"""Ticket prices and coupon rules, fixed at deploy time."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType

from pydantic import BaseModel, Field, PositiveInt, field_validator

from .settings import settings


class TicketType(str, Enum):
    STUDENT_CONF = "STUDENT_CONF"
    WORKING_CONF = "WORKING_CONF"
    STUDENT_STAY = "STUDENT_STAY"
    WORKING_STAY = "WORKING_STAY"


# Whole INR per pass
DEFAULT_PRICES: dict[str, int] = {
    TicketType.STUDENT_CONF.value: 1500,
    TicketType.WORKING_CONF.value: 2000,
    TicketType.STUDENT_STAY.value: 4000,
    TicketType.WORKING_STAY.value: 4500,
}


@dataclass(frozen=True, slots=True)
class Coupon:
    code: str
    percent: int
    cap: int

    def __post_init__(self) -> None:
        if not self.code or self.code != self.code.strip().upper():
            raise ValueError(f"coupon code must be trimmed uppercase: {self.code!r}")
        if not 0 <= self.percent <= 100:
            raise ValueError(f"coupon {self.code} percent must be within 0..100")
        if self.cap < 0:
            raise ValueError(f"coupon {self.code} cap must be >= 0")


DEFAULT_COUPONS: tuple[Coupon, ...] = (
    Coupon("ZERO10", percent=10, cap=1000),
    Coupon("ZERO20", percent=20, cap=2000),
)


@dataclass(frozen=True, slots=True)
class Catalog:
    prices: Mapping[str, int]
    coupons: Mapping[str, Coupon] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for key, price in self.prices.items():
            if isinstance(price, bool) or not isinstance(price, int) or price <= 0:
                raise ValueError(f"unit price for {key} must be a positive integer")
        # Freeze both mappings so the catalog cannot drift after start-up.
        object.__setattr__(self, "prices", MappingProxyType(dict(self.prices)))
        object.__setattr__(self, "coupons", MappingProxyType(dict(self.coupons)))

    @classmethod
    def build(cls, prices: Mapping[str, int], coupons: tuple[Coupon, ...] | list[Coupon]) -> Catalog:
        return cls(prices=prices, coupons={coupon.code: coupon for coupon in coupons})

    def unit_price(self, ticket_type: str) -> int | None:
        return self.prices.get(ticket_type)

    def coupon(self, code: str) -> Coupon | None:
        return self.coupons.get(code)


DEFAULT_CATALOG = Catalog.build(DEFAULT_PRICES, DEFAULT_COUPONS)


class _CouponRule(BaseModel):
    percent: int = Field(ge=0, le=100)
    cap: int = Field(ge=0)


class CatalogFile(BaseModel):
    prices: dict[str, PositiveInt]
    coupons: dict[str, _CouponRule] = Field(default_factory=dict)

    @field_validator("coupons")
    @classmethod
    def _uppercase_codes(cls, value: dict[str, _CouponRule]) -> dict[str, _CouponRule]:
        for code in value:
            if code != code.strip().upper() or not code:
                raise ValueError(f"coupon code must be trimmed uppercase: {code!r}")
        return value


def load_catalog(path: Path) -> Catalog:
    """Load prices and coupons from a JSON file.

    Expected shape::

        {"prices": {"STUDENT_CONF": 1500},
         "coupons": {"ZERO10": {"percent": 10, "cap": 1000}}}
    """
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    parsed = CatalogFile.model_validate(payload)
    coupons = [
        Coupon(code, percent=rule.percent, cap=rule.cap) for code, rule in parsed.coupons.items()
    ]
    return Catalog.build(parsed.prices, coupons)


@lru_cache(maxsize=1)
def get_catalog() -> Catalog:
    path = settings.catalog_path
    if path is None:
        return DEFAULT_CATALOG
    return load_catalog(path)


__all__ = [
    "Catalog",
    "CatalogFile",
    "Coupon",
    "DEFAULT_CATALOG",
    "DEFAULT_COUPONS",
    "DEFAULT_PRICES",
    "TicketType",
    "get_catalog",
    "load_catalog",
]
