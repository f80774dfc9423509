"""Data models for seller administration and sales insights."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

SELLER_ROLE = "seller"


class ResolutionOutcome(str, Enum):
    CREATED = "created"
    FOUND_EXISTING = "found_existing"
    UNRESOLVABLE = "unresolvable"


class InsightMode(str, Enum):
    MOCK = "mock"
    GEMINI = "gemini"


@dataclass
class Account:
    id: str
    email: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "email": self.email}


@dataclass
class ProfileRecord:
    id: str
    role: str = SELLER_ROLE


@dataclass
class AccountCreation:
    """Raw result of a create-account call, before any lookup fallback."""

    status_code: int
    account_id: str | None = None


@dataclass
class AccountResolution:
    outcome: ResolutionOutcome
    account_id: str | None = None

    @property
    def resolved(self) -> bool:
        return self.outcome is not ResolutionOutcome.UNRESOLVABLE and bool(self.account_id)


@dataclass
class SellerListing:
    """Sellers joined with their account emails, in profile order."""

    sellers: list[Account] = field(default_factory=list)
    omitted_ids: list[str] = field(default_factory=list)

    @property
    def omitted_count(self) -> int:
        return len(self.omitted_ids)

    def to_list(self) -> list[dict[str, str]]:
        return [seller.to_dict() for seller in self.sellers]


@dataclass
class InsightRequest:
    prompt: str | None = None
    name: str | None = None
    category: str | None = None
    description: str | None = None
    sales_summary: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> InsightRequest:
        return cls(
            prompt=payload.get("prompt"),
            name=payload.get("name"),
            category=payload.get("category"),
            description=payload.get("description"),
            sales_summary=payload.get("salesSummary"),
        )


@dataclass
class Insight:
    analysis: str
    mode: InsightMode

    def to_dict(self) -> dict[str, str]:
        return {"analysis": self.analysis, "mode": self.mode.value}
