from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PolicyEffect(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


class Policy(BaseModel):
    """
    A named authorization rule.

    subject:  "*", "role:<name>", "user:<id-or-username>", "department:<name>",
              "status:<status>", "email:<value-or-*suffix>", or a raw id/username
    resource: "user", "*", "user:*", "*:settings", "user:*:settings"
    action:   "read", "*", "read,write"

    Higher priority evaluates first. Disabled policies never take part in evaluation.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(alias="_id")
    name: str
    description: Optional[str] = None

    effect: PolicyEffect = PolicyEffect.ALLOW
    subject: str
    resource: str
    action: str
    conditions: Optional[Dict[str, Any]] = None

    priority: int = 0
    enabled: bool = True

    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    @property
    def allows(self) -> bool:
        return self.effect == PolicyEffect.ALLOW

    @staticmethod
    def now() -> datetime:
        return _now()
