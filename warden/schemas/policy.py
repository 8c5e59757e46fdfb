from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from ..models.policy import PolicyEffect

CLEARABLE_FIELDS = frozenset({"description", "conditions"})


class PolicyCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    effect: PolicyEffect = PolicyEffect.ALLOW
    subject: str = Field(min_length=1, max_length=255)
    resource: str = Field(min_length=1, max_length=255)
    action: str = Field(min_length=1, max_length=100)
    conditions: Optional[Dict[str, Any]] = None
    priority: int = Field(default=0, ge=0)
    enabled: bool = True


class PolicyUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    effect: Optional[PolicyEffect] = None
    subject: Optional[str] = Field(default=None, min_length=1, max_length=255)
    resource: Optional[str] = Field(default=None, min_length=1, max_length=255)
    action: Optional[str] = Field(default=None, min_length=1, max_length=100)
    conditions: Optional[Dict[str, Any]] = None
    priority: Optional[int] = Field(default=None, ge=0)
    enabled: Optional[bool] = None

    def to_patch(self) -> Dict[str, Any]:
        """
        Fields the caller set. An explicit None clears description or
        conditions and is ignored elsewhere.
        """
        data = self.model_dump(mode="json", exclude_unset=True)
        return {k: v for k, v in data.items() if v is not None or k in CLEARABLE_FIELDS}
