from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Permission(BaseModel):
    """
    Legacy RBAC permission.

    name: conventional "<resource>:<action>" string, e.g. "user:read"
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    name: str
    resource: str
    action: str
    description: Optional[str] = None

    @classmethod
    def from_name(cls, name: str, *, id: Optional[str] = None) -> "Permission":
        resource, _, action = name.partition(":")
        return cls(id=id or name, name=name, resource=resource, action=action)
