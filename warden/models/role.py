from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Role(BaseModel):
    """
    Legacy RBAC role.

    permission_names: flat list of "<resource>:<action>" strings; "*" is allowed
    on either side ("user:*", "*:read", "*:*").
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    name: str
    description: Optional[str] = None
    permission_names: List[str] = []
