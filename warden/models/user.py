from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .requester import RequesterAttributes, UserStatus


class UserRecord(BaseModel):
    """
    The identity record as the user directory stores it.

    role_names / department_names are membership by name.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    username: str
    email: Optional[str] = None
    phone: Optional[str] = None
    status: str = UserStatus.ACTIVE.value

    role_names: List[str] = []
    department_names: List[str] = []
    custom_attributes: Dict[str, Any] = {}

    def to_attributes(self) -> RequesterAttributes:
        return RequesterAttributes(
            id=self.id,
            username=self.username,
            email=self.email,
            phone=self.phone,
            status=self.status,
            roles=self.role_names,
            departments=self.department_names,
            custom_attributes=self.custom_attributes,
        )
