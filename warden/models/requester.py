from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ..errors import InvalidRequesterError


class UserStatus(str, Enum):
    ACTIVE = "active"
    DISABLED = "disabled"
    PENDING = "pending"


_FIELDS = ("id", "username", "email", "phone", "status", "roles", "departments", "custom_attributes")


def _names(values: Any) -> FrozenSet[str]:
    # roles may arrive as plain names, role documents or role models
    out = set()
    for v in values or ():
        if isinstance(v, str):
            out.add(v)
        elif isinstance(v, Mapping):
            if v.get("name") is not None:
                out.add(v["name"])
        elif getattr(v, "name", None) is not None:
            out.add(v.name)
    return frozenset(out)


class RequesterAttributes(BaseModel):
    """
    Who is asking. Ephemeral, built per check and never persisted.

    Only `active` requesters can pass evaluation.
    """
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    status: str = UserStatus.ACTIVE.value

    roles: FrozenSet[str] = frozenset()
    departments: FrozenSet[str] = frozenset()
    custom_attributes: Dict[str, Any] = {}

    @field_validator("status", mode="before")
    @classmethod
    def _status_value(cls, v: Any) -> Any:
        return v.value if isinstance(v, Enum) else v

    @field_validator("roles", "departments", mode="before")
    @classmethod
    def _to_names(cls, v: Any) -> FrozenSet[str]:
        return _names(v)

    @model_validator(mode="after")
    def _require_identity(self) -> "RequesterAttributes":
        if self.id is None and self.username is None:
            raise ValueError("requester needs an id or a username")
        return self

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE.value

    @property
    def display_name(self) -> str:
        return self.username if self.username is not None else str(self.id)

    @classmethod
    def from_any(cls, user: Any) -> "RequesterAttributes":
        """
        Accepts RequesterAttributes, a mapping, or any object exposing the same
        attribute names (e.g. a UserRecord). Fails fast without an identity.
        """
        if isinstance(user, cls):
            return user
        if callable(getattr(user, "to_attributes", None)):
            return user.to_attributes()

        if isinstance(user, Mapping):
            data = {k: user[k] for k in _FIELDS if k in user}
        else:
            data = {k: getattr(user, k) for k in _FIELDS if getattr(user, k, None) is not None}

        if data.get("id") is None and data.get("username") is None:
            raise InvalidRequesterError("Invalid user object provided: requester has neither id nor username")

        data = {k: v for k, v in data.items() if v is not None}
        return cls(**data)
