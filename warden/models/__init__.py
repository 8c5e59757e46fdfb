from .policy import Policy, PolicyEffect
from .requester import RequesterAttributes, UserStatus
from .permission import Permission
from .role import Role
from .user import UserRecord

__all__ = [
    "Policy",
    "PolicyEffect",
    "RequesterAttributes",
    "UserStatus",
    "Permission",
    "Role",
    "UserRecord",
]
