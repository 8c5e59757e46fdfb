from .interfaces import PermissionStore, PolicyRepository, PolicyStore, RoleStore, UserStore
from .memory import InMemoryPermissionStore, InMemoryPolicyStore, InMemoryRoleStore, InMemoryUserStore
from .policy_dal import PolicyDAL
from .role_dal import RoleDAL
from .permission_dal import PermissionDAL
from .user_dal import UserDAL

__all__ = [
    "PolicyStore",
    "PolicyRepository",
    "RoleStore",
    "PermissionStore",
    "UserStore",
    "InMemoryPolicyStore",
    "InMemoryRoleStore",
    "InMemoryPermissionStore",
    "InMemoryUserStore",
    "PolicyDAL",
    "RoleDAL",
    "PermissionDAL",
    "UserDAL",
]
