from __future__ import annotations


class InvalidRequesterError(ValueError):
    """Raised when a requester object carries neither an id nor a username."""


class PolicyNotFoundError(LookupError):
    def __init__(self, policy_id: str):
        super().__init__(f'Policy with ID "{policy_id}" not found')
        self.policy_id = policy_id


class UserNotFoundError(LookupError):
    def __init__(self, user_id: str):
        super().__init__(f"User with ID {user_id} not found")
        self.user_id = user_id
