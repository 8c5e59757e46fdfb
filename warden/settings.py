from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="WARDEN_", env_file=".env", extra="ignore")

    LOG_LEVEL: str = "INFO"

    # Authorization
    # When true the RBAC fallback is never consulted after an ABAC denial.
    USE_ABAC_ONLY: bool = False
    POLICY_CACHE_TTL_SECONDS: float = 60.0

    # MongoDB
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "warden"

    # Collections
    COL_POLICIES: str = "policies"
    COL_ROLES: str = "roles"
    COL_PERMISSIONS: str = "permissions"
    COL_USERS: str = "users"


settings = Settings()
