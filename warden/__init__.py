"""Warden: ABAC policy evaluation with a legacy RBAC fallback."""

__version__ = "0.1.0"
