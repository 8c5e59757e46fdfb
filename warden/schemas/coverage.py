from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel


class PermissionRef(BaseModel):
    resource: str
    action: str
    permission_name: str


class RedundantPolicy(BaseModel):
    resource: str
    action: str
    reason: str


class RoleCoverage(BaseModel):
    role: str
    policies: int
    permissions: int


class CoverageReport(BaseModel):
    rbac_count: int
    abac_count: int
    enabled_abac_count: int
    coverage_percent: float
    missing_policies: List[PermissionRef] = []
    role_coverage: List[RoleCoverage] = []


class AuditReport(BaseModel):
    rbac_count: int
    abac_count: int
    enabled_abac_count: int
    coverage_percent: float
    missing_policies: List[PermissionRef] = []
    covered_permissions: List[PermissionRef] = []
    redundant_policies: List[RedundantPolicy] = []
    timestamp: datetime


class GapsReport(BaseModel):
    missing_policies: List[PermissionRef] = []
    rbac_count: int
    missing_count: int
    coverage_percent: float
    timestamp: datetime


class Mismatch(BaseModel):
    user_id: str
    username: str
    permission: str
    resource: str
    action: str
    rbac_result: bool
    abac_result: bool


class VerificationReport(BaseModel):
    total_users: int
    total_permissions_checked: int
    matching: int
    mismatching: int
    mismatches: List[Mismatch] = []
    timestamp: datetime
