from .patterns import CompiledPolicy, Pattern, PatternKind, SubjectKind, SubjectPattern, compile_policy
from .matchers import evaluate_conditions, match_action, match_resource, match_subject
from .policy_cache import PolicyCache
from .evaluator import PolicyEvaluator
from .rbac import RbacFallback, has_rbac_permission
from .gate import AuthorizationGate
from .coverage import CoverageAnalyzer
from .migration import MigrationVerifier
from .tester import PermissionTester
from .policy_admin import PolicyAdmin

__all__ = [
    "CompiledPolicy",
    "Pattern",
    "PatternKind",
    "SubjectKind",
    "SubjectPattern",
    "compile_policy",
    "evaluate_conditions",
    "match_action",
    "match_resource",
    "match_subject",
    "PolicyCache",
    "PolicyEvaluator",
    "RbacFallback",
    "has_rbac_permission",
    "AuthorizationGate",
    "CoverageAnalyzer",
    "MigrationVerifier",
    "PermissionTester",
    "PolicyAdmin",
]
