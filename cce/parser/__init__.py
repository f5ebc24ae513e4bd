"""Argument classification and delegation for CCE.

Data flow: raw argv -> ArgumentAnalyzer (using FlagRegistry) ->
ArgumentAnalysis -> DelegationEngine -> DelegationPlan -> launcher.
"""

from cce.parser.analyzer import (
    ArgumentAnalysis,
    ArgumentAnalyzer,
    FlagClassification,
    WrapperFlags,
    analyze,
)
from cce.parser.delegation import (
    DelegationEngine,
    DelegationPlan,
    DelegationStrategy,
    PlanMetadata,
    build_delegation_plan,
    build_environment_variables,
)
from cce.parser.registry import (
    ConflictResolution,
    ConflictRule,
    FlagCategory,
    FlagClass,
    FlagInfo,
    FlagRegistry,
)

__all__ = [
    # Registry
    "FlagRegistry",
    "FlagInfo",
    "FlagCategory",
    "FlagClass",
    "ConflictRule",
    "ConflictResolution",
    # Analyzer
    "ArgumentAnalysis",
    "ArgumentAnalyzer",
    "FlagClassification",
    "WrapperFlags",
    "analyze",
    # Delegation
    "DelegationEngine",
    "DelegationPlan",
    "DelegationStrategy",
    "PlanMetadata",
    "build_delegation_plan",
    "build_environment_variables",
]
