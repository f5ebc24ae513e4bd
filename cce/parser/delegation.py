"""Delegation engine: decides how an invocation is executed.

For every command line exactly one DelegationStrategy is chosen. The engine
then assembles a DelegationPlan holding the forwarded arguments, the
environment variables to inject, the working directory and a small fixed
set of metadata, and validates it before it is handed to the launcher.

Environment variable contract (verbatim, read by the forwarded process):
    ANTHROPIC_BASE_URL      environment base URL
    ANTHROPIC_API_KEY       environment API key
    ANTHROPIC_MODEL         environment model, only when non-empty
    ANTHROPIC_HEADER_<K>    one per custom header, <K> unchanged

DELEGATE_DIRECTLY is a defined strategy that choose_strategy() currently
never returns: whenever arguments are forwarded, the selected environment
is injected. It is kept so that an explicit opt-out can be added later
without changing the plan or launcher contracts.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING

from cce.parser.analyzer import ArgumentAnalysis, ArgumentAnalyzer, WrapperFlags
from cce.parser.registry import FlagRegistry
from cce.utils.errors import ArgumentAnalysisError, InvalidArgumentsError, PlanValidationError
from cce.utils.logging import log_debug, log_message

if TYPE_CHECKING:
    from cce.config.models import Environment

BASE_URL_VAR = "ANTHROPIC_BASE_URL"
API_KEY_VAR = "ANTHROPIC_API_KEY"
MODEL_VAR = "ANTHROPIC_MODEL"
HEADER_VAR_PREFIX = "ANTHROPIC_HEADER_"


class DelegationStrategy(Enum):
    """How a command line is handled.

    Each member carries the one-line reason reported in verbose output,
    a longer description, and the advisory overhead estimate in
    milliseconds. The estimates are observability metadata, not timing
    guarantees.
    """

    HANDLE_INTERNALLY = (
        "handle_internally",
        "wrapper-specific flags detected or interactive mode requested",
        "Handle command using the wrapper's internal logic",
        0,
    )
    DELEGATE_WITH_ENVIRONMENT = (
        "delegate_with_environment",
        "forwarded-command flags detected, delegating with environment injection",
        "Delegate to Claude CLI with environment variable injection",
        15,
    )
    DELEGATE_DIRECTLY = (
        "delegate_directly",
        "no environment configuration needed, delegating directly",
        "Delegate to Claude CLI without environment modification",
        10,
    )
    SHOW_COMBINED_HELP = (
        "show_combined_help",
        "help requested, showing combined wrapper and forwarded-command help",
        "Display combined help from the wrapper and Claude CLI",
        50,
    )
    SHOW_VERSION = (
        "show_version",
        "version requested, showing wrapper version information",
        "Display wrapper version information",
        1,
    )

    def __init__(self, key: str, reason: str, description: str, overhead_ms: int) -> None:
        self.key = key
        self.reason = reason
        self.description = description
        self.overhead_ms = overhead_ms


@dataclass(frozen=True)
class PlanMetadata:
    """Explanatory metadata attached to a plan."""

    original_args: tuple[str, ...]
    strategy: DelegationStrategy
    reason: str
    timestamp: datetime


@dataclass(frozen=True)
class DelegationPlan:
    """Everything the launcher needs to execute one invocation.

    Built once per invocation, validated, executed and discarded.

    Attributes:
        strategy: Chosen strategy
        environment: Environment whose variables are injected, if any
        forwarded_args: Arguments for the forwarded command, in original order
        env_vars: Variables merged over the inherited process environment
        working_dir: Absolute working directory, or "" if it was unavailable
        wrapper_flags: The wrapper's own flags from the same command line
        metadata: Original argv, strategy, reason and timestamp
    """

    strategy: DelegationStrategy
    environment: Environment | None
    forwarded_args: tuple[str, ...]
    env_vars: dict[str, str]
    working_dir: str
    metadata: PlanMetadata
    wrapper_flags: WrapperFlags = field(default_factory=WrapperFlags)

    @property
    def estimated_overhead(self) -> timedelta:
        """Advisory overhead estimate for this plan's strategy."""
        return timedelta(milliseconds=self.strategy.overhead_ms)


def build_environment_variables(environment: Environment) -> dict[str, str]:
    """Map an environment onto the variables injected into the forwarded process."""
    env_vars = {
        BASE_URL_VAR: environment.base_url,
        API_KEY_VAR: environment.api_key,
    }
    if environment.model:
        env_vars[MODEL_VAR] = environment.model
    for key, value in environment.headers.items():
        env_vars[f"{HEADER_VAR_PREFIX}{key}"] = value
    return env_vars


def _current_working_dir() -> str:
    """Absolute path of the current directory, or "" if it cannot be resolved.

    An unavailable working directory must never block delegation.
    """
    try:
        return os.path.abspath(os.getcwd())
    except OSError as e:
        log_debug(f"Working directory unavailable, continuing without it: {e}")
        return ""


class DelegationEngine:
    """Chooses a strategy and builds validated delegation plans.

    Stateless between calls; all inputs are passed in.
    """

    def __init__(self, analyzer: ArgumentAnalyzer) -> None:
        self.analyzer = analyzer

    @property
    def registry(self) -> FlagRegistry:
        return self.analyzer.registry

    def choose_strategy(self, analysis: ArgumentAnalysis) -> DelegationStrategy:
        """Pick exactly one strategy for an analyzed command line.

        Help wins over everything, then version. An empty command line
        enters interactive mode. Any forwarded intent delegates with
        environment injection, even without wrapper flags.
        """
        if analysis.is_help_requested:
            return DelegationStrategy.SHOW_COMBINED_HELP
        if analysis.is_version_requested:
            return DelegationStrategy.SHOW_VERSION
        if analysis.is_empty:
            return DelegationStrategy.HANDLE_INTERNALLY
        if analysis.has_forwarded_flags or analysis.requires_passthrough:
            return DelegationStrategy.DELEGATE_WITH_ENVIRONMENT
        return DelegationStrategy.HANDLE_INTERNALLY

    def should_delegate(self, analysis: ArgumentAnalysis) -> bool:
        """Whether the command line is handed to the forwarded command."""
        return self.is_passthrough_strategy(self.choose_strategy(analysis))

    @staticmethod
    def is_passthrough_strategy(strategy: DelegationStrategy) -> bool:
        return strategy in (
            DelegationStrategy.DELEGATE_WITH_ENVIRONMENT,
            DelegationStrategy.DELEGATE_DIRECTLY,
        )

    @staticmethod
    def should_inject_environment(strategy: DelegationStrategy) -> bool:
        return strategy is DelegationStrategy.DELEGATE_WITH_ENVIRONMENT

    def prepare_delegation(
        self,
        environment: Environment | None,
        argv: Sequence[str],
    ) -> DelegationPlan:
        """Build a plan without validating it.

        Raises:
            InvalidArgumentsError: If argv is not a sequence of strings
        """
        analysis = self.analyzer.analyze(argv)
        strategy = self.choose_strategy(analysis)
        wrapper_flags, forwarded_args = self.analyzer.extract_wrapper_flags(argv)

        env_vars: dict[str, str] = {}
        if environment is not None and self.should_inject_environment(strategy):
            env_vars = build_environment_variables(environment)

        return DelegationPlan(
            strategy=strategy,
            environment=environment,
            forwarded_args=tuple(forwarded_args),
            env_vars=env_vars,
            working_dir=_current_working_dir(),
            wrapper_flags=wrapper_flags,
            metadata=PlanMetadata(
                original_args=tuple(argv),
                strategy=strategy,
                reason=strategy.reason,
                timestamp=datetime.now(),
            ),
        )

    def validate_plan(self, plan: DelegationPlan) -> None:
        """Check the invariants a plan must hold before execution.

        Raises:
            PlanValidationError: Naming the first missing or empty field
        """
        if plan.strategy is DelegationStrategy.DELEGATE_WITH_ENVIRONMENT:
            environment = plan.environment
            if environment is None:
                raise PlanValidationError(
                    "environment is required for delegation with environment injection",
                    field="environment",
                )
            if not environment.base_url:
                raise PlanValidationError("base URL is required", field="base_url")
            if not environment.api_key:
                raise PlanValidationError("API key is required", field="api_key")

        for name in (BASE_URL_VAR, API_KEY_VAR):
            if name in plan.env_vars and plan.env_vars[name] == "":
                raise PlanValidationError(f"{name} cannot be empty", field=name)

    def build_plan(self, environment: Environment | None, argv: Sequence[str]) -> DelegationPlan:
        """Build and validate a plan.

        Raises:
            InvalidArgumentsError: If argv is not a sequence of strings
            PlanValidationError: If the plan is incomplete
        """
        plan = self.prepare_delegation(environment, argv)
        self.validate_plan(plan)
        log_message(f"Delegation plan: {plan.strategy.key} ({plan.metadata.reason})")
        return plan

    @staticmethod
    def estimate_performance_impact(plan: DelegationPlan) -> timedelta:
        return plan.estimated_overhead


def build_delegation_plan(
    environment: Environment | None,
    argv: Sequence[str],
    registry: FlagRegistry | None = None,
) -> DelegationPlan:
    """Build a validated delegation plan for argv.

    Raises:
        ArgumentAnalysisError: If argv could not be analyzed
        PlanValidationError: If the plan is incomplete
    """
    engine = DelegationEngine(ArgumentAnalyzer(registry or FlagRegistry.default()))
    try:
        return engine.build_plan(environment, argv)
    except InvalidArgumentsError as e:
        raise ArgumentAnalysisError(f"failed to analyze arguments: {e}") from e


__all__ = [
    "BASE_URL_VAR",
    "API_KEY_VAR",
    "MODEL_VAR",
    "HEADER_VAR_PREFIX",
    "DelegationStrategy",
    "PlanMetadata",
    "DelegationPlan",
    "DelegationEngine",
    "build_environment_variables",
    "build_delegation_plan",
]
