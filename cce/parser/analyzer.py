"""Argument analysis for command routing.

The analyzer walks the raw argument vector once, left to right, and splits
it into the wrapper's own flags and the residual arguments meant for the
forwarded command. The residual is always a literal sub-sequence of the
input: tokens are never re-quoted, re-escaped or reordered, because they
may contain spaces, quotes or shell metacharacters that must reach the
forwarded command byte-for-byte.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from cce.parser.registry import (
    HELP_FLAG,
    VERSION_FLAG,
    ConflictRule,
    FlagClass,
    FlagRegistry,
    split_inline_value,
)
from cce.utils.errors import InvalidArgumentsError

_ENVIRONMENT_HINT_PATTERN = re.compile(
    r"prod|production|staging|dev|development|test|local", re.IGNORECASE
)


@dataclass(frozen=True)
class ArgumentAnalysis:
    """Result of analyzing one command line.

    Attributes:
        has_wrapper_flags: A wrapper flag other than help/version was present
        has_forwarded_flags: A forwarded or unknown token was present
        is_help_requested: --help or its alias was present
        is_version_requested: --version or its alias was present
        requires_passthrough: Arguments exist but none of them are wrapper flags
        forwarded_args: Residual arguments for the forwarded command, in order
        wrapper_flags: Wrapper flag values keyed by canonical name
        argument_count: Number of raw arguments analyzed
        environment_hints: Environment-like words seen in the arguments
    """

    has_wrapper_flags: bool = False
    has_forwarded_flags: bool = False
    is_help_requested: bool = False
    is_version_requested: bool = False
    requires_passthrough: bool = False
    forwarded_args: tuple[str, ...] = ()
    wrapper_flags: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    argument_count: int = 0
    environment_hints: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        """True when the command line had no arguments at all."""
        return self.argument_count == 0


@dataclass
class WrapperFlags:
    """The wrapper's own flags extracted from a command line."""

    environment: str = ""
    config: str = ""
    verbose: bool = False
    no_interactive: bool = False
    show_help: bool = False
    show_version: bool = False


@dataclass
class FlagClassification:
    """Flag tokens of a command line grouped by owner.

    Only tokens starting with '-' are listed; positional arguments are not
    flags. Used for diagnostics, never for routing.
    """

    wrapper_flags: list[str] = field(default_factory=list)
    forwarded_flags: list[str] = field(default_factory=list)
    unknown_flags: list[str] = field(default_factory=list)
    conflicts: list[ConflictRule] = field(default_factory=list)


@dataclass
class _Scan:
    wrapper_values: dict[str, str] = field(default_factory=dict)
    forwarded: list[str] = field(default_factory=list)
    saw_wrapper: bool = False
    saw_forwarded: bool = False
    saw_help: bool = False
    saw_version: bool = False


def _coerce_argv(argv: object) -> list[str]:
    """Check that argv is a sequence of strings and return it as a list.

    Raises:
        InvalidArgumentsError: If argv is None, a bare string, or holds non-strings
    """
    if argv is None:
        raise InvalidArgumentsError("argument list is required, got None")
    if isinstance(argv, (str, bytes)) or not isinstance(argv, Sequence):
        raise InvalidArgumentsError(
            f"argument list must be a sequence of strings, got {type(argv).__name__}"
        )
    for index, token in enumerate(argv):
        if not isinstance(token, str):
            raise InvalidArgumentsError(
                f"argument {index} must be a string, got {type(token).__name__}"
            )
    return list(argv)


class ArgumentAnalyzer:
    """Splits command lines into wrapper flags and forwarded arguments.

    Stateless between calls; the registry is only read.
    """

    def __init__(self, registry: FlagRegistry) -> None:
        self.registry = registry

    def analyze(self, argv: Sequence[str]) -> ArgumentAnalysis:
        """Analyze a raw argument vector.

        Args:
            argv: Command-line arguments, without the program name

        Returns:
            A fresh ArgumentAnalysis

        Raises:
            InvalidArgumentsError: If argv is not a sequence of strings
        """
        args = _coerce_argv(argv)
        if not args:
            return ArgumentAnalysis()

        scan = self._scan(args)
        requires_passthrough = (
            bool(scan.forwarded)
            and not scan.saw_wrapper
            and not scan.saw_help
            and not scan.saw_version
        )
        return ArgumentAnalysis(
            has_wrapper_flags=scan.saw_wrapper,
            has_forwarded_flags=scan.saw_forwarded,
            is_help_requested=scan.saw_help,
            is_version_requested=scan.saw_version,
            requires_passthrough=requires_passthrough,
            forwarded_args=tuple(scan.forwarded),
            wrapper_flags=MappingProxyType(dict(scan.wrapper_values)),
            argument_count=len(args),
            environment_hints=self._environment_hints(args),
        )

    def extract_wrapper_flags(self, argv: Sequence[str]) -> tuple[WrapperFlags, list[str]]:
        """Extract the wrapper's flags and return the remaining arguments.

        Raises:
            InvalidArgumentsError: If argv is not a sequence of strings
        """
        scan = self._scan(_coerce_argv(argv))
        values = scan.wrapper_values
        flags = WrapperFlags(
            environment=values.get("--env", ""),
            config=values.get("--config", ""),
            verbose="--verbose" in values,
            no_interactive="--no-interactive" in values,
            show_help=scan.saw_help,
            show_version=scan.saw_version,
        )
        return flags, scan.forwarded

    def classify_flags(self, argv: Sequence[str]) -> FlagClassification:
        """Group the flag tokens of argv by owner.

        Raises:
            InvalidArgumentsError: If argv is not a sequence of strings
        """
        classification = FlagClassification()
        for token in _coerce_argv(argv):
            if not token.startswith("-"):
                continue
            flag, _ = split_inline_value(token)
            flag_class = self.registry.classify(flag)
            if flag_class is FlagClass.WRAPPER:
                classification.wrapper_flags.append(flag)
                rule = self.registry.conflict_for(flag)
                if rule is not None:
                    classification.conflicts.append(rule)
            elif self.registry.is_known_flag(flag):
                classification.forwarded_flags.append(flag)
            else:
                classification.unknown_flags.append(flag)
        return classification

    def _scan(self, args: list[str]) -> _Scan:
        scan = _Scan()
        registry = self.registry
        # Help and version win wherever they appear, even in a value position.
        names = {registry.normalize(token) for token in args}
        scan.saw_help = HELP_FLAG in names
        scan.saw_version = VERSION_FLAG in names
        i = 0
        while i < len(args):
            token = args[i]
            flag, inline_value = split_inline_value(token)
            name = registry.normalize(flag)

            if inline_value is None and registry.is_wrapper_flag(name):
                # Help and version never take a value.
                if name in (HELP_FLAG, VERSION_FLAG):
                    i += 1
                    continue

            if registry.classify(flag) is FlagClass.WRAPPER:
                scan.saw_wrapper = True
                if inline_value is not None:
                    scan.wrapper_values[name] = inline_value
                    i += 1
                elif registry.takes_value(flag) and i + 1 < len(args):
                    scan.wrapper_values[name] = args[i + 1]
                    i += 2
                else:
                    scan.wrapper_values[name] = ""
                    i += 1
                continue

            # Forwarded or unknown: both go to the forwarded command verbatim.
            scan.saw_forwarded = True
            scan.forwarded.append(token)
            if inline_value is None and registry.takes_value(flag) and i + 1 < len(args):
                scan.forwarded.append(args[i + 1])
                i += 2
            else:
                i += 1
        return scan

    @staticmethod
    def _environment_hints(args: list[str]) -> tuple[str, ...]:
        hints: list[str] = []
        for arg in args:
            hints.extend(_ENVIRONMENT_HINT_PATTERN.findall(arg))
        return tuple(hints)


def analyze(argv: Sequence[str], registry: FlagRegistry | None = None) -> ArgumentAnalysis:
    """Analyze argv with the given registry, or the default vocabulary."""
    return ArgumentAnalyzer(registry or FlagRegistry.default()).analyze(argv)


__all__ = [
    "ArgumentAnalysis",
    "ArgumentAnalyzer",
    "FlagClassification",
    "WrapperFlags",
    "analyze",
]
