"""Flag registry classifying wrapper and forwarded-command flags.

The registry is a lookup table with no per-invocation state. It is built
once at startup, either with ``FlagRegistry.default()`` or by registering
flags on an empty instance, and then handed to the analyzer and the
delegation engine. Nothing in this module is global.

Classification policy:
    - A token registered as a wrapper flag belongs to ``cce``.
    - Everything else, registered as a forwarded flag or not, belongs to
      the forwarded command. Unknown tokens never need a registry update
      to be forwarded.
    - Unknown tokens never consume the following token as a value, so a
      positional argument meant for the forwarded command is never
      swallowed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FlagCategory(Enum):
    """What a flag is about."""

    CONFIGURATION = "configuration"
    BEHAVIOR = "behavior"
    OUTPUT = "output"
    AUTHENTICATION = "authentication"
    NETWORK = "network"
    HELP = "help"


class FlagClass(Enum):
    """Who a flag token belongs to."""

    WRAPPER = "wrapper"
    FORWARDED = "forwarded"
    UNKNOWN = "unknown"


class ConflictResolution(Enum):
    """How a flag present in both vocabularies is resolved."""

    WRAPPER_TAKES_PRECEDENCE = "wrapper"
    RENAME = "rename"
    ASK_USER = "ask"


@dataclass(frozen=True)
class FlagInfo:
    """A single known flag.

    Attributes:
        name: Canonical flag name, e.g. "--env"
        takes_value: Whether the flag consumes the next token as its value
        category: Functional category of the flag
        description: Human-readable description, shown in help output
        required: Whether the flag must be present (informational)
    """

    name: str
    takes_value: bool = False
    category: FlagCategory = FlagCategory.CONFIGURATION
    description: str = ""
    required: bool = False


@dataclass(frozen=True)
class ConflictRule:
    """A flag name known to both the wrapper and the forwarded command."""

    flag: str
    resolution: ConflictResolution
    message: str


class FlagValidationError(ValueError):
    """Raised by FlagRegistry.validate_flag for a misused known flag."""


# Canonical names of the flags the analyzer treats as terminal requests.
HELP_FLAG = "--help"
VERSION_FLAG = "--version"

DEFAULT_WRAPPER_FLAGS: tuple[FlagInfo, ...] = (
    FlagInfo("--env", True, FlagCategory.CONFIGURATION, "Environment name to use"),
    FlagInfo("--config", True, FlagCategory.CONFIGURATION, "Config file path"),
    FlagInfo("--verbose", False, FlagCategory.OUTPUT, "Verbose output"),
    FlagInfo("--no-interactive", False, FlagCategory.BEHAVIOR, "Disable interactive mode"),
    FlagInfo(HELP_FLAG, False, FlagCategory.HELP, "Show help information"),
    FlagInfo(VERSION_FLAG, False, FlagCategory.HELP, "Show version information"),
)

DEFAULT_FORWARDED_FLAGS: tuple[FlagInfo, ...] = (
    FlagInfo("-r", True, FlagCategory.BEHAVIOR, "Role/instruction for Claude"),
    FlagInfo("--role", True, FlagCategory.BEHAVIOR, "Role/instruction for Claude"),
    FlagInfo("--model", True, FlagCategory.CONFIGURATION, "Model to use for Claude"),
    FlagInfo("--temperature", True, FlagCategory.CONFIGURATION, "Temperature setting for Claude"),
    FlagInfo("--max-tokens", True, FlagCategory.CONFIGURATION, "Maximum tokens for Claude response"),
    FlagInfo("--output", True, FlagCategory.OUTPUT, "Output file path"),
    FlagInfo("--json", False, FlagCategory.OUTPUT, "Output in JSON format"),
    FlagInfo("--stream", False, FlagCategory.BEHAVIOR, "Stream response"),
    FlagInfo("--no-stream", False, FlagCategory.BEHAVIOR, "Disable streaming"),
    FlagInfo("--system", True, FlagCategory.BEHAVIOR, "System message for Claude"),
    FlagInfo("--context", True, FlagCategory.BEHAVIOR, "Context for Claude conversation"),
    FlagInfo("--input", True, FlagCategory.CONFIGURATION, "Input file path"),
    FlagInfo("--timeout", True, FlagCategory.NETWORK, "Request timeout"),
    FlagInfo("--debug", False, FlagCategory.OUTPUT, "Debug mode"),
    FlagInfo("--quiet", False, FlagCategory.OUTPUT, "Quiet mode"),
)

DEFAULT_ALIASES: dict[str, str] = {
    "-e": "--env",
    "-h": HELP_FLAG,
    "-v": VERSION_FLAG,
}

DEFAULT_CONFLICTS: tuple[ConflictRule, ...] = (
    ConflictRule(
        "--verbose",
        ConflictResolution.WRAPPER_TAKES_PRECEDENCE,
        "cce verbose flag takes precedence over Claude CLI verbose flag",
    ),
    ConflictRule(
        HELP_FLAG,
        ConflictResolution.WRAPPER_TAKES_PRECEDENCE,
        "cce will show combined help including Claude CLI options",
    ),
    ConflictRule(
        VERSION_FLAG,
        ConflictResolution.WRAPPER_TAKES_PRECEDENCE,
        "cce version flag takes precedence",
    ),
)


def split_inline_value(token: str) -> tuple[str, str | None]:
    """Split a ``--flag=value`` token into its flag and inline value.

    Only tokens starting with a dash are split; positional arguments that
    happen to contain '=' are returned unchanged with no value.
    """
    if token.startswith("-") and "=" in token:
        flag, _, value = token.partition("=")
        return flag, value
    return token, None


class FlagRegistry:
    """Classification of wrapper and forwarded-command flags.

    Registration methods overwrite existing entries with the same canonical
    name, which is how the vocabulary is extended at startup. Lookups never
    raise: malformed input such as an empty string is simply unknown.
    """

    def __init__(self) -> None:
        self._wrapper_flags: dict[str, FlagInfo] = {}
        self._forwarded_flags: dict[str, FlagInfo] = {}
        self._conflicts: dict[str, ConflictRule] = {}
        self._aliases: dict[str, str] = {}

    @classmethod
    def default(cls) -> FlagRegistry:
        """Build a registry holding the standard cce and Claude CLI vocabulary."""
        registry = cls()
        for info in DEFAULT_WRAPPER_FLAGS:
            registry.register_wrapper_flag(info)
        for info in DEFAULT_FORWARDED_FLAGS:
            registry.register_forwarded_flag(info)
        for short, canonical in DEFAULT_ALIASES.items():
            registry.add_alias(short, canonical)
        for rule in DEFAULT_CONFLICTS:
            registry.add_conflict(rule)
        return registry

    # Registration

    def register_wrapper_flag(self, info: FlagInfo) -> None:
        self._wrapper_flags[info.name] = info

    def register_forwarded_flag(self, info: FlagInfo) -> None:
        self._forwarded_flags[info.name] = info

    def add_alias(self, short: str, canonical: str) -> None:
        self._aliases[short] = canonical

    def add_conflict(self, rule: ConflictRule) -> None:
        """Add a conflict rule, replacing any existing rule for the same flag."""
        self._conflicts[rule.flag] = rule

    # Lookup

    def normalize(self, token: str) -> str:
        """Resolve a short alias to its canonical name; other tokens pass through."""
        return self._aliases.get(token, token)

    def lookup(self, token: str) -> FlagInfo | None:
        """Return the FlagInfo for a token, wrapper vocabulary first."""
        name = self.normalize(token)
        return self._wrapper_flags.get(name) or self._forwarded_flags.get(name)

    def classify(self, token: str) -> FlagClass:
        """Classify a token; anything outside the wrapper vocabulary is forwarded.

        Only the empty string is UNKNOWN.
        """
        if not token:
            return FlagClass.UNKNOWN
        if self.normalize(token) in self._wrapper_flags:
            return FlagClass.WRAPPER
        return FlagClass.FORWARDED

    def takes_value(self, token: str) -> bool:
        """Whether a token consumes the next one as its value.

        False for unknown tokens.
        """
        info = self.lookup(token)
        return info.takes_value if info is not None else False

    def conflict_for(self, token: str) -> ConflictRule | None:
        return self._conflicts.get(self.normalize(token))

    def is_wrapper_flag(self, token: str) -> bool:
        return self.classify(token) is FlagClass.WRAPPER

    def is_forwarded_flag(self, token: str) -> bool:
        """Whether the token is in the registered forwarded vocabulary."""
        return self.normalize(token) in self._forwarded_flags

    def is_known_flag(self, token: str) -> bool:
        return self.lookup(token) is not None

    def category_for(self, token: str) -> FlagCategory | None:
        info = self.lookup(token)
        return info.category if info is not None else None

    def description_for(self, token: str) -> str | None:
        info = self.lookup(token)
        return info.description if info is not None else None

    def validate_flag(self, flag: str, value: str = "") -> None:
        """Check that a known flag is given a value exactly when it takes one.

        Unknown flags are not validated.

        Raises:
            FlagValidationError: If the flag's arity does not match the value
        """
        info = self.lookup(flag)
        if info is None:
            return
        if info.takes_value and not value.strip():
            raise FlagValidationError(f"flag {flag} requires a value")
        if not info.takes_value and value:
            raise FlagValidationError(f"flag {flag} does not take a value")

    # Snapshots

    def wrapper_flags(self) -> dict[str, FlagInfo]:
        return dict(self._wrapper_flags)

    def forwarded_flags(self) -> dict[str, FlagInfo]:
        return dict(self._forwarded_flags)

    def aliases(self) -> dict[str, str]:
        return dict(self._aliases)


__all__ = [
    "FlagCategory",
    "FlagClass",
    "ConflictResolution",
    "FlagInfo",
    "ConflictRule",
    "FlagValidationError",
    "FlagRegistry",
    "HELP_FLAG",
    "VERSION_FLAG",
    "split_inline_value",
]
