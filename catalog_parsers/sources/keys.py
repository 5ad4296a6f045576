"""Typed descriptors of the per-source configurable options."""

from dataclasses import dataclass, field
from typing import Any, ClassVar


@dataclass(frozen=True)
class ConfigKey:
    """A declared configuration option with a default value.

    ``key`` is the name under which an override is persisted in the
    config store. Variants fix the key name and the value type.
    """

    key: str
    default_value: Any

    def validate(self, value: Any) -> Any:
        """Check an override before it is written to the store."""
        return value


@dataclass(frozen=True)
class Domain(ConfigKey):
    """Host name used for every request, with optional mirror alternatives."""

    KEY: ClassVar[str] = "domain"

    key: str = field(default=KEY, init=False)
    default_value: str
    presets: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.default_value:
            raise ValueError("Domain key needs a default domain")
        object.__setattr__(self, "presets", tuple(self.presets))

    def validate(self, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"Invalid domain: {value!r}")
        return value.strip()


@dataclass(frozen=True)
class UserAgent(ConfigKey):
    """User-Agent header a source must be requested with."""

    KEY: ClassVar[str] = "user_agent"

    key: str = field(default=KEY, init=False)
    default_value: str

    def validate(self, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError(f"Invalid user agent: {value!r}")
        return value


# Namespaced access, e.g. ``ConfigKey.Domain("example.org")``
ConfigKey.Domain = Domain
ConfigKey.UserAgent = UserAgent
