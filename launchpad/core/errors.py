from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class LaunchpadError(Exception):
    code: str
    message: str
    data: dict[str, Any] | None = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class ConfigurationRejected(LaunchpadError):
    pass


class DeprecatedEnvironment(ConfigurationRejected):
    pass


class IncludeFileError(ConfigurationRejected):
    pass


class InstallRootError(ConfigurationRejected):
    pass


class RuntimeNotFound(LaunchpadError):
    pass


class LaunchFailed(LaunchpadError):
    pass
