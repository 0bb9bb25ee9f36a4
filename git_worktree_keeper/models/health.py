"""Health report models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class HealthLevel(Enum):
    """Severity of a health check result."""
    OK = "OK"
    WARN = "WARN"
    ERROR = "ERROR"


@dataclass
class HealthCheck:
    """A single health check result."""
    name: str
    level: HealthLevel
    message: str

    def __str__(self) -> str:
        return f"[{self.level.value}] {self.name}: {self.message}"


@dataclass
class HealthReport:
    """Ordered collection of health check results."""
    checks: List[HealthCheck] = field(default_factory=list)

    def add(self, name: str, level: HealthLevel, message: str) -> None:
        self.checks.append(HealthCheck(name=name, level=level, message=message))

    @property
    def has_error(self) -> bool:
        return any(c.level == HealthLevel.ERROR for c in self.checks)

    def by_level(self, level: HealthLevel) -> List[HealthCheck]:
        return [c for c in self.checks if c.level == level]
