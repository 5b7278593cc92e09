"""Errors and warnings reported while loading the configuration tree.

Errors must stop any later reconciliation, warnings must only be surfaced
to the user. Every message embeds the path of the offending file.
"""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


class EntityError(Exception):
    """Base class for everything that keeps an entity out of the result."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(message)


class EntityReadError(EntityError):
    """A file or directory could not be read."""

    def __init__(self, path: str, reason: object) -> None:
        super().__init__(path, f"unable to read {path}: {reason}")


class EntityParseError(EntityError):
    """A file could not be deserialized into its entity type."""

    def __init__(self, path: str, reason: object) -> None:
        super().__init__(path, f"unable to parse {path}: {reason}")


class EntityValidationError(EntityError):
    pass


class DuplicateEntityError(EntityError):
    def __init__(
        self, name: str, path: str, existing_path: str, label: str = "Repository"
    ) -> None:
        self.name = name
        self.existing_path = existing_path
        super().__init__(
            path,
            f"{label} {name} defined in 2 places (check {path} and {existing_path})",
        )


@dataclass(frozen=True)
class LoadWarning:
    path: str
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class LoadResult(Generic[T]):
    """Entities read from a directory together with the problems found."""

    entities: dict[str, T] = field(default_factory=dict)
    errors: list[EntityError] = field(default_factory=list)
    warnings: list[LoadWarning] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def merge(self, other: "LoadResult[T]") -> None:
        """Fold a child result into this one. Entities of ``other`` win."""
        self.entities.update(other.entities)
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
