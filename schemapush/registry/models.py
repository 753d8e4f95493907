"""Data models for schema files, upload requests, server messages and results."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict


@dataclass(frozen=True)
class SchemaFile:
    """A local file holding a valid self-describing JSON Schema."""

    path: Path
    content: dict[str, Any]


@dataclass(frozen=True)
class ParseError:
    """A local file that could not be read as a self-describing schema."""

    path: Path
    message: str

    def as_string(self) -> str:
        return f"Cannot parse {self.path}: {self.message}"


@dataclass(frozen=True)
class TemporaryKeys:
    """Read and write keys issued by the registry for a single session."""

    read: uuid.UUID
    write: uuid.UUID


@dataclass(frozen=True)
class PushRequest:
    """Everything needed to upload one schema.

    The registry path is derived from the schema's own ``self`` block.
    """

    registry_root: str
    is_public: bool
    content: dict[str, Any]
    api_key: uuid.UUID


class ServerMessage(BaseModel):
    """Common message returned by the registry in 2xx JSON responses.

    ``status`` is the HTTP status echoed by the server, ``location`` the
    URI of the uploaded schema when the server reports one.
    """

    model_config = ConfigDict(strict=True)

    status: Optional[int] = None
    message: str
    location: Optional[str] = None

    def as_string(self) -> str:
        parts = [self.message]
        if self.location:
            parts.append(f"at {self.location}")
        if self.status is not None:
            parts.append(f"({self.status})")
        return " ".join(parts)


class Status(Enum):
    """Outcome of a single schema upload."""

    UPDATED = "updated"
    CREATED = "created"
    UNKNOWN = "unknown"
    FAILED = "failed"

    @property
    def is_success(self) -> bool:
        return self in (Status.UPDATED, Status.CREATED)


@dataclass(frozen=True)
class Result:
    """Outcome of uploading one file.

    ``message`` is a parsed :class:`ServerMessage` when the registry
    answered with one, otherwise the raw response body or an error text.
    """

    message: Union[str, ServerMessage]
    status: Status

    def as_string(self) -> str:
        if isinstance(self.message, ServerMessage):
            return self.message.as_string()
        return self.message

    @classmethod
    def failed(cls, message: str) -> Result:
        return cls(message=message, status=Status.FAILED)


@dataclass(frozen=True)
class Total:
    """Running count of upload outcomes for a session."""

    updates: int = 0
    creates: int = 0
    failures: int = 0
    unknown: int = 0

    @property
    def processed(self) -> int:
        return self.updates + self.creates + self.failures + self.unknown

    @property
    def uploaded(self) -> int:
        return self.updates + self.creates

    @property
    def exit_code(self) -> int:
        """1 if any upload failed or ended with an unknown status, else 0."""
        return 1 if self.failures > 0 or self.unknown > 0 else 0

    def add(self, result: Result) -> Total:
        """Return a new Total with *result* counted."""
        status = result.status
        if status is Status.UPDATED:
            return replace(self, updates=self.updates + 1)
        elif status is Status.CREATED:
            return replace(self, creates=self.creates + 1)
        elif status is Status.FAILED:
            return replace(self, failures=self.failures + 1)
        elif status is Status.UNKNOWN:
            return replace(self, unknown=self.unknown + 1)
        else:
            raise AssertionError(f"Unhandled upload status: {status!r}")
