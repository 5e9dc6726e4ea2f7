"""nodemod error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Parse
- 4xxx: Recipe
- 9xxx: Internal

A binding that is simply absent from a file is never an error: the engine
reports it as ``None`` or an empty result. These types cover caller mistakes
only (unknown recipe, unsupported file type, malformed binding path).
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Parse (3xxx)
    PARSE_UNSUPPORTED_LANGUAGE = 3001
    PARSE_DECODE_ERROR = 3002
    PARSE_READ_ERROR = 3003

    # Recipe (4xxx)
    RECIPE_NOT_FOUND = 4001
    RECIPE_INVALID_BINDING_PATH = 4002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class NodemodError(Exception):
    """Base error with structured context for CLI and JSON output."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'RECIPE_NOT_FOUND')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(NodemodError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class ParseError(NodemodError):
    """Source files the syntax layer cannot handle."""

    @classmethod
    def unsupported_language(cls, path: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_UNSUPPORTED_LANGUAGE,
            message=f"No grammar available for {path}",
            details={"path": path},
        )

    @classmethod
    def decode_error(cls, path: str, encoding: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_DECODE_ERROR,
            message=f"Cannot decode {path} as {encoding}",
            details={"path": path, "encoding": encoding},
        )

    @classmethod
    def read_error(cls, path: str, reason: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_READ_ERROR,
            message=f"Cannot read {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class RecipeError(NodemodError):
    """Recipe lookup and recipe programming errors."""

    @classmethod
    def not_found(cls, name: str, available: list[str]) -> "RecipeError":
        return cls(
            code=ErrorCode.RECIPE_NOT_FOUND,
            message=f"Unknown recipe '{name}'",
            details={"name": name, "available": available},
        )

    @classmethod
    def invalid_binding_path(cls, path: str, reason: str) -> "RecipeError":
        return cls(
            code=ErrorCode.RECIPE_INVALID_BINDING_PATH,
            message=f"Invalid binding path '{path}': {reason}",
            details={"path": path, "reason": reason},
        )


class InternalError(NodemodError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
