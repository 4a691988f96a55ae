"""ServiceResult, ServiceError, and the engine error taxonomy.

INVARIANT: All service-layer methods return ServiceResult.
INVARIANT: Engine components return errors as values; no exception crosses
a component boundary. The CLI and any host integration consume these types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from propbind.domain.values import to_plain


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"apply_configuration"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None


# ── engine errors ───────────────────────────────────────────────────


class EngineError(BaseModel):
    """Base of every error value returned by an engine component."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def code(self) -> str:
        return "engine_error"

    @property
    def message(self) -> str:
        return self.code

    @property
    def detail(self) -> dict[str, Any]:
        """JSON-compatible view of the error's fields."""
        out: dict[str, Any] = {}
        for name, value in self:
            if isinstance(value, EngineError):
                out[name] = {"code": value.code, "message": value.message, **value.detail}
            else:
                out[name] = to_plain(value)
        return out

    def to_service_error(self) -> ServiceError:
        return ServiceError(code=self.code, message=self.message, detail=self.detail)

    def __str__(self) -> str:
        return self.message


class TypeResolutionError(EngineError):
    """A type name matched nothing in the type universe."""

    name: str
    suggestions: tuple[str, ...] = ()

    @property
    def code(self) -> str:
        return "type_not_found"

    @property
    def message(self) -> str:
        text = f"Unknown type '{self.name}'"
        if self.suggestions:
            text += f". Did you mean: {', '.join(self.suggestions)}?"
        return text


class CoercionError(EngineError):
    """A raw value could not be converted to the expected kind."""

    field: str
    expected: str
    raw: Any = None
    reason: str = ""

    @property
    def code(self) -> str:
        return "coercion_failed"

    @property
    def message(self) -> str:
        text = f"Field '{self.field}': cannot convert {_show(self.raw)} to {self.expected}"
        if self.reason:
            text += f" ({self.reason})"
        return text


class SchemaErrorReason(StrEnum):
    MISSING_REQUIRED = "missing_required"
    OUT_OF_RANGE = "out_of_range"
    UNKNOWN_FIELD = "unknown_field"
    UNKNOWN_KIND = "unknown_kind"
    INVALID_DEFAULT = "invalid_default"
    NOT_A_MAPPING = "not_a_mapping"


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


class SchemaError(EngineError):
    """A payload does not satisfy its schema.

    ``text`` carries the reason-specific part of the message, e.g. the
    ``"150 > 100"`` of a range violation or the unknown kind's name.
    """

    field: str
    reason: SchemaErrorReason
    text: str = ""
    severity: Severity = Severity.ERROR

    @property
    def code(self) -> str:
        return f"schema_{self.reason.value}"

    @property
    def message(self) -> str:
        match self.reason:
            case SchemaErrorReason.MISSING_REQUIRED:
                return f"Missing required field '{self.field}'"
            case SchemaErrorReason.OUT_OF_RANGE:
                return f"Field '{self.field}' out of range: {self.text}"
            case SchemaErrorReason.UNKNOWN_FIELD:
                return f"Unknown field '{self.field}' ignored"
            case SchemaErrorReason.UNKNOWN_KIND:
                return f"Field '{self.field}' has unknown type-kind '{self.text}'"
            case SchemaErrorReason.INVALID_DEFAULT:
                return f"Default of field '{self.field}' is invalid: {self.text}"
            case _:
                return f"Payload for '{self.field}' must be a mapping, got {self.text}"


class BindingReason(StrEnum):
    UNKNOWN_MEMBER = "unknown_member"
    READ_ONLY = "read_only"
    NULL_INTERMEDIATE = "null_intermediate"
    VALUE_TYPE_INTERMEDIATE = "value_type_intermediate"
    COERCION_FAILED = "coercion_failed"
    READ_FAILED = "read_failed"
    WRITE_FAILED = "write_failed"
    NESTED_FAILED = "nested_failed"
    EMPTY_PATH = "empty_path"


class BindingError(EngineError):
    """One property assignment failed; nothing was written for ``path``.

    For ``nested_failed`` the members listed in ``failed`` were not written;
    the other members of the nested mapping were.
    """

    path: str
    segment: str = ""
    reason: BindingReason
    owner: str = ""
    suggestions: tuple[str, ...] = ()
    available: tuple[str, ...] = ()
    failed: tuple[str, ...] = ()
    note: str = ""
    cause: EngineError | None = None

    @property
    def code(self) -> str:
        return f"binding_{self.reason.value}"

    @property
    def message(self) -> str:
        match self.reason:
            case BindingReason.UNKNOWN_MEMBER:
                text = f"No member '{self.segment}' on {self.owner} (path '{self.path}')"
                if self.suggestions:
                    text += f". Did you mean: {', '.join(self.suggestions)}?"
                if self.available:
                    text += f" Available: {', '.join(self.available)}"
                return text
            case BindingReason.READ_ONLY:
                return f"Member '{self.segment}' on {self.owner} is read-only (path '{self.path}')"
            case BindingReason.NULL_INTERMEDIATE:
                return (
                    f"Cannot bind '{self.path}': '{self.segment}' on {self.owner} is not set; "
                    "nested objects are never created implicitly"
                )
            case BindingReason.VALUE_TYPE_INTERMEDIATE:
                return (
                    f"Cannot bind '{self.path}': cannot descend into value-type member "
                    f"'{self.segment}' ({self.note})"
                )
            case BindingReason.COERCION_FAILED:
                inner = self.cause.message if self.cause is not None else self.note
                return f"Cannot bind '{self.path}': {inner}"
            case BindingReason.READ_FAILED:
                return (
                    f"Reading '{self.segment}' on {self.owner} failed "
                    f"(path '{self.path}'): {self.note}"
                )
            case BindingReason.WRITE_FAILED:
                return f"Writing '{self.path}' failed: {self.note}"
            case BindingReason.NESTED_FAILED:
                return f"Cannot bind '{self.path}': failed members {', '.join(self.failed)}"
            case _:
                return "Cannot bind an empty path"


def _show(raw: Any) -> str:
    if isinstance(raw, str):
        return repr(raw)
    text = repr(to_plain(raw))
    return text if len(text) <= 60 else text[:57] + "..."


# ── outcome values ──────────────────────────────────────────────────


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one schema validation.

    ``merged`` is the schema-complete, typed configuration and is only
    populated when ``ok`` is True.
    """

    ok: bool
    errors: tuple[EngineError, ...] = ()
    warnings: tuple[SchemaError, ...] = ()
    merged: dict[str, Any] = field(default_factory=dict)

    def messages(self) -> list[str]:
        return [e.message for e in self.errors]

    def warning_messages(self) -> list[str]:
        return [w.message for w in self.warnings]

    def __str__(self) -> str:
        return "Valid" if self.ok else f"Invalid: {'; '.join(self.messages())}"


@dataclass(frozen=True)
class Bound:
    """A successful assignment: ``value`` was written at ``path``."""

    path: str
    value: Any
