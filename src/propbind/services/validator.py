"""SchemaValidator — exhaustive validation and default merging.

Every schema entry and every payload key is evaluated before returning, so
a caller sees all problems in one response. On success the merged result is
schema-complete and fully typed; declared defaults go through the same
coercer as supplied values.

Dotted payload keys (``"main.duration"``) are folded into the nested mapping
of a nested-schema entry. A dotted key whose head names any other entry is
kept verbatim for the binder, which coerces it against the member's kind.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Literal

from propbind.domain.kinds import ValueKind
from propbind.services.result import (
    CoercionError,
    EngineError,
    SchemaError,
    SchemaErrorReason,
    Severity,
    ValidationResult,
)

if TYPE_CHECKING:
    from propbind.domain.schema import FieldSchema, SchemaEntry
    from propbind.services.coercion import ValueCoercer

logger = logging.getLogger(__name__)

UnknownFieldPolicy = Literal["warn", "error"]

_INVALID = object()


class SchemaValidator:
    """Validates payloads against :class:`FieldSchema` declarations.

    Args:
        coercer: Converts each supplied value and default.
        unknown_fields: ``"warn"`` (default) drops unknown keys with a
            warning; ``"error"`` makes them fail validation.
    """

    def __init__(self, coercer: ValueCoercer, *, unknown_fields: UnknownFieldPolicy = "warn") -> None:
        self._coercer = coercer
        self._unknown_fields = unknown_fields

    def validate(self, payload: Any, schema: FieldSchema) -> ValidationResult:
        if not isinstance(payload, Mapping):
            error = SchemaError(
                field=schema.name,
                reason=SchemaErrorReason.NOT_A_MAPPING,
                text=type(payload).__name__,
            )
            return ValidationResult(ok=False, errors=(error,))

        errors: list[EngineError] = []
        warnings: list[SchemaError] = []
        merged = self._merge(payload, schema, "", errors, warnings)
        if errors:
            logger.debug("Schema '%s' rejected payload: %d error(s)", schema.name, len(errors))
            return ValidationResult(ok=False, errors=tuple(errors), warnings=tuple(warnings))
        return ValidationResult(ok=True, warnings=tuple(warnings), merged=merged)

    # ── internals ────────────────────────────────────────────────────

    def _merge(
        self,
        payload: Mapping[str, Any],
        schema: FieldSchema,
        prefix: str,
        errors: list[EngineError],
        warnings: list[SchemaError],
    ) -> dict[str, Any]:
        payload, deferred = self._fold_dotted(payload, schema)
        merged: dict[str, Any] = {}

        for entry in schema.entries:
            path = prefix + entry.name
            if entry.name in payload and not (entry.required and _blank(payload[entry.name])):
                value = self._check(entry, payload[entry.name], path, errors, warnings)
            elif entry.required:
                errors.append(SchemaError(field=path, reason=SchemaErrorReason.MISSING_REQUIRED))
                continue
            elif entry.has_default:
                value = self._check(entry, entry.default, path, errors, warnings, default=True)
            else:
                continue
            if value is not _INVALID:
                merged[entry.name] = value

        for key in payload:
            if schema.entry(str(key)) is None:
                self._unknown(prefix + str(key), errors, warnings)
        merged.update(deferred)
        return merged

    def _fold_dotted(
        self, payload: Mapping[str, Any], schema: FieldSchema
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        folded: dict[str, Any] = {}
        deferred: dict[str, Any] = {}
        for key, value in payload.items():
            key = str(key)
            head, dot, rest = key.partition(".")
            entry = schema.entry(head) if dot and schema.entry(key) is None else None
            if entry is None:
                previous = folded.get(key)
                # Dotted keys win over the same member in a nested mapping.
                if isinstance(previous, Mapping) and isinstance(value, Mapping):
                    folded[key] = {**value, **previous}
                else:
                    folded[key] = value
            elif entry.nested is not None and isinstance(folded.get(head, {}), Mapping):
                folded[head] = {**folded.get(head, {}), rest: value}
            else:
                deferred[key] = value
        return folded, deferred

    def _check(
        self,
        entry: SchemaEntry,
        raw: Any,
        path: str,
        errors: list[EngineError],
        warnings: list[SchemaError],
        *,
        default: bool = False,
    ) -> Any:
        kind = entry.value_kind
        if kind is None:
            errors.append(SchemaError(field=path, reason=SchemaErrorReason.UNKNOWN_KIND, text=entry.kind))
            return _INVALID

        if kind is ValueKind.NESTED_OBJECT and entry.nested is not None:
            return self._check_nested(entry.nested, raw, path, errors, warnings)
        if kind is ValueKind.LIST and entry.items is not None and entry.items.nested is not None:
            items = list(raw) if isinstance(raw, (list, tuple)) else [raw]
            return self._check_items(entry.items, items, path, errors, warnings)

        value = self._coercer.coerce(raw, entry.to_spec(), field=path)
        if isinstance(value, CoercionError):
            if default:
                errors.append(
                    SchemaError(field=path, reason=SchemaErrorReason.INVALID_DEFAULT, text=value.message)
                )
            else:
                errors.append(value)
            return _INVALID

        if entry.has_range and not self._in_range(entry, value, path, errors):
            return _INVALID

        if kind is ValueKind.LIST and entry.items is not None:
            return self._check_items(entry.items, value, path, errors, warnings)
        return value

    def _check_nested(
        self,
        schema: FieldSchema,
        raw: Any,
        path: str,
        errors: list[EngineError],
        warnings: list[SchemaError],
    ) -> Any:
        if not isinstance(raw, Mapping):
            errors.append(
                CoercionError(field=path, expected="nested_object", raw=raw, reason="expected a mapping")
            )
            return _INVALID
        nested_errors: list[EngineError] = []
        value = self._merge(raw, schema, f"{path}.", nested_errors, warnings)
        errors.extend(nested_errors)
        return _INVALID if nested_errors else value

    def _check_items(
        self,
        items: SchemaEntry,
        values: list[Any],
        path: str,
        errors: list[EngineError],
        warnings: list[SchemaError],
    ) -> Any:
        if items.nested is None and not items.has_range:
            return values
        before = len(errors)
        out: list[Any] = []
        for index, value in enumerate(values):
            item_path = f"{path}[{index}]"
            if items.nested is not None:
                out.append(self._check_nested(items.nested, value, item_path, errors, warnings))
            elif self._in_range(items, value, item_path, errors):
                out.append(value)
        return _INVALID if len(errors) > before else out

    def _in_range(self, entry: SchemaEntry, value: Any, path: str, errors: list[EngineError]) -> bool:
        # Bounds are inclusive.
        if entry.minimum is not None and value < entry.minimum:
            text = f"{value:g} < {entry.minimum:g}"
        elif entry.maximum is not None and value > entry.maximum:
            text = f"{value:g} > {entry.maximum:g}"
        else:
            return True
        errors.append(SchemaError(field=path, reason=SchemaErrorReason.OUT_OF_RANGE, text=text))
        return False

    def _unknown(self, path: str, errors: list[EngineError], warnings: list[SchemaError]) -> None:
        if self._unknown_fields == "error":
            errors.append(SchemaError(field=path, reason=SchemaErrorReason.UNKNOWN_FIELD))
        else:
            warnings.append(
                SchemaError(field=path, reason=SchemaErrorReason.UNKNOWN_FIELD, severity=Severity.WARNING)
            )


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())
