"""ConfigurationService — validate, merge, and bind configuration payloads.

The caller-facing orchestration over the four engine components:

    schema lookup -> SchemaValidator.validate -> PropertyBinder.bind per key

Every public method returns a :class:`ServiceResult`. Validation failures
stop before any binding; binding failures are per key, so a result can
report some keys applied and others failed.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from propbind.domain.builtin_schemas import SCHEMA_REGISTRY
from propbind.domain.colors import make_color
from propbind.domain.distance import rank_suggestions
from propbind.domain.schema import FieldSchema, schema_for_type
from propbind.domain.values import to_plain
from propbind.infrastructure.memory import BUILTIN_LAYERS, StaticLayerTable
from propbind.services.binder import PropertyBinder
from propbind.services.coercion import ValueCoercer
from propbind.services.resolver import TypeResolver
from propbind.services.result import (
    BindingError,
    ServiceError,
    ServiceResult,
    TypeResolutionError,
)
from propbind.services.validator import SchemaValidator

if TYPE_CHECKING:
    from propbind.config.settings import PropbindSettings
    from propbind.domain.schema import SchemaEntry
    from propbind.infrastructure.host import MutationExecutor, ObjectResolver, TypeUniverse

logger = logging.getLogger(__name__)


class ConfigurationService:
    """Applies configuration payloads to live objects.

    Usage::

        service = ConfigurationService.from_settings(settings, build_catalog())
        result = service.apply(renderer, {"enabled": False}, "MeshRenderer")
    """

    def __init__(
        self,
        resolver: TypeResolver,
        coercer: ValueCoercer,
        validator: SchemaValidator,
        binder: PropertyBinder,
        *,
        schemas: Mapping[str, FieldSchema] | None = None,
    ) -> None:
        self.resolver = resolver
        self.coercer = coercer
        self.validator = validator
        self.binder = binder
        self._schemas = dict(SCHEMA_REGISTRY if schemas is None else schemas)

    @classmethod
    def from_settings(
        cls,
        settings: PropbindSettings,
        universe: TypeUniverse,
        *,
        objects: ObjectResolver | None = None,
        executor: MutationExecutor | None = None,
    ) -> ConfigurationService:
        """Wire the engine from settings.

        Raises:
            pydantic.ValidationError: If a schema declared in settings
                violates the schema invariants.
        """
        resolver = TypeResolver(
            universe,
            aliases=settings.resolver.aliases,
            strip_prefixes=settings.resolver.strip_prefixes,
            suggestion_limit=settings.resolver.suggestion_limit,
        )
        layers = dict(BUILTIN_LAYERS) if settings.layers.include_builtin else {}
        layers.update(settings.layers.names)
        coercer = ValueCoercer(
            resolver,
            objects,
            StaticLayerTable(layers),
            colors={name: make_color(rgba) for name, rgba in settings.colors.named.items()},
        )
        validator = SchemaValidator(coercer, unknown_fields=settings.validation.unknown_fields)
        binder = PropertyBinder(
            resolver, coercer, executor, suggestion_limit=settings.resolver.suggestion_limit
        )
        schemas = dict(SCHEMA_REGISTRY)
        for name, raw in settings.schemas.items():
            schemas[name] = FieldSchema.from_mapping(name, raw)
        return cls(resolver, coercer, validator, binder, schemas=schemas)

    # ── schemas ──────────────────────────────────────────────────────

    def schema(self, name: str) -> FieldSchema | None:
        """Registered schema *name*, else a schema derived from type *name*."""
        schema = self._schemas.get(name)
        if schema is not None:
            return schema
        descriptor = self.resolver.resolve(name)
        if isinstance(descriptor, TypeResolutionError):
            return None
        return schema_for_type(descriptor)

    def list_schemas(self) -> ServiceResult:
        items = [
            {"name": s.name, "description": s.description, "fields": len(s.entries)}
            for s in sorted(self._schemas.values(), key=lambda s: s.name)
        ]
        return ServiceResult(ok=True, op="list_schemas", data={"items": items, "count": len(items)})

    def show_schema(self, name: str) -> ServiceResult:
        schema = self.schema(name)
        if schema is None:
            return self._schema_not_found("show_schema", name)
        return ServiceResult(
            ok=True,
            op="show_schema",
            data={
                "name": schema.name,
                "description": schema.description,
                "entries": [_entry_data(e) for e in schema.entries],
            },
        )

    # ── types ────────────────────────────────────────────────────────

    def resolve_type(self, name: str) -> ServiceResult:
        descriptor = self.resolver.resolve(name)
        if isinstance(descriptor, TypeResolutionError):
            return ServiceResult(ok=False, op="resolve", error=descriptor.to_service_error())
        return ServiceResult(
            ok=True,
            op="resolve",
            data={
                "query": name,
                "name": descriptor.name,
                "aliases": list(descriptor.aliases),
                "reference": descriptor.reference,
                "members": len(descriptor.member_names()),
            },
        )

    def describe_type(self, name: str) -> ServiceResult:
        descriptor = self.resolver.resolve(name)
        if isinstance(descriptor, TypeResolutionError):
            return ServiceResult(ok=False, op="members", error=descriptor.to_service_error())
        members = [
            {
                "name": m.name,
                "kind": m.kind.value,
                "type": m.type_label or m.spec.label,
                "backing": m.backing.value,
                "writable": m.writable,
            }
            for m in descriptor.members
        ]
        return ServiceResult(
            ok=True,
            op="members",
            data={"name": descriptor.name, "members": members, "count": len(members)},
        )

    # ── configuration ────────────────────────────────────────────────

    def validate(self, payload: Any, schema: FieldSchema | str) -> ServiceResult:
        """Validate *payload* and return the merged configuration."""
        resolved = self.schema(schema) if isinstance(schema, str) else schema
        if resolved is None:
            return self._schema_not_found("validate", str(schema))

        result = self.validator.validate(payload, resolved)
        warnings = result.warning_messages()
        if not result.ok:
            return ServiceResult(
                ok=False,
                op="validate",
                warnings=warnings,
                error=ServiceError(
                    code="validation_failed",
                    message=f"{len(result.errors)} validation error(s) in '{resolved.name}'",
                    detail={
                        "schema": resolved.name,
                        "errors": [{"code": e.code, "message": e.message} for e in result.errors],
                    },
                ),
            )
        return ServiceResult(
            ok=True,
            op="validate",
            warnings=warnings,
            data={"schema": resolved.name, "merged": serialize_configuration(result.merged)},
        )

    def apply(
        self,
        target: Any,
        payload: Any,
        schema: FieldSchema | str | None = None,
    ) -> ServiceResult:
        """Validate *payload*, then bind every merged key onto *target*.

        Without *schema*, a permissive schema is derived from the target's
        own type.
        """
        if schema is None:
            resolved: FieldSchema | None = schema_for_type(self.resolver.describe(type(target)))
        elif isinstance(schema, str):
            resolved = self.schema(schema)
        else:
            resolved = schema
        if resolved is None:
            return self._schema_not_found("apply_configuration", str(schema))

        result = self.validator.validate(payload, resolved)
        warnings = result.warning_messages()
        if not result.ok:
            report = format_report(type(target).__name__, [], [], result.messages())
            return ServiceResult(
                ok=False,
                op="apply_configuration",
                warnings=warnings,
                data={"report": report},
                error=ServiceError(
                    code="validation_failed",
                    message=f"{len(result.errors)} validation error(s) in '{resolved.name}'",
                    detail={"errors": result.messages()},
                ),
            )

        outcomes = self.binder.bind_many(target, result.merged)
        applied = [path for path, o in outcomes.items() if not isinstance(o, BindingError)]
        failed = [o for o in outcomes.values() if isinstance(o, BindingError)]
        report = format_report(
            type(target).__name__, applied, [f.message for f in failed], []
        )
        data = {
            "target": type(target).__name__,
            "schema": resolved.name,
            "applied": applied,
            "failed": [{"path": f.path, "code": f.code, "message": f.message} for f in failed],
            "report": report,
        }
        if failed:
            logger.debug("Applied %d key(s), %d failed", len(applied), len(failed))
            return ServiceResult(
                ok=False,
                op="apply_configuration",
                warnings=warnings,
                data=data,
                error=ServiceError(
                    code="binding_failed",
                    message=f"{len(failed)} of {len(outcomes)} assignment(s) failed",
                    detail={"failed": data["failed"]},
                ),
            )
        return ServiceResult(ok=True, op="apply_configuration", warnings=warnings, data=data)

    def parse_configuration(self, text: str | None, schema: FieldSchema | str) -> ServiceResult:
        """Parse JSON configuration text into a payload mapping.

        Empty text, invalid JSON, or a non-object document degrade to the
        schema's declared defaults; the latter two add a warning.
        """
        resolved = self.schema(schema) if isinstance(schema, str) else schema
        if resolved is None:
            return self._schema_not_found("parse_configuration", str(schema))

        defaults = serialize_configuration(resolved.defaults())
        if text is None or not text.strip():
            return _parsed(defaults, fallback=True)
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning("Invalid configuration JSON for '%s': %s", resolved.name, exc)
            warning = f"Invalid configuration JSON ({exc.msg}); using defaults of '{resolved.name}'"
            return _parsed(defaults, fallback=True, warnings=[warning])
        if not isinstance(parsed, dict):
            warning = f"Configuration must be a JSON object; using defaults of '{resolved.name}'"
            return _parsed(defaults, fallback=True, warnings=[warning])
        return _parsed(parsed, fallback=False)

    def _schema_not_found(self, op: str, name: str) -> ServiceResult:
        candidates = list(self._schemas) + list(self.resolver.universe.names())
        suggestions = rank_suggestions(name, candidates)
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(
                code="schema_not_found",
                message=f"No schema or type named '{name}'",
                detail={"name": name, "suggestions": suggestions},
            ),
        )


# ── module-level helpers ────────────────────────────────────────────


def merge_configurations(
    base: Mapping[str, Any] | None,
    override: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Shallow merge: keys of *override* replace keys of *base*.

    Examples:
        >>> merge_configurations({"a": 1, "b": 2}, {"b": 3})
        {'a': 1, 'b': 3}
        >>> merge_configurations(None, {"a": 1})
        {'a': 1}
    """
    return {**(base or {}), **(override or {})}


def serialize_configuration(config: Mapping[str, Any]) -> dict[str, Any]:
    """JSON-compatible copy of a merged configuration."""
    return {str(k): to_plain(v) for k, v in config.items()}


def format_report(target: str, applied: list[str], failed: list[str], errors: list[str]) -> str:
    """Plain-text outcome summary for tool callers."""
    if errors:
        lines = [f"Configuration for {target} is invalid:"]
        lines.extend(f"  - {message}" for message in errors)
        return "\n".join(lines)
    lines = [f"Configured {target}: {len(applied)} applied, {len(failed)} failed"]
    lines.extend(f"  set {path}" for path in applied)
    lines.extend(f"  error {message}" for message in failed)
    return "\n".join(lines)


def _parsed(config: dict[str, Any], *, fallback: bool, warnings: list[str] | None = None) -> ServiceResult:
    return ServiceResult(
        ok=True,
        op="parse_configuration",
        data={"configuration": config, "fallback": fallback},
        warnings=warnings or [],
    )


def _entry_data(entry: SchemaEntry) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": entry.name,
        "kind": entry.kind,
        "required": entry.required,
    }
    if entry.has_default:
        data["default"] = to_plain(entry.default)
    if entry.has_range:
        data["range"] = [entry.minimum, entry.maximum]
    choices = entry.choices or (tuple(m.name for m in entry.enum_type) if entry.enum_type else ())
    if choices:
        data["choices"] = list(choices)
    if entry.reference_type:
        data["type"] = entry.reference_type
    if entry.items is not None:
        data["items"] = entry.items.nested.name if entry.items.nested else entry.items.kind
    if entry.nested is not None:
        data["schema"] = entry.nested.name
    if entry.description:
        data["description"] = entry.description
    return data
