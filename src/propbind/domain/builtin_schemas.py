"""Built-in configuration schemas and the schema registry.

Schemas are keyed by operation or target type name. The built-ins cover the
composite configuration payloads accepted by the editor tools: particle
systems, materials, scene objects, and component property bags.

Payload keys keep the editor's camelCase member names so that agent-supplied
JSON binds without renaming.
"""

from __future__ import annotations

from propbind.domain.schema import FieldSchema, SchemaEntry

SCHEMA_REGISTRY: dict[str, FieldSchema] = {}

PRIMITIVE_TYPES = ("Cube", "Sphere", "Capsule", "Cylinder", "Plane", "Quad")

SHAPE_TYPES = (
    "Sphere",
    "Hemisphere",
    "Cone",
    "Donut",
    "Box",
    "Mesh",
    "MeshRenderer",
    "SkinnedMeshRenderer",
    "Sprite",
    "SpriteRenderer",
    "Circle",
    "SingleSidedEdge",
    "Rectangle",
)

SIMULATION_SPACES = ("Local", "World")


def _e(name: str, kind: str, **kwargs: object) -> SchemaEntry:
    return SchemaEntry(name=name, kind=kind, **kwargs)  # type: ignore[arg-type]


PARTICLE_MAIN = FieldSchema(
    name="particle_system.main",
    description="Main module of a particle system.",
    entries=(
        _e("duration", "number", default=5.0, minimum=0.05),
        _e("looping", "boolean", default=True),
        _e("prewarm", "boolean", default=False),
        _e("startLifetime", "number", default=10.0, minimum=0.0),
        _e("startSpeed", "number", default=5.0),
        _e("startSize", "number", default=1.0, minimum=0.0),
        _e("startColor", "color", default=[1.0, 1.0, 1.0, 1.0]),
        _e("startRotation", "number", default=0.0, minimum=0.0, maximum=360.0),
        _e("gravityModifier", "number", default=0.0, minimum=0.0, maximum=1.0),
        _e("maxParticles", "integer", default=10, minimum=0),
    ),
)

PARTICLE_BURST = FieldSchema(
    name="particle_system.burst",
    description="One emission burst.",
    entries=(
        _e("time", "number", default=0.0, minimum=0.0),
        _e("count", "integer", default=30, minimum=0),
        _e("cycles", "integer", default=1, minimum=1),
        _e("interval", "number", default=0.0, minimum=0.0),
        _e("probability", "number", default=1.0, minimum=0.0, maximum=1.0),
    ),
)

PARTICLE_EMISSION = FieldSchema(
    name="particle_system.emission",
    description="Emission module of a particle system.",
    entries=(
        _e("enabled", "boolean", default=True),
        _e("rateOverTime", "number", default=10.0, minimum=0.0),
        _e("rateOverDistance", "number", default=0.0, minimum=0.0),
        _e(
            "bursts",
            "list",
            default=[],
            items=SchemaEntry(name="bursts[]", kind="nested_object", nested=PARTICLE_BURST),
        ),
    ),
)

PARTICLE_SHAPE = FieldSchema(
    name="particle_system.shape",
    description="Shape module of a particle system.",
    entries=(
        _e("enabled", "boolean", default=True),
        _e("shapeType", "enum", choices=SHAPE_TYPES, default="Cone"),
        _e("angle", "number", default=25.0, minimum=0.0, maximum=90.0),
        _e("radius", "number", default=1.0, minimum=0.0),
        _e("radiusThickness", "number", default=0.0, minimum=0.0, maximum=1.0),
        _e("arc", "number", default=0.0, minimum=0.0, maximum=360.0),
        _e("length", "number", default=1.0, minimum=0.0),
        _e("position", "vector3", default=[0.0, 0.0, 0.0]),
        _e("rotation", "vector3", default=[0.0, 0.0, 0.0]),
        _e("scale", "vector3", default=[1.0, 1.0, 1.0]),
    ),
)

PARTICLE_VELOCITY = FieldSchema(
    name="particle_system.velocity_over_lifetime",
    description="Velocity-over-lifetime module of a particle system.",
    entries=(
        _e("enabled", "boolean", default=False),
        _e("linear", "vector3", default=[0.0, 0.0, 0.0]),
        _e("orbital", "vector3", default=[0.0, 0.0, 0.0]),
        _e("offset", "vector3", default=[0.0, 0.0, 0.0]),
        _e("radial", "number", default=1.0),
        _e("speedModifier", "number", default=1.0),
        _e("space", "enum", choices=SIMULATION_SPACES, default="Local"),
    ),
)

PARTICLE_SYSTEM = FieldSchema(
    name="particle_system",
    description="Composite particle system configuration; every module is optional.",
    entries=(
        _e("main", "nested_object", nested=PARTICLE_MAIN),
        _e("emission", "nested_object", nested=PARTICLE_EMISSION),
        _e("shape", "nested_object", nested=PARTICLE_SHAPE),
        _e("velocityOverLifetime", "nested_object", nested=PARTICLE_VELOCITY),
    ),
)

MATERIAL = FieldSchema(
    name="material",
    description="Material creation and update.",
    entries=(
        _e("materialName", "string", required=True),
        _e("shaderName", "string", required=True),
        _e("baseColor", "color", default=[1.0, 1.0, 1.0, 1.0]),
        _e("metallic", "number", default=0.0, minimum=0.0, maximum=1.0),
        _e("smoothness", "number", default=0.5, minimum=0.0, maximum=1.0),
        _e("emission", "color", default=[0.0, 0.0, 0.0]),
        _e("emissionIntensity", "number", default=1.0, minimum=0.0),
        _e("additionalProperties", "nested_object", default={}),
    ),
)

COMPONENT = FieldSchema(
    name="component",
    description="A component to add, with a free-form property bag bound by path.",
    entries=(
        _e("componentType", "string", required=True),
        _e("properties", "nested_object", default={}),
    ),
)

OBJECT = FieldSchema(
    name="object",
    description="Scene object creation.",
    entries=(
        _e("objectName", "string", required=True),
        _e("type", "enum", choices=("Empty", "Primitive", "Prefab"), required=True),
        _e("position", "vector3", default=[0.0, 0.0, 0.0]),
        _e("rotation", "vector3", default=[0.0, 0.0, 0.0]),
        _e("scale", "vector3", default=[1.0, 1.0, 1.0]),
        _e("parentName", "string"),
        _e("primitiveType", "enum", choices=PRIMITIVE_TYPES),
        _e("prefabName", "string"),
        _e(
            "components",
            "list",
            default=[],
            items=SchemaEntry(name="components[]", kind="nested_object", nested=COMPONENT),
        ),
    ),
)


def register_schema(schema: FieldSchema, *, replace: bool = False) -> FieldSchema:
    """Add *schema* to :data:`SCHEMA_REGISTRY` under its own name.

    Raises:
        KeyError: If a schema of that name exists and *replace* is False.
    """
    if schema.name in SCHEMA_REGISTRY and not replace:
        msg = f"Schema '{schema.name}' is already registered"
        raise KeyError(msg)
    SCHEMA_REGISTRY[schema.name] = schema
    return schema


def _register_builtins() -> None:
    """Populate :data:`SCHEMA_REGISTRY` with the built-in schemas."""
    for schema in (
        PARTICLE_SYSTEM,
        PARTICLE_MAIN,
        PARTICLE_EMISSION,
        PARTICLE_BURST,
        PARTICLE_SHAPE,
        PARTICLE_VELOCITY,
        MATERIAL,
        COMPONENT,
        OBJECT,
    ):
        SCHEMA_REGISTRY[schema.name] = schema


_register_builtins()
