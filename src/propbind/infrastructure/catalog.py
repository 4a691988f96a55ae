"""Sample catalog of common editor component types.

Plain Python stand-ins for the editor's built-in components, with the same
member names the editor exposes. The CLI resolves and describes types
against this catalog, and the tests bind onto instances of it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from propbind.domain.values import Color, LayerMask, Quaternion, Vector2, Vector3
from propbind.infrastructure.registry import ClassRegistry


class LightType(Enum):
    Spot = 0
    Directional = 1
    Point = 2
    Area = 3


class ShadowCastingMode(Enum):
    Off = 0
    On = 1
    TwoSided = 2
    ShadowsOnly = 3


class CollisionDetectionMode(Enum):
    Discrete = 0
    Continuous = 1
    ContinuousDynamic = 2
    ContinuousSpeculative = 3


class RigidbodyType2D(Enum):
    Dynamic = 0
    Kinematic = 1
    Static = 2


# ── assets ──────────────────────────────────────────────────────────


@dataclass
class Material:
    name: str = "Material"
    shader: str = "Standard"
    color: Color = field(default_factory=lambda: Color(1.0, 1.0, 1.0, 1.0))
    metallic: float = 0.0
    smoothness: float = 0.5
    renderQueue: int = 2000


@dataclass
class PhysicMaterial:
    name: str = "PhysicMaterial"
    dynamicFriction: float = 0.6
    staticFriction: float = 0.6
    bounciness: float = 0.0


@dataclass(frozen=True)
class AudioClip:
    name: str
    length: float = 0.0


# ── scene objects ───────────────────────────────────────────────────


@dataclass
class Transform:
    position: Vector3 = field(default_factory=Vector3)
    rotation: Quaternion = field(default_factory=Quaternion)
    localScale: Vector3 = field(default_factory=lambda: Vector3(1.0, 1.0, 1.0))
    parent: Transform | None = None

    @property
    def childCount(self) -> int:
        return 0


@dataclass
class Rigidbody:
    mass: float = 1.0
    drag: float = 0.0
    angularDrag: float = 0.05
    useGravity: bool = True
    isKinematic: bool = False
    collisionDetectionMode: CollisionDetectionMode = CollisionDetectionMode.Discrete
    centerOfMass: Vector3 = field(default_factory=Vector3)
    _velocity: Vector3 = field(default_factory=Vector3, repr=False)

    @property
    def velocity(self) -> Vector3:
        return self._velocity

    @velocity.setter
    def velocity(self, value: Vector3) -> None:
        self._velocity = value


@dataclass
class Rigidbody2D:
    mass: float = 1.0
    gravityScale: float = 1.0
    bodyType: RigidbodyType2D = RigidbodyType2D.Dynamic
    velocity: Vector2 = field(default_factory=Vector2)


@dataclass
class Collider:
    isTrigger: bool = False
    enabled: bool = True
    sharedMaterial: PhysicMaterial | None = None


@dataclass
class BoxCollider(Collider):
    center: Vector3 = field(default_factory=Vector3)
    size: Vector3 = field(default_factory=lambda: Vector3(1.0, 1.0, 1.0))


@dataclass
class SphereCollider(Collider):
    center: Vector3 = field(default_factory=Vector3)
    radius: float = 0.5


@dataclass
class CapsuleCollider(Collider):
    center: Vector3 = field(default_factory=Vector3)
    radius: float = 0.5
    height: float = 2.0
    direction: int = 1


@dataclass
class MeshCollider(Collider):
    convex: bool = False


@dataclass
class BoxCollider2D:
    isTrigger: bool = False
    offset: Vector2 = field(default_factory=Vector2)
    size: Vector2 = field(default_factory=lambda: Vector2(1.0, 1.0))


@dataclass
class CircleCollider2D:
    isTrigger: bool = False
    offset: Vector2 = field(default_factory=Vector2)
    radius: float = 0.5


@dataclass
class Light:
    type: LightType = LightType.Point
    color: Color = field(default_factory=lambda: Color(1.0, 1.0, 1.0, 1.0))
    intensity: float = 1.0
    range: float = 10.0
    spotAngle: float = 30.0
    cullingMask: LayerMask = field(default_factory=lambda: LayerMask(0xFFFFFFFF))
    shadows: ShadowCastingMode = ShadowCastingMode.Off


@dataclass
class Camera:
    fieldOfView: float = 60.0
    nearClipPlane: float = 0.3
    farClipPlane: float = 1000.0
    orthographic: bool = False
    backgroundColor: Color = field(default_factory=lambda: Color(0.19, 0.3, 0.47, 0.0))
    cullingMask: LayerMask = field(default_factory=lambda: LayerMask(0xFFFFFFFF))

    @property
    def aspect(self) -> float:
        return 16 / 9


@dataclass
class AudioSource:
    clip: AudioClip | None = None
    volume: float = 1.0
    pitch: float = 1.0
    loop: bool = False
    playOnAwake: bool = True
    spatialBlend: float = 0.0
    minDistance: float = 1.0
    maxDistance: float = 500.0


@dataclass
class MeshFilter:
    mesh: str = ""


@dataclass
class MeshRenderer:
    enabled: bool = True
    material: Material | None = None
    shadowCastingMode: ShadowCastingMode = ShadowCastingMode.On
    receiveShadows: bool = True

    @property
    def isVisible(self) -> bool:
        return self.enabled


@dataclass
class MainModule:
    duration: float = 5.0
    loop: bool = True
    startLifetime: float = 5.0
    startSpeed: float = 5.0
    startSize: float = 1.0
    startColor: Color = field(default_factory=lambda: Color(1.0, 1.0, 1.0, 1.0))
    maxParticles: int = 1000


@dataclass
class ParticleSystem:
    main: MainModule = field(default_factory=MainModule)
    useAutoRandomSeed: bool = True


@dataclass
class Animator:
    speed: float = 1.0
    applyRootMotion: bool = False


@dataclass
class GameObject:
    name: str = "GameObject"
    tag: str = "Untagged"
    layer: int = 0
    activeSelf: bool = True
    transform: Transform = field(default_factory=Transform)
    components: list[Any] = field(default_factory=list)

    def add_component(self, component: Any) -> Any:
        self.components.append(component)
        return component

    def get_component(self, type_name: str) -> Any | None:
        if type_name == "Transform":
            return self.transform
        for component in self.components:
            if any(klass.__name__ == type_name for klass in type(component).__mro__):
                return component
        return None


def build_catalog() -> ClassRegistry:
    """Return a fresh registry holding every catalog type."""
    registry = ClassRegistry()
    registry.register(GameObject, aliases=("go", "object"))
    registry.register(Transform)
    registry.register(Rigidbody, aliases=("rb",))
    registry.register(Rigidbody2D, aliases=("rb2d",))
    registry.register(BoxCollider)
    registry.register(SphereCollider)
    registry.register(CapsuleCollider)
    registry.register(MeshCollider)
    registry.register(BoxCollider2D)
    registry.register(CircleCollider2D)
    registry.register(Light)
    registry.register(Camera)
    registry.register(AudioSource, aliases=("audio",))
    registry.register(AudioClip)
    registry.register(MeshFilter)
    registry.register(MeshRenderer, aliases=("renderer",))
    registry.register(Material, aliases=("mat",))
    registry.register(PhysicMaterial)
    registry.register(ParticleSystem, aliases=("particles",))
    registry.register(Animator)
    return registry
