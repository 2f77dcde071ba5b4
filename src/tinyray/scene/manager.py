"""Scene description and manager.

A scene is described on the Python side by plain frozen dataclasses
(``Material``, ``SphereInfo``, ``LightInfo`` and ``Scene``) and uploaded into
the Taichi fields the render kernel reads by a ``SceneManager``. The manager
validates the whole description before uploading it, assigns material IDs in order
of first use and keeps a Python-side record of what it uploaded.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tinyray.scene.manager import Material, SceneManager
    >>> scene = SceneManager()
    >>> ivory = scene.add_material(Material((0.6, 0.3), (0.4, 0.4, 0.3), 50.0))
    >>> scene.add_sphere((-3, 0, -16), 2, ivory)
    >>> scene.add_light((-20, 20, 20), 1.5)
"""

import logging
from dataclasses import dataclass, field
from enum import IntEnum

import taichi.math as tm

from src.tinyray.materials.phong import (
    DEFAULT_ALBEDO,
    DEFAULT_DIFFUSE_COLOR,
    DEFAULT_SPECULAR_EXPONENT,
    MAX_PHONG_MATERIALS,
    add_phong_material,
    clear_phong_materials,
    get_phong_material_count,
    validate_phong_material,
)
from src.tinyray.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
)
from src.tinyray.scene.lights import (
    DEFAULT_BACKGROUND_COLOR,
    MAX_LIGHTS,
    add_light,
    clear_lights,
    get_light_count,
    set_background_color,
)

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3


class ShadingMode(IntEnum):
    """Enumeration of supported shading models.

    Used by the integrator to decide how a hit surface is colored.
    """

    # Material diffuse color, unlit
    FLAT = 0
    # Diffuse color times the summed Lambert term, albedo ignored
    DIFFUSE = 1
    # Albedo-weighted Lambert diffuse plus Phong specular
    PHONG = 2


@dataclass(frozen=True)
class Material:
    """A Phong material.

    Attributes:
        albedo: Weights (k_d, k_s) of the diffuse and specular terms.
        diffuse_color: The diffuse color (R, G, B).
        specular_exponent: The Phong shininess exponent.
    """

    albedo: tuple[float, float] = DEFAULT_ALBEDO
    diffuse_color: tuple[float, float, float] = DEFAULT_DIFFUSE_COLOR
    specular_exponent: float = DEFAULT_SPECULAR_EXPONENT


@dataclass(frozen=True)
class SphereInfo:
    """A sphere in the scene description.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere (strictly positive).
        material: The material of the sphere.
    """

    center: tuple[float, float, float]
    radius: float
    material: Material = field(default_factory=Material)


@dataclass(frozen=True)
class LightInfo:
    """A point light in the scene description.

    Attributes:
        position: The light position.
        intensity: The light intensity (non-negative, may exceed 1).
    """

    position: tuple[float, float, float]
    intensity: float


@dataclass(frozen=True)
class Scene:
    """A complete scene: ordered spheres, ordered lights and a background.

    The order of spheres and lights does not affect the image except for
    exact distance ties, where the earlier sphere wins.
    """

    spheres: tuple[SphereInfo, ...] = ()
    lights: tuple[LightInfo, ...] = ()
    background_color: tuple[float, float, float] = DEFAULT_BACKGROUND_COLOR


class SceneManager:
    """Uploads scene descriptions into the renderer's Taichi fields.

    Creating a manager clears all sphere, light and material storage, so
    only one manager should be live at a time.

    Attributes:
        materials: Materials in material-ID order.
        spheres: Spheres in upload order.
        lights: Lights in upload order.
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[Material] = []
        self.spheres: list[SphereInfo] = []
        self.lights: list[LightInfo] = []
        self._material_ids: dict[Material, int] = {}
        self.background_color: tuple[float, float, float] = DEFAULT_BACKGROUND_COLOR
        self._clear_all()
        set_background_color(self.background_color)

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_lights()
        clear_phong_materials()
        self.materials.clear()
        self.spheres.clear()
        self.lights.clear()
        self._material_ids.clear()

    def clear(self) -> None:
        """Clear the entire scene (spheres, lights and materials)."""
        self._clear_all()

    # =========================================================================
    # Materials
    # =========================================================================

    def add_material(self, material: Material) -> int:
        """Register a material, reusing the ID of an identical one.

        Args:
            material: The material to register.

        Returns:
            The material ID.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If the material parameters are invalid.
        """
        material = Material(
            tuple(material.albedo),
            tuple(material.diffuse_color),
            float(material.specular_exponent),
        )
        material_id = self._material_ids.get(material)
        if material_id is None:
            material_id = add_phong_material(
                material.albedo, material.diffuse_color, material.specular_exponent
            )
            self._material_ids[material] = material_id
            self.materials.append(material)
        return material_id

    def get_material_count(self) -> int:
        """Get the number of registered materials."""
        return get_phong_material_count()

    # =========================================================================
    # Primitives and Lights
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).
            material_id: A material ID returned by add_material().

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If the radius or material_id is invalid.
        """
        if material_id < 0 or material_id >= len(self.materials):
            raise ValueError(f"Invalid material_id: {material_id}")

        sphere_index = add_sphere(vec3(center[0], center[1], center[2]), radius, material_id)
        self.spheres.append(SphereInfo(tuple(center), radius, self.materials[material_id]))
        return sphere_index

    def add_sphere_with_material(
        self,
        center: tuple[float, float, float],
        radius: float,
        material: Material,
    ) -> int:
        """Add a sphere with a material, registering the material if needed."""
        return self.add_sphere(center, radius, self.add_material(material))

    def add_light(self, position: tuple[float, float, float], intensity: float) -> int:
        """Add a point light to the scene.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
            ValueError: If the intensity is negative.
        """
        light_index = add_light(vec3(position[0], position[1], position[2]), intensity)
        self.lights.append(LightInfo(tuple(position), intensity))
        return light_index

    def set_background_color(self, color: tuple[float, float, float]) -> None:
        """Set the color used for rays that hit nothing."""
        self.background_color = (float(color[0]), float(color[1]), float(color[2]))
        set_background_color(self.background_color)

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return get_light_count()

    # =========================================================================
    # Whole-scene Upload
    # =========================================================================

    @staticmethod
    def validate_scene(scene: Scene) -> None:
        """Check a scene description without touching the Taichi fields.

        Raises:
            RuntimeError: If the scene exceeds a storage capacity.
            ValueError: If any sphere, light or material is invalid.
        """
        materials = set()
        for i, sphere in enumerate(scene.spheres):
            if not sphere.radius > 0.0:
                raise ValueError(f"Sphere {i}: radius must be positive, got {sphere.radius}")
            material = sphere.material
            validate_phong_material(
                material.albedo, material.diffuse_color, material.specular_exponent
            )
            materials.add(
                (tuple(material.albedo), tuple(material.diffuse_color), material.specular_exponent)
            )
        for i, light in enumerate(scene.lights):
            if light.intensity < 0.0:
                raise ValueError(
                    f"Light {i}: intensity must be non-negative, got {light.intensity}"
                )

        if len(scene.spheres) > MAX_SPHERES:
            raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
        if len(scene.lights) > MAX_LIGHTS:
            raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
        if len(materials) > MAX_PHONG_MATERIALS:
            raise RuntimeError(
                f"Maximum number of Phong materials ({MAX_PHONG_MATERIALS}) exceeded"
            )

    def load_scene(self, scene: Scene) -> None:
        """Replace the current scene with a scene description.

        The whole description is validated first, so an invalid scene
        leaves the previously loaded one in place.

        Args:
            scene: The scene to upload.

        Raises:
            RuntimeError: If the scene exceeds a storage capacity.
            ValueError: If any sphere, light or material is invalid.
        """
        self.validate_scene(scene)
        self._clear_all()
        for sphere in scene.spheres:
            self.add_sphere_with_material(sphere.center, sphere.radius, sphere.material)
        for light in scene.lights:
            self.add_light(light.position, light.intensity)
        self.set_background_color(scene.background_color)
        logger.debug(
            "Loaded scene: %d spheres, %d lights, %d materials",
            len(self.spheres),
            len(self.lights),
            len(self.materials),
        )

    def to_scene(self) -> Scene:
        """Export the uploaded scene as a Scene description."""
        return Scene(
            spheres=tuple(self.spheres),
            lights=tuple(self.lights),
            background_color=self.background_color,
        )

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_PHONG_MATERIALS
