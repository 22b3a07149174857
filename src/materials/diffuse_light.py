# materials/diffuse_light.py
from typing import Optional, Union
from core.ray import Ray
from core.vector import Vector3
from geometry.hittable import HitRecord
from materials.material import BLACK, Material, ScatterRecord
from materials.textures import Texture, as_texture

class DiffuseLight(Material):
    """
    Area light material. Absorbs everything that reaches it and radiates
    `emit` from its front face only, so a ceiling panel does not light the
    space behind it.
    """
    def __init__(self, emit: Union[Vector3, Texture]):
        self.emit = as_texture(emit)

    def scatter(self, ray_in: Ray, rec: HitRecord, rng) -> Optional[ScatterRecord]:
        return None

    def emitted(self, ray_in: Ray, rec: HitRecord, u: float, v: float, p: Vector3) -> Vector3:
        """
        Radiance leaving the hit point toward the viewer.

        Args:
            ray_in (Ray): The ray that found the light.
            rec (HitRecord): The hit; only its front-face flag matters.
            u (float): Texture coordinate across the surface.
            v (float): Texture coordinate along the surface.
            p (Vector3): World-space hit point.

        Returns:
            Vector3: The emission color, or black when seen from behind.
        """
        if not rec.front_face:
            return BLACK
        return self.emit.value(u, v, p)
