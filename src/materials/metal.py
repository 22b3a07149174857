# materials/metal.py
from typing import Optional, Union
from core.ray import Ray
from core.vector import Vector3
from core.utils import reflect, random_in_unit_sphere
from geometry.hittable import HitRecord
from materials.material import Material, ScatterRecord
from materials.textures import Texture, as_texture

class Metal(Material):
    """
    Metal material with reflective properties and optional texture support.
    """
    def __init__(self, albedo: Union[Vector3, Texture], fuzz: float = 0.0):
        self.albedo = as_texture(albedo)
        self.fuzz = min(fuzz, 1)

    def scatter(self, ray_in: Ray, rec: HitRecord, rng) -> Optional[ScatterRecord]:
        reflected = reflect(ray_in.direction.normalize(), rec.normal)
        if self.fuzz > 0:
            reflected = reflected + random_in_unit_sphere(rng) * self.fuzz

        # Absorb the ray if fuzz pushed it below the surface
        if reflected.dot(rec.normal) <= 0:
            return None

        return ScatterRecord(
            self.albedo.value(rec.u, rec.v, rec.p),
            specular_ray=Ray(rec.p, reflected, ray_in.time),
        )
