# materials/isotropic.py
import math
from typing import Optional, Union
from core.ray import Ray
from core.vector import Vector3
from geometry.hittable import HitRecord
from materials.material import Material, ScatterRecord
from materials.pdf import SpherePDF
from materials.textures import Texture, as_texture

class Isotropic(Material):
    """Phase function of a participating medium: scatters uniformly in all directions."""
    def __init__(self, albedo: Union[Vector3, Texture]):
        self.albedo = as_texture(albedo)

    def scatter(self, ray_in: Ray, rec: HitRecord, rng) -> Optional[ScatterRecord]:
        return ScatterRecord(self.albedo.value(rec.u, rec.v, rec.p), pdf=SpherePDF())

    def scattering_pdf(self, ray_in: Ray, rec: HitRecord, scattered: Ray) -> float:
        return 1 / (4 * math.pi)
