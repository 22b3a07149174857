# materials/lambertian.py

import math
from typing import Optional, Union
from core.ray import Ray
from core.vector import Vector3
from geometry.hittable import HitRecord
from materials.material import Material, ScatterRecord
from materials.pdf import CosinePDF
from materials.textures import Texture, as_texture

class Lambertian(Material):
    """
    Lambertian diffuse material with optional texture support.

    Scattered directions are drawn from a cosine-weighted hemisphere around
    the normal, so the scattering pdf is cos(theta) / pi.
    """

    def __init__(self, albedo: Union[Vector3, Texture]):
        # Store either a solid color or a texture.
        self.albedo = as_texture(albedo)

    def scatter(self, ray_in: Ray, rec: HitRecord, rng) -> Optional[ScatterRecord]:
        attenuation = self.albedo.value(rec.u, rec.v, rec.p)
        return ScatterRecord(attenuation, pdf=CosinePDF(rec.normal))

    def scattering_pdf(self, ray_in: Ray, rec: HitRecord, scattered: Ray) -> float:
        cosine = rec.normal.dot(scattered.direction.normalize())
        return 0.0 if cosine < 0 else cosine / math.pi
