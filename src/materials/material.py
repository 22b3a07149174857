# materials/material.py
from typing import Optional
from core.ray import Ray
from core.vector import Vector3
from geometry.hittable import HitRecord
from materials.pdf import PDF

BLACK = Vector3(0, 0, 0)

class ScatterRecord:
    """
    Outcome of a scattering event.

    Specular scatters (mirrors, glass) carry the outgoing ray directly in
    `specular_ray` and no pdf. All other scatters carry a `pdf` to draw the
    outgoing direction from; the integrator weights them by
    scattering_pdf / pdf value.
    """
    __slots__ = ("attenuation", "pdf", "specular_ray")

    def __init__(self, attenuation: Vector3, pdf: Optional[PDF] = None,
                 specular_ray: Optional[Ray] = None):
        self.attenuation = attenuation
        self.pdf = pdf
        self.specular_ray = specular_ray

    @property
    def is_specular(self) -> bool:
        return self.specular_ray is not None

class Material:
    """
    Abstract material class. Subclasses implement scatter(); emissive and
    pdf-based materials also override emitted() and scattering_pdf().
    """
    def scatter(self, ray_in: Ray, rec: HitRecord, rng) -> Optional[ScatterRecord]:
        """
        Computes how an incoming ray scatters at the hit.
        Returns a ScatterRecord or None if the ray is absorbed.
        """
        raise NotImplementedError("scatter() must be implemented by subclasses.")

    def scattering_pdf(self, ray_in: Ray, rec: HitRecord, scattered: Ray) -> float:
        return 0.0

    def emitted(self, ray_in: Ray, rec: HitRecord, u: float, v: float, p: Vector3) -> Vector3:
        return BLACK
