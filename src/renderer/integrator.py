# renderer/integrator.py
import math
from typing import Callable, Optional, Union
from core.ray import Ray
from core.vector import Vector3
from geometry.hittable import Hittable
from materials.pdf import HittablePDF, MixturePDF

BLACK = Vector3(0, 0, 0)
# Minimum ray parameter; keeps a scattered ray from re-hitting its own surface.
T_MIN = 0.001
# Mixture densities at or below this are treated as zero.
PDF_EPSILON = 1e-12

Background = Union[Vector3, Callable[[Ray], Vector3]]

def sky_gradient(ray: Ray) -> Vector3:
    """White at the horizon blending to light blue overhead."""
    unit_direction = ray.direction.normalize()
    t = 0.5 * (unit_direction.y + 1.0)
    return Vector3(1.0, 1.0, 1.0) * (1.0 - t) + Vector3(0.5, 0.7, 1.0) * t

def ray_color(ray: Ray, background: Background, world: Hittable,
              lights: Optional[Hittable], depth: int, rng) -> Vector3:
    """
    Radiance arriving along `ray`, estimated with one random path.

    Diffuse bounces draw their direction from an even mixture of the
    material's own pdf and a pdf aimed at `lights`, and weight the result
    by scattering_pdf / mixture pdf. Specular bounces follow their single
    outgoing ray. `lights` may be None, in which case only the material pdf
    is sampled. The path ends after `depth` bounces.
    """
    # If we've exceeded the ray bounce limit, no more light is gathered.
    if depth <= 0:
        return BLACK

    rec = world.hit(ray, T_MIN, math.inf, rng)
    if rec is None:
        return background(ray) if callable(background) else background

    emitted = rec.material.emitted(ray, rec, rec.u, rec.v, rec.p)

    srec = rec.material.scatter(ray, rec, rng)
    if srec is None:
        return emitted

    if srec.is_specular:
        return emitted + srec.attenuation * ray_color(
            srec.specular_ray, background, world, lights, depth - 1, rng)

    if lights is not None:
        pdf = MixturePDF(HittablePDF(lights, rec.p), srec.pdf)
    else:
        pdf = srec.pdf

    scattered = Ray(rec.p, pdf.generate(rng), ray.time)
    pdf_val = pdf.value(scattered.direction)
    # A direction neither density can produce contributes nothing.
    if not (pdf_val > PDF_EPSILON) or math.isinf(pdf_val):
        return emitted

    scattering_pdf = rec.material.scattering_pdf(ray, rec, scattered)
    if scattering_pdf <= 0.0:
        return emitted

    incoming = ray_color(scattered, background, world, lights, depth - 1, rng)
    return emitted + srec.attenuation * incoming * (scattering_pdf / pdf_val)
