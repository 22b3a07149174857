# materials/pdf.py
import math
from core.vector import Vector3
from core.onb import ONB
from core.utils import random_cosine_direction, random_unit_vector

class PDF:
    """
    A probability density over directions: `value` gives the solid-angle
    density of a direction, `generate` draws a direction from it.
    """
    def value(self, direction: Vector3) -> float:
        raise NotImplementedError("value() must be implemented by subclasses.")

    def generate(self, rng) -> Vector3:
        raise NotImplementedError("generate() must be implemented by subclasses.")

class CosinePDF(PDF):
    """Cosine-weighted hemisphere around w: cos(theta) / pi."""
    def __init__(self, w: Vector3):
        self.uvw = ONB(w)

    def value(self, direction: Vector3) -> float:
        cosine = direction.normalize().dot(self.uvw.w)
        return max(0.0, cosine / math.pi)

    def generate(self, rng) -> Vector3:
        return self.uvw.local(random_cosine_direction(rng))

class SpherePDF(PDF):
    """Uniform over the whole sphere of directions."""
    def value(self, direction: Vector3) -> float:
        return 1 / (4 * math.pi)

    def generate(self, rng) -> Vector3:
        return random_unit_vector(rng)

class HittablePDF(PDF):
    """Directions from `origin` toward points on a hittable (usually the lights)."""
    def __init__(self, objects, origin: Vector3):
        self.objects = objects
        self.origin = origin

    def value(self, direction: Vector3) -> float:
        return self.objects.pdf_value(self.origin, direction)

    def generate(self, rng) -> Vector3:
        return self.objects.random(self.origin, rng)

class MixturePDF(PDF):
    """Equal-weight mixture of two densities."""
    def __init__(self, p0: PDF, p1: PDF):
        self.p = (p0, p1)

    def value(self, direction: Vector3) -> float:
        return 0.5 * self.p[0].value(direction) + 0.5 * self.p[1].value(direction)

    def generate(self, rng) -> Vector3:
        if rng.random() < 0.5:
            return self.p[0].generate(rng)
        return self.p[1].generate(rng)
