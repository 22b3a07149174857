# geometry/sphere.py
import math
from typing import Optional, Tuple
from core.vector import Vector3
from core.ray import Ray
from core.onb import ONB
from core.utils import random_to_sphere, random_unit_vector
from geometry.hittable import Hittable, HitRecord
from core.aabb import AABB

def get_sphere_uv(p: Vector3) -> Tuple[float, float]:
    """
    Texture coordinates of a point p on the unit sphere centered at the origin.
    u in [0,1] is the angle around the Y axis from X=-1; v in [0,1] is the
    angle from Y=-1 to Y=+1.
    """
    theta = math.acos(max(-1.0, min(1.0, -p.y)))
    phi = math.atan2(-p.z, p.x) + math.pi
    return phi / (2 * math.pi), theta / math.pi

def _solve(center: Vector3, radius: float, ray: Ray,
           t_min: float, t_max: float) -> Optional[float]:
    oc = ray.origin - center
    a = ray.direction.dot(ray.direction)
    half_b = oc.dot(ray.direction)
    c = oc.dot(oc) - radius * radius
    discriminant = half_b * half_b - a * c

    if discriminant < 0:
        return None

    sqrt_disc = math.sqrt(discriminant)
    # Find the nearest root that lies in the acceptable range
    root = (-half_b - sqrt_disc) / a
    if root <= t_min or root >= t_max:
        root = (-half_b + sqrt_disc) / a
        if root <= t_min or root >= t_max:
            return None
    return root

class Sphere(Hittable):
    """
    Represents a sphere defined by its center, radius, and material.
    """
    def __init__(self, center: Vector3, radius: float, material):
        self.center = center
        self.radius = radius
        self.material = material

    def center_at(self, time: float) -> Vector3:
        return self.center

    def hit(self, ray: Ray, t_min: float, t_max: float, rng=None) -> Optional[HitRecord]:
        center = self.center_at(ray.time)
        root = _solve(center, self.radius, ray, t_min, t_max)
        if root is None:
            return None

        rec = HitRecord()
        rec.t = root
        rec.p = ray.at(rec.t)
        outward_normal = (rec.p - center) / self.radius
        rec.set_face_normal(ray, outward_normal)
        rec.u, rec.v = get_sphere_uv(outward_normal)
        rec.material = self.material
        return rec

    def bounding_box(self, time0: float = 0.0, time1: float = 0.0) -> AABB:
        # The bounding box of a sphere is center ± radius
        offset = Vector3.repeat(abs(self.radius))
        return AABB(self.center - offset, self.center + offset)

    def pdf_value(self, origin: Vector3, direction: Vector3) -> float:
        if self.hit(Ray(origin, direction), 0.001, math.inf) is None:
            return 0.0
        distance_squared = (self.center - origin).length_squared()
        if distance_squared <= self.radius * self.radius:
            # Seen from inside, the sphere covers every direction.
            return 1 / (4 * math.pi)
        cos_theta_max = math.sqrt(max(0.0, 1 - self.radius * self.radius / distance_squared))
        solid_angle = 2 * math.pi * (1 - cos_theta_max)
        if solid_angle <= 0.0:
            return 0.0
        return 1 / solid_angle

    def random(self, origin: Vector3, rng) -> Vector3:
        direction = self.center - origin
        distance_squared = direction.length_squared()
        if distance_squared <= self.radius * self.radius:
            return random_unit_vector(rng)
        return ONB(direction).local(random_to_sphere(rng, self.radius, distance_squared))

    def __repr__(self) -> str:
        return f"Sphere({self.center!r}, {self.radius})"

class MovingSphere(Sphere):
    """
    A sphere whose center moves linearly from center0 at time0 to center1
    at time1. Rays sample the center at their own cast time.
    """
    def __init__(self, center0: Vector3, center1: Vector3,
                 time0: float, time1: float, radius: float, material):
        super().__init__(center0, radius, material)
        self.center0 = center0
        self.center1 = center1
        self.time0 = time0
        self.time1 = time1

    def center_at(self, time: float) -> Vector3:
        if self.time1 == self.time0:
            return self.center0
        s = (time - self.time0) / (self.time1 - self.time0)
        return self.center0 + (self.center1 - self.center0) * s

    def bounding_box(self, time0: float = 0.0, time1: float = 1.0) -> AABB:
        offset = Vector3.repeat(abs(self.radius))
        c0 = self.center_at(time0)
        c1 = self.center_at(time1)
        box0 = AABB(c0 - offset, c0 + offset)
        box1 = AABB(c1 - offset, c1 + offset)
        return AABB.surrounding_box(box0, box1)

    def pdf_value(self, origin: Vector3, direction: Vector3) -> float:
        # Moving spheres are not used as light targets.
        return 0.0

    def random(self, origin: Vector3, rng) -> Vector3:
        return Vector3(1, 0, 0)

    def __repr__(self) -> str:
        return f"MovingSphere({self.center0!r} -> {self.center1!r}, {self.radius})"
