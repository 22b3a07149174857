# geometry/hittable.py
from typing import Optional
from core.vector import Vector3
from core.ray import Ray
from core.aabb import AABB

class HitRecord:
    """
    Records details of a ray-object intersection.
    """
    __slots__ = ("p", "normal", "t", "u", "v", "front_face", "material")

    def __init__(self, p: Vector3 = None, normal: Vector3 = None,
                 t: float = 0, u: float = 0.0, v: float = 0.0,
                 front_face: bool = True, material=None):
        self.p = p              # Intersection point
        self.normal = normal    # Surface normal, always against the ray
        self.t = t              # Ray parameter at intersection
        self.u = u              # Surface texture coordinates
        self.v = v
        self.front_face = front_face  # Whether the ray hit the outside
        self.material = material

    def set_face_normal(self, ray: Ray, outward_normal: Vector3):
        """
        Ensures that the normal always points against the ray.
        """
        self.front_face = ray.direction.dot(outward_normal) < 0
        self.normal = outward_normal if self.front_face else -outward_normal

class Hittable:
    """
    Abstract class for objects that can be hit by a ray.

    Besides intersection every hittable reports its bounding box over a
    time interval, and may act as an importance-sampling target for
    lights through `pdf_value` and `random`.

    `hit` receives the random stream of the sample being traced. Only
    volumes draw from it; containers and instances pass it through.
    """
    def hit(self, ray: Ray, t_min: float, t_max: float, rng=None) -> Optional[HitRecord]:
        raise NotImplementedError("hit() must be implemented by subclasses.")

    def bounding_box(self, time0: float, time1: float) -> Optional[AABB]:
        raise NotImplementedError("bounding_box() must be implemented by subclasses.")

    def pdf_value(self, origin: Vector3, direction: Vector3) -> float:
        """Solid-angle density of sampling `direction` from `origin` toward this object."""
        return 0.0

    def random(self, origin: Vector3, rng) -> Vector3:
        """A direction from `origin` toward a random point of this object."""
        return Vector3(1, 0, 0)
