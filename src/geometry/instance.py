# geometry/instance.py
import math
from typing import Optional
from core.vector import Vector3
from core.ray import Ray
from core.aabb import AABB
from geometry.hittable import Hittable, HitRecord

class FlipFace(Hittable):
    """Reports every hit of the wrapped object as seen from the other side."""
    def __init__(self, obj: Hittable):
        self.obj = obj

    def hit(self, ray: Ray, t_min: float, t_max: float, rng=None) -> Optional[HitRecord]:
        rec = self.obj.hit(ray, t_min, t_max, rng)
        if rec is None:
            return None
        rec.front_face = not rec.front_face
        return rec

    def bounding_box(self, time0: float = 0.0, time1: float = 0.0) -> Optional[AABB]:
        return self.obj.bounding_box(time0, time1)

    def pdf_value(self, origin: Vector3, direction: Vector3) -> float:
        return self.obj.pdf_value(origin, direction)

    def random(self, origin: Vector3, rng) -> Vector3:
        return self.obj.random(origin, rng)

class Translate(Hittable):
    """An instance of `obj` moved by `offset`."""
    def __init__(self, obj: Hittable, offset: Vector3):
        self.obj = obj
        self.offset = offset

    def hit(self, ray: Ray, t_min: float, t_max: float, rng=None) -> Optional[HitRecord]:
        moved = Ray(ray.origin - self.offset, ray.direction, ray.time)
        rec = self.obj.hit(moved, t_min, t_max, rng)
        if rec is None:
            return None

        rec.p = rec.p + self.offset
        rec.set_face_normal(moved, rec.normal if rec.front_face else -rec.normal)
        return rec

    def bounding_box(self, time0: float = 0.0, time1: float = 0.0) -> Optional[AABB]:
        box = self.obj.bounding_box(time0, time1)
        if box is None:
            return None
        return AABB(box.minimum + self.offset, box.maximum + self.offset)

    def pdf_value(self, origin: Vector3, direction: Vector3) -> float:
        return self.obj.pdf_value(origin - self.offset, direction)

    def random(self, origin: Vector3, rng) -> Vector3:
        return self.obj.random(origin - self.offset, rng)

class RotateY(Hittable):
    """
    An instance of `obj` rotated by `angle` degrees about the +y axis.

    Rays are rotated by -angle into object space; the hit point and normal
    are rotated back by +angle. The bounding box is the box around the
    eight rotated corners of the inner box, computed once over [0, 1].
    """
    def __init__(self, obj: Hittable, angle: float):
        self.obj = obj
        self.angle = angle
        radians = math.radians(angle)
        self.sin_theta = math.sin(radians)
        self.cos_theta = math.cos(radians)
        self.box = self._rotated_box(obj.bounding_box(0.0, 1.0))

    def _to_object(self, v: Vector3) -> Vector3:
        return Vector3(
            self.cos_theta * v.x - self.sin_theta * v.z,
            v.y,
            self.sin_theta * v.x + self.cos_theta * v.z,
        )

    def _to_world(self, v: Vector3) -> Vector3:
        return Vector3(
            self.cos_theta * v.x + self.sin_theta * v.z,
            v.y,
            -self.sin_theta * v.x + self.cos_theta * v.z,
        )

    def _rotated_box(self, box: Optional[AABB]) -> Optional[AABB]:
        if box is None:
            return None
        lo = [math.inf, math.inf, math.inf]
        hi = [-math.inf, -math.inf, -math.inf]
        for i in (0, 1):
            for j in (0, 1):
                for k in (0, 1):
                    corner = Vector3(
                        box.maximum.x if i else box.minimum.x,
                        box.maximum.y if j else box.minimum.y,
                        box.maximum.z if k else box.minimum.z,
                    )
                    rotated = self._to_world(corner)
                    for c in range(3):
                        lo[c] = min(lo[c], rotated[c])
                        hi[c] = max(hi[c], rotated[c])
        return AABB(Vector3(*lo), Vector3(*hi))

    def hit(self, ray: Ray, t_min: float, t_max: float, rng=None) -> Optional[HitRecord]:
        rotated = Ray(self._to_object(ray.origin), self._to_object(ray.direction), ray.time)
        rec = self.obj.hit(rotated, t_min, t_max, rng)
        if rec is None:
            return None

        outward = rec.normal if rec.front_face else -rec.normal
        rec.p = self._to_world(rec.p)
        rec.set_face_normal(ray, self._to_world(outward))
        return rec

    def bounding_box(self, time0: float = 0.0, time1: float = 0.0) -> Optional[AABB]:
        return self.box

    def pdf_value(self, origin: Vector3, direction: Vector3) -> float:
        return self.obj.pdf_value(self._to_object(origin), self._to_object(direction))

    def random(self, origin: Vector3, rng) -> Vector3:
        return self._to_world(self.obj.random(self._to_object(origin), rng))
