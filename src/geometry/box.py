# geometry/box.py
from typing import Optional
from core.vector import Vector3
from core.ray import Ray
from core.aabb import AABB
from geometry.hittable import Hittable, HitRecord
from geometry.rect import XYRect, XZRect, YZRect
from geometry.world import HittableList

class Box(Hittable):
    """Axis-aligned box between corners p0 and p1, made of six rectangles."""
    def __init__(self, p0: Vector3, p1: Vector3, material):
        self.box_min = p0
        self.box_max = p1
        self.material = material

        self.sides = HittableList([
            XYRect(p0.x, p1.x, p0.y, p1.y, p1.z, material),
            XYRect(p0.x, p1.x, p0.y, p1.y, p0.z, material),
            XZRect(p0.x, p1.x, p0.z, p1.z, p1.y, material),
            XZRect(p0.x, p1.x, p0.z, p1.z, p0.y, material),
            YZRect(p0.y, p1.y, p0.z, p1.z, p1.x, material),
            YZRect(p0.y, p1.y, p0.z, p1.z, p0.x, material),
        ])

    def hit(self, ray: Ray, t_min: float, t_max: float, rng=None) -> Optional[HitRecord]:
        return self.sides.hit(ray, t_min, t_max, rng)

    def bounding_box(self, time0: float = 0.0, time1: float = 0.0) -> AABB:
        return AABB(self.box_min, self.box_max)

    def __repr__(self) -> str:
        return f"Box({self.box_min!r}, {self.box_max!r})"
