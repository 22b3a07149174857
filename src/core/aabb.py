# src/core/aabb.py
from core.vector import Vector3

class AABB:
    def __init__(self, minimum: Vector3, maximum: Vector3):
        self.minimum = minimum
        self.maximum = maximum

    def hit(self, ray, t_min: float, t_max: float) -> bool:
        # Slab method: for each axis, narrow the [t_min, t_max] interval.
        for a in range(3):
            d = ray.direction[a]
            if d == 0.0:
                # Parallel to the slab: inside it or never.
                o = ray.origin[a]
                if o < self.minimum[a] or o > self.maximum[a]:
                    return False
                continue
            invD = 1.0 / d
            t0 = (self.minimum[a] - ray.origin[a]) * invD
            t1 = (self.maximum[a] - ray.origin[a]) * invD
            if invD < 0:
                t0, t1 = t1, t0
            t_min = t0 if t0 > t_min else t_min
            t_max = t1 if t1 < t_max else t_max
            if t_max <= t_min:
                return False
        return True

    def pad(self, delta: float = 0.0001) -> "AABB":
        """Grow any axis thinner than `delta` so the box has volume."""
        lo = [self.minimum.x, self.minimum.y, self.minimum.z]
        hi = [self.maximum.x, self.maximum.y, self.maximum.z]
        for a in range(3):
            if hi[a] - lo[a] < delta:
                lo[a] -= delta / 2
                hi[a] += delta / 2
        return AABB(Vector3(*lo), Vector3(*hi))

    def __repr__(self) -> str:
        return f"AABB({self.minimum!r}, {self.maximum!r})"

    @staticmethod
    def surrounding_box(box0: "AABB", box1: "AABB") -> "AABB":
        small = Vector3(
            min(box0.minimum.x, box1.minimum.x),
            min(box0.minimum.y, box1.minimum.y),
            min(box0.minimum.z, box1.minimum.z)
        )
        big = Vector3(
            max(box0.maximum.x, box1.maximum.x),
            max(box0.maximum.y, box1.maximum.y),
            max(box0.maximum.z, box1.maximum.z)
        )
        return AABB(small, big)
