# src/geometry/bvh.py
import random
from typing import Optional, Sequence
from core.aabb import AABB
from core.errors import BoundingBoxError
from geometry.hittable import Hittable, HitRecord

def _box_of(obj: Hittable, time0: float, time1: float) -> AABB:
    box = obj.bounding_box(time0, time1)
    if box is None:
        raise BoundingBoxError(obj)
    return box

class BVHNode(Hittable):
    """
    Node of a bounding volume hierarchy over a set of hittables.

    Both children are always populated: a single object is stored as both
    `left` and `right`, so traversal never special-cases leaves. Children
    are either the scene objects themselves or further BVHNodes, and a
    BVHNode can itself be placed in another BVH.

    The split axis is drawn at random at every level; it only changes the
    tree balance, never which hit is returned.
    """
    def __init__(self, objects: Sequence[Hittable], time0: float = 0.0,
                 time1: float = 1.0, rng: Optional[random.Random] = None):
        if len(objects) == 0:
            raise ValueError("Cannot build a BVH over an empty object list")
        if rng is None:
            rng = random.Random()

        axis = rng.randrange(3)
        # Boxes are computed once per level; this also validates every input.
        keyed = [(_box_of(obj, time0, time1).minimum[axis], i, obj)
                 for i, obj in enumerate(objects)]
        object_span = len(keyed)

        if object_span == 1:
            self.left = self.right = keyed[0][2]
        elif object_span == 2:
            first, second = keyed
            if first[0] <= second[0]:
                self.left, self.right = first[2], second[2]
            else:
                self.left, self.right = second[2], first[2]
        else:
            keyed.sort(key=lambda item: (item[0], item[1]))
            ordered = [item[2] for item in keyed]
            mid = object_span // 2
            self.left = BVHNode(ordered[:mid], time0, time1, rng)
            self.right = BVHNode(ordered[mid:], time0, time1, rng)

        self.box = AABB.surrounding_box(
            _box_of(self.left, time0, time1),
            _box_of(self.right, time0, time1),
        )

    def hit(self, ray, t_min: float, t_max: float, rng=None) -> Optional[HitRecord]:
        if not self.box.hit(ray, t_min, t_max):
            return None

        hit_left = self.left.hit(ray, t_min, t_max, rng)

        # Only a closer hit on the right can replace the left one.
        if hit_left is not None:
            t_max = hit_left.t

        hit_right = self.right.hit(ray, t_min, t_max, rng)
        return hit_right if hit_right is not None else hit_left

    def bounding_box(self, time0: float = 0.0, time1: float = 0.0) -> AABB:
        return self.box

    def depth(self) -> int:
        """Height of the tree, counting this node."""
        left = self.left.depth() if isinstance(self.left, BVHNode) else 0
        right = self.right.depth() if isinstance(self.right, BVHNode) else 0
        return 1 + max(left, right)

    def __repr__(self) -> str:
        return f"BVHNode({self.box!r})"
