# geometry/medium.py
import math
from typing import Optional, Union
from core.vector import Vector3
from core.ray import Ray
from core.aabb import AABB
from geometry.hittable import Hittable, HitRecord
from materials.isotropic import Isotropic
from materials.textures import Texture

class ConstantMedium(Hittable):
    """
    A volume of constant density bounded by a closed convex hittable
    (smoke, fog). A ray crossing the boundary scatters at a random distance
    inside with probability growing with the distance travelled; otherwise
    it passes through untouched.

    The scattering distance is drawn from the rng handed to `hit`, so the
    medium holds no random state of its own.
    """
    def __init__(self, boundary: Hittable, density: float, albedo: Union[Vector3, Texture]):
        if density <= 0:
            raise ValueError(f"Medium density must be positive, got {density}")
        self.boundary = boundary
        self.neg_inv_density = -1.0 / density
        self.phase_function = Isotropic(albedo)

    def hit(self, ray: Ray, t_min: float, t_max: float, rng=None) -> Optional[HitRecord]:
        if rng is None:
            raise ValueError("ConstantMedium.hit needs an rng to sample a scattering distance")

        rec1 = self.boundary.hit(ray, -math.inf, math.inf, rng)
        if rec1 is None:
            return None
        rec2 = self.boundary.hit(ray, rec1.t + 0.0001, math.inf, rng)
        if rec2 is None:
            return None

        t_enter = max(rec1.t, t_min)
        t_exit = min(rec2.t, t_max)
        if t_enter >= t_exit:
            return None
        t_enter = max(t_enter, 0.0)

        ray_length = ray.direction.length()
        distance_inside_boundary = (t_exit - t_enter) * ray_length
        # 1 - random() lies in (0, 1], keeping the log finite.
        hit_distance = self.neg_inv_density * math.log(1.0 - rng.random())
        if hit_distance > distance_inside_boundary:
            return None

        rec = HitRecord()
        rec.t = t_enter + hit_distance / ray_length
        rec.p = ray.at(rec.t)
        rec.normal = Vector3(1, 0, 0)  # arbitrary
        rec.front_face = True          # also arbitrary
        rec.material = self.phase_function
        return rec

    def bounding_box(self, time0: float = 0.0, time1: float = 0.0) -> Optional[AABB]:
        return self.boundary.bounding_box(time0, time1)

    def __repr__(self) -> str:
        return f"ConstantMedium({self.boundary!r}, density={-1.0 / self.neg_inv_density})"
