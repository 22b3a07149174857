# materials/perlin.py
import math
from typing import Optional
import numpy as np
from core.vector import Vector3

class Perlin:
    """
    Gradient noise over a 256-entry lattice: random unit gradients indexed
    through three independent permutation tables, blended with a Hermite
    smoothed trilinear interpolation.
    """
    POINT_COUNT = 256

    def __init__(self, rng: Optional[np.random.Generator] = None):
        if rng is None:
            rng = np.random.default_rng()
        vectors = rng.uniform(-1.0, 1.0, size=(self.POINT_COUNT, 3))
        norms = np.linalg.norm(vectors, axis=1, keepdims=True)
        norms[norms == 0] = 1.0
        self.ranvec = (vectors / norms).tolist()
        self.perm_x = rng.permutation(self.POINT_COUNT).tolist()
        self.perm_y = rng.permutation(self.POINT_COUNT).tolist()
        self.perm_z = rng.permutation(self.POINT_COUNT).tolist()

    def noise(self, p: Vector3) -> float:
        fx = math.floor(p.x)
        fy = math.floor(p.y)
        fz = math.floor(p.z)
        u = p.x - fx
        v = p.y - fy
        w = p.z - fz
        i = int(fx)
        j = int(fy)
        k = int(fz)

        # Hermite cubic smoothing
        uu = u * u * (3 - 2 * u)
        vv = v * v * (3 - 2 * v)
        ww = w * w * (3 - 2 * w)

        accum = 0.0
        for di in (0, 1):
            for dj in (0, 1):
                for dk in (0, 1):
                    g = self.ranvec[
                        self.perm_x[(i + di) & 255]
                        ^ self.perm_y[(j + dj) & 255]
                        ^ self.perm_z[(k + dk) & 255]
                    ]
                    dot = g[0] * (u - di) + g[1] * (v - dj) + g[2] * (w - dk)
                    accum += ((di * uu + (1 - di) * (1 - uu))
                              * (dj * vv + (1 - dj) * (1 - vv))
                              * (dk * ww + (1 - dk) * (1 - ww))
                              * dot)
        return accum

    def turbulence(self, p: Vector3, depth: int = 7) -> float:
        accum = 0.0
        temp_p = p
        weight = 1.0
        for _ in range(depth):
            accum += weight * self.noise(temp_p)
            weight *= 0.5
            temp_p = temp_p * 2
        return abs(accum)
