# core/utils.py
import math
from core.vector import Vector3

def random_vector(rng, lo: float = 0.0, hi: float = 1.0) -> Vector3:
    return Vector3(rng.uniform(lo, hi), rng.uniform(lo, hi), rng.uniform(lo, hi))

def random_in_unit_sphere(rng) -> Vector3:
    """
    Returns a random point inside a unit sphere.
    """
    while True:
        p = Vector3(rng.uniform(-1, 1),
                    rng.uniform(-1, 1),
                    rng.uniform(-1, 1))
        if p.dot(p) < 1.0:
            return p

def random_unit_vector(rng) -> Vector3:
    """
    Returns a random unit vector (uniformly distributed over the sphere).
    """
    while True:
        p = random_in_unit_sphere(rng)
        l2 = p.dot(p)
        if l2 > 1e-12:
            return p / math.sqrt(l2)

def random_in_unit_disk(rng) -> Vector3:
    """Random point in the z=0 unit disk, used for lens sampling."""
    while True:
        p = Vector3(rng.uniform(-1, 1), rng.uniform(-1, 1), 0)
        if p.dot(p) < 1:
            return p

def random_cosine_direction(rng) -> Vector3:
    """
    Direction in the +z hemisphere distributed with density cos(theta)/pi.
    """
    r1 = rng.random()
    r2 = rng.random()
    phi = 2 * math.pi * r1
    sqrt_r2 = math.sqrt(r2)
    x = math.cos(phi) * sqrt_r2
    y = math.sin(phi) * sqrt_r2
    z = math.sqrt(1 - r2)
    return Vector3(x, y, z)

def random_to_sphere(rng, radius: float, distance_squared: float) -> Vector3:
    """
    Direction around +z uniformly distributed over the cone subtended by a
    sphere of `radius` at squared distance `distance_squared`.
    """
    r1 = rng.random()
    r2 = rng.random()
    if distance_squared <= radius * radius:
        cos_theta_max = -1.0
    else:
        cos_theta_max = math.sqrt(1 - radius * radius / distance_squared)
    z = 1 + r2 * (cos_theta_max - 1)
    phi = 2 * math.pi * r1
    s = math.sqrt(max(0.0, 1 - z * z))
    return Vector3(math.cos(phi) * s, math.sin(phi) * s, z)

def reflect(v: Vector3, n: Vector3) -> Vector3:
    """
    Reflects vector v about the normal n.
    """
    return v - n * 2 * v.dot(n)

def refract(uv: Vector3, n: Vector3, etai_over_etat: float) -> Vector3:
    """Snell refraction of the unit vector uv through a surface with normal n."""
    cos_theta = min(-uv.dot(n), 1.0)
    r_out_perp = (uv + n * cos_theta) * etai_over_etat
    r_out_parallel = n * (-math.sqrt(abs(1.0 - r_out_perp.length_squared())))
    return r_out_perp + r_out_parallel

def schlick(cosine: float, ref_idx: float) -> float:
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * math.pow((1.0 - cosine), 5)

