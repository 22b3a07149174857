"""Intersection tests for every hittable kind."""

import math
import random

import pytest

from core.aabb import AABB
from core.ray import Ray
from core.vector import Vector3
from geometry.box import Box
from geometry.instance import FlipFace, RotateY, Translate
from geometry.medium import ConstantMedium
from geometry.rect import XYRect, XZRect, YZRect
from geometry.sphere import MovingSphere, Sphere, get_sphere_uv
from geometry.world import HittableList
from conftest import approx_vec, as_list


def _random_ray_towards(rng, target, spread=2.0):
    origin = Vector3(rng.uniform(-10, 10), rng.uniform(-10, 10), rng.uniform(-10, 10))
    aim = target + Vector3(rng.uniform(-spread, spread),
                           rng.uniform(-spread, spread),
                           rng.uniform(-spread, spread))
    return Ray(origin, aim - origin, rng.random())


def _all_hittables(material):
    return [
        Sphere(Vector3(0, 0, 0), 1.5, material),
        MovingSphere(Vector3(-1, 0, 0), Vector3(1, 0, 0), 0.0, 1.0, 1.0, material),
        XYRect(-1, 1, -1, 1, 0.5, material),
        XZRect(-1, 1, -1, 1, 0.5, material),
        YZRect(-1, 1, -1, 1, 0.5, material),
        Box(Vector3(-1, -1, -1), Vector3(1, 2, 1), material),
        Translate(Sphere(Vector3(0, 0, 0), 1.0, material), Vector3(0.5, 0, 0)),
        RotateY(Box(Vector3(-1, -1, -1), Vector3(1, 1, 1), material), 30),
        FlipFace(XZRect(-1, 1, -1, 1, 0, material)),
    ]


class TestHitRecordProperties:
    """Every reported hit lies inside the interval and on the ray."""

    @pytest.mark.parametrize("index", range(9))
    def test_hits_are_consistent(self, index, gray, rng):
        obj = _all_hittables(gray)[index]
        hits = 0
        for _ in range(300):
            ray = _random_ray_towards(rng, Vector3(0, 0, 0))
            t_min, t_max = 0.001, rng.uniform(5, 40)
            rec = obj.hit(ray, t_min, t_max)
            if rec is None:
                continue
            hits += 1
            assert t_min < rec.t < t_max
            assert as_list(rec.p) == approx_vec(ray.at(rec.t), rel=1e-6, abs=1e-6)
            assert rec.normal.length() == pytest.approx(1.0, rel=1e-6)
            # The stored normal always opposes the ray.
            assert rec.normal.dot(ray.direction) <= 1e-9
            assert rec.material is gray
        assert hits > 0

    @pytest.mark.parametrize("index", range(9))
    def test_bounding_box_is_ordered(self, index, gray):
        box = _all_hittables(gray)[index].bounding_box(0.0, 1.0)
        for axis in range(3):
            assert box.minimum[axis] <= box.maximum[axis]


class TestSphere:
    def test_front_hit(self, gray):
        sphere = Sphere(Vector3(0, 0, 0), 1.0, gray)
        rec = sphere.hit(Ray(Vector3(0, 0, -5), Vector3(0, 0, 1)), 0.001, math.inf)
        assert rec.t == pytest.approx(4.0)
        assert rec.front_face
        assert as_list(rec.normal) == pytest.approx([0, 0, -1])

    def test_hit_from_inside(self, gray):
        sphere = Sphere(Vector3(0, 0, 0), 1.0, gray)
        rec = sphere.hit(Ray(Vector3(0, 0, 0), Vector3(0, 0, 1)), 0.001, math.inf)
        assert rec.t == pytest.approx(1.0)
        assert not rec.front_face
        assert as_list(rec.normal) == pytest.approx([0, 0, -1])

    def test_roots_outside_interval(self, gray):
        sphere = Sphere(Vector3(0, 0, 0), 1.0, gray)
        ray = Ray(Vector3(0, 0, -5), Vector3(0, 0, 1))
        assert sphere.hit(ray, 0.001, 3.9) is None
        assert sphere.hit(ray, 6.1, math.inf) is None

    def test_uv(self):
        assert get_sphere_uv(Vector3(1, 0, 0)) == pytest.approx((0.5, 0.5))
        assert get_sphere_uv(Vector3(0, 1, 0))[1] == pytest.approx(1.0)
        assert get_sphere_uv(Vector3(0, -1, 0))[1] == pytest.approx(0.0)
        assert get_sphere_uv(Vector3(0, 0, 1))[0] == pytest.approx(0.25)

    def test_pdf_value_and_random(self, gray, rng):
        sphere = Sphere(Vector3(0, 0, 10), 1.0, gray)
        origin = Vector3(0, 0, 0)
        cos_theta_max = math.sqrt(1 - 1 / 100)
        expected = 1 / (2 * math.pi * (1 - cos_theta_max))
        assert sphere.pdf_value(origin, Vector3(0, 0, 1)) == pytest.approx(expected)
        assert sphere.pdf_value(origin, Vector3(0, 1, 0)) == 0.0
        for _ in range(100):
            direction = sphere.random(origin, rng)
            assert sphere.hit(Ray(origin, direction), 0.001, math.inf) is not None


class TestMovingSphere:
    def test_center_follows_time(self, gray):
        sphere = MovingSphere(Vector3(0, 0, 0), Vector3(2, 0, 0), 0.0, 1.0, 0.5, gray)
        early = Ray(Vector3(2, 0, -5), Vector3(0, 0, 1), 0.0)
        late = Ray(Vector3(2, 0, -5), Vector3(0, 0, 1), 1.0)
        assert sphere.hit(early, 0.001, math.inf) is None
        assert sphere.hit(late, 0.001, math.inf) is not None

    def test_box_covers_both_ends(self, gray):
        sphere = MovingSphere(Vector3(0, 0, 0), Vector3(4, 0, 0), 0.0, 1.0, 1.0, gray)
        box = sphere.bounding_box(0.0, 1.0)
        assert box.minimum == Vector3(-1, -1, -1)
        assert box.maximum == Vector3(5, 1, 1)


class TestRects:
    def test_xy_rect_hit_uv(self, gray):
        rect = XYRect(0, 2, 0, 4, -1, gray)
        rec = rect.hit(Ray(Vector3(1, 1, -5), Vector3(0, 0, 1)), 0.001, math.inf)
        assert rec.t == pytest.approx(4.0)
        assert (rec.u, rec.v) == pytest.approx((0.5, 0.25))

    def test_parallel_ray_misses(self, gray):
        rect = XZRect(-1, 1, -1, 1, 0, gray)
        assert rect.hit(Ray(Vector3(0, 0, -5), Vector3(0, 0, 1)), 0.001, math.inf) is None

    def test_outward_normal_is_positive_axis(self, gray):
        rect = YZRect(-1, 1, -1, 1, 0, gray)
        from_above = rect.hit(Ray(Vector3(5, 0, 0), Vector3(-1, 0, 0)), 0.001, math.inf)
        from_below = rect.hit(Ray(Vector3(-5, 0, 0), Vector3(1, 0, 0)), 0.001, math.inf)
        assert from_above.front_face
        assert not from_below.front_face

    def test_padded_box(self, gray):
        box = XZRect(0, 1, 0, 1, 3, gray).bounding_box()
        assert box.minimum.y < 3 < box.maximum.y

    def test_pdf_value(self, gray):
        rect = XZRect(-1, 1, -1, 1, 5, gray)
        # Straight up from 5 units below: distance^2 / (cos * area).
        assert rect.pdf_value(Vector3(0, 0, 0), Vector3(0, 1, 0)) == pytest.approx(25 / 4)
        assert rect.pdf_value(Vector3(0, 0, 0), Vector3(1, 0, 0)) == 0.0

    def test_random_points_on_rect(self, gray, rng):
        rect = XZRect(-1, 1, -1, 1, 5, gray)
        for _ in range(50):
            d = rect.random(Vector3(0, 0, 0), rng)
            assert d.y == pytest.approx(5.0)
            assert -1 <= d.x <= 1 and -1 <= d.z <= 1


class TestBox:
    def test_hit_near_face(self, gray):
        box = Box(Vector3(0, 0, 0), Vector3(1, 1, 1), gray)
        rec = box.hit(Ray(Vector3(0.5, 0.5, -3), Vector3(0, 0, 1)), 0.001, math.inf)
        assert rec.t == pytest.approx(3.0)
        assert as_list(rec.normal) == pytest.approx([0, 0, -1])

    def test_bounding_box(self, gray):
        box = Box(Vector3(0, 0, 0), Vector3(1, 2, 3), gray).bounding_box()
        assert box.minimum == Vector3(0, 0, 0)
        assert box.maximum == Vector3(1, 2, 3)


def _rotate_y(v, degrees):
    c, s = math.cos(math.radians(degrees)), math.sin(math.radians(degrees))
    return Vector3(c * v.x + s * v.z, v.y, -s * v.x + c * v.z)


class TestInstances:
    """Translated and rotated instances agree with the inverse-transformed ray."""

    def test_translate_rotate_matches_object_space(self, gray, rng):
        angle, offset = 30.0, Vector3(3, -1, 2)
        sphere = Sphere(Vector3(1, 0, 0), 0.75, gray)
        instance = Translate(RotateY(sphere, angle), offset)
        world_center = _rotate_y(Vector3(1, 0, 0), angle) + offset

        hits = 0
        for _ in range(200):
            ray = _random_ray_towards(rng, world_center, spread=0.6)
            rec = instance.hit(ray, 0.001, math.inf)

            local = Ray(_rotate_y(ray.origin - offset, -angle),
                        _rotate_y(ray.direction, -angle), ray.time)
            expected = sphere.hit(local, 0.001, math.inf)

            assert (rec is None) == (expected is None)
            if rec is None:
                continue
            hits += 1
            assert rec.t == pytest.approx(expected.t)
            assert as_list(rec.p) == approx_vec(_rotate_y(expected.p, angle) + offset,
                                                abs=1e-9)
            assert as_list(rec.normal) == approx_vec(_rotate_y(expected.normal, angle),
                                                     abs=1e-9)
            assert rec.front_face == expected.front_face
        assert hits > 0

    def test_rotated_box_encloses_corners(self, gray):
        box = Box(Vector3(0, 0, 0), Vector3(2, 1, 1), gray)
        rotated = RotateY(box, 45).bounding_box()
        for corner in (Vector3(0, 0, 0), Vector3(2, 0, 0), Vector3(0, 0, 1), Vector3(2, 1, 1)):
            p = _rotate_y(corner, 45)
            for axis in range(3):
                assert rotated.minimum[axis] - 1e-9 <= p[axis] <= rotated.maximum[axis] + 1e-9

    def test_translate_shifts_box(self, gray):
        moved = Translate(Sphere(Vector3(0, 0, 0), 1, gray), Vector3(5, 0, 0))
        box = moved.bounding_box()
        assert box.minimum == Vector3(4, -1, -1)
        assert box.maximum == Vector3(6, 1, 1)

    def test_flip_face(self, gray):
        rect = XZRect(-1, 1, -1, 1, 0, gray)
        ray = Ray(Vector3(0, -1, 0), Vector3(0, 1, 0))
        assert not rect.hit(ray, 0.001, math.inf).front_face
        assert FlipFace(rect).hit(ray, 0.001, math.inf).front_face


class TestHittableList:
    def test_closest_hit_wins(self, gray, mirror):
        near = Sphere(Vector3(0, 0, 2), 0.5, gray)
        far = Sphere(Vector3(0, 0, 6), 0.5, mirror)
        world = HittableList([far, near])
        rec = world.hit(Ray(Vector3(0, 0, 0), Vector3(0, 0, 1)), 0.001, math.inf)
        assert rec.material is gray

    def test_empty(self):
        world = HittableList()
        assert world.hit(Ray(Vector3(0, 0, 0), Vector3(0, 0, 1)), 0.001, math.inf) is None
        assert world.bounding_box() is None
        assert world.pdf_value(Vector3(0, 0, 0), Vector3(0, 0, 1)) == 0.0

    def test_pdf_value_is_average(self, gray):
        a = XZRect(-1, 1, -1, 1, 5, gray)
        b = XZRect(10, 11, 10, 11, 5, gray)
        lights = HittableList([a, b])
        direction = Vector3(0, 1, 0)
        assert lights.pdf_value(Vector3(0, 0, 0), direction) == pytest.approx(
            0.5 * a.pdf_value(Vector3(0, 0, 0), direction))


class TestConstantMedium:
    def test_dense_medium_scatters_at_entry(self, gray, rng):
        fog = ConstantMedium(Sphere(Vector3(0, 0, 0), 1, gray), 1e6, Vector3(1, 1, 1))
        rec = fog.hit(Ray(Vector3(0, 0, -5), Vector3(0, 0, 1)), 0.001, math.inf, rng)
        assert rec is not None
        assert rec.t == pytest.approx(4.0, abs=1e-3)
        assert rec.material is fog.phase_function

    def test_thin_medium_lets_rays_through(self, gray, rng):
        fog = ConstantMedium(Sphere(Vector3(0, 0, 0), 1, gray), 1e-9, Vector3(1, 1, 1))
        ray = Ray(Vector3(0, 0, -5), Vector3(0, 0, 1))
        assert all(fog.hit(ray, 0.001, math.inf, rng) is None for _ in range(100))

    def test_ray_starting_inside(self, gray, rng):
        fog = ConstantMedium(Sphere(Vector3(0, 0, 0), 1, gray), 1e6, Vector3(1, 1, 1))
        rec = fog.hit(Ray(Vector3(0, 0, 0), Vector3(0, 0, 1)), 0.001, math.inf, rng)
        assert rec is not None
        assert 0.001 <= rec.t < 0.01

    def test_miss_boundary(self, gray, rng):
        fog = ConstantMedium(Sphere(Vector3(0, 0, 0), 1, gray), 1.0, Vector3(1, 1, 1))
        assert fog.hit(Ray(Vector3(0, 5, -5), Vector3(0, 0, 1)), 0.001, math.inf, rng) is None

    def test_needs_a_random_stream(self, gray):
        fog = ConstantMedium(Sphere(Vector3(0, 0, 0), 1, gray), 1.0, Vector3(1, 1, 1))
        with pytest.raises(ValueError):
            fog.hit(Ray(Vector3(0, 0, -5), Vector3(0, 0, 1)), 0.001, math.inf)

    def test_same_stream_same_distance(self, gray):
        fog = ConstantMedium(Sphere(Vector3(0, 0, 0), 1, gray), 0.5, Vector3(1, 1, 1))
        ray = Ray(Vector3(0, 0, -5), Vector3(0, 0, 1))
        records = [fog.hit(ray, 0.001, math.inf, random.Random(42)) for _ in range(5)]
        outcomes = {None if rec is None else rec.t for rec in records}
        assert len(outcomes) == 1

    def test_stream_reaches_nested_medium(self, gray):
        fog = ConstantMedium(Box(Vector3(-1, -1, -1), Vector3(1, 1, 1), gray), 1e6,
                             Vector3(1, 1, 1))
        world = HittableList([Translate(RotateY(fog, 30), Vector3(0, 0, 2))]).build_bvh()
        rec = world.hit(Ray(Vector3(0, 0, -5), Vector3(0, 0, 1)), 0.001, math.inf,
                        random.Random(1))
        assert rec is not None
        assert rec.material is fog.phase_function

    def test_density_must_be_positive(self, gray):
        with pytest.raises(ValueError):
            ConstantMedium(Sphere(Vector3(0, 0, 0), 1, gray), 0.0, Vector3(1, 1, 1))

    def test_box_is_boundary_box(self, gray):
        boundary = Box(Vector3(0, 0, 0), Vector3(1, 1, 1), gray)
        fog = ConstantMedium(boundary, 0.5, Vector3(1, 1, 1))
        box = fog.bounding_box()
        assert box.minimum == Vector3(0, 0, 0)
        assert box.maximum == Vector3(1, 1, 1)
