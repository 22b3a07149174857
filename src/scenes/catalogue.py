# scenes/catalogue.py
import logging
import random
from typing import Callable, Dict, Optional, Tuple
import numpy as np
from camera.camera import Camera
from core.errors import SceneError
from core.utils import random_vector
from core.vector import Vector3
from geometry.box import Box
from geometry.hittable import Hittable
from geometry.instance import FlipFace, RotateY, Translate
from geometry.medium import ConstantMedium
from geometry.rect import XYRect, XZRect, YZRect
from geometry.sphere import MovingSphere, Sphere
from geometry.world import HittableList
from materials.dielectric import Dielectric
from materials.diffuse_light import DiffuseLight
from materials.lambertian import Lambertian
from materials.metal import Metal
from materials.textures import CheckerTexture, ImageTexture, NoiseTexture
from renderer.integrator import Background

logger = logging.getLogger(__name__)

EARTH_TEXTURE = "assets/earthmap.jpg"
SKY = Vector3(0.70, 0.80, 1.00)
BLACK = Vector3(0, 0, 0)

class Scene:
    """
    A renderable scene: the world (a BVH root), the hittable to aim light
    samples at (None when there is no light source), the camera and the
    default image parameters.
    """
    def __init__(self, name: str, world: Hittable, lights: Optional[Hittable],
                 camera: Camera, background: Background, image_width: int,
                 image_height: int, samples_per_pixel: int, max_depth: int = 50):
        self.name = name
        self.world = world
        self.lights = lights
        self.camera = camera
        self.background = background
        self.image_width = image_width
        self.image_height = image_height
        self.samples_per_pixel = samples_per_pixel
        self.max_depth = max_depth

    def __repr__(self) -> str:
        return (f"Scene({self.name!r}, {self.image_width}x{self.image_height}, "
                f"spp={self.samples_per_pixel})")

def _camera(lookfrom: Vector3, lookat: Vector3, vfov: float, aspect_ratio: float,
            aperture: float = 0.0, focus_dist: float = 10.0) -> Camera:
    return Camera(lookfrom, lookat, Vector3(0, 1, 0), vfov, aspect_ratio,
                  aperture, focus_dist, time0=0.0, time1=1.0)

def _finish(name: str, objects: HittableList, lights: Optional[Hittable], camera: Camera,
            background: Background, width: int, aspect_ratio: float, samples: int,
            rng: random.Random) -> Scene:
    world = objects.build_bvh(0.0, 1.0, rng=rng)
    logger.info("Scene %s: %d top-level objects, BVH depth %d",
                name, len(objects), world.depth())
    return Scene(name, world, lights, camera, background,
                 width, int(width / aspect_ratio), samples)

def random_spheres(rng: random.Random) -> Scene:
    """The book-one cover: a field of small random spheres, some moving."""
    world = HittableList()
    checker = CheckerTexture(Vector3(0.9, 0.9, 0.9), Vector3(0.2, 0.3, 0.1))
    world.add(Sphere(Vector3(0, -1000, 0), 1000, Lambertian(checker)))

    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = rng.random()
            center = Vector3(a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random())
            if (center - Vector3(4, 0.2, 0)).length() <= 0.9:
                continue
            if choose_mat < 0.8:
                # diffuse
                albedo = random_vector(rng) * random_vector(rng)
                center2 = center + Vector3(0, rng.uniform(0, 0.5), 0)
                world.add(MovingSphere(center, center2, 0.0, 1.0, 0.2, Lambertian(albedo)))
            elif choose_mat < 0.95:
                # metal
                albedo = random_vector(rng, 0.5, 1)
                fuzz = rng.uniform(0, 0.5)
                world.add(Sphere(center, 0.2, Metal(albedo, fuzz)))
            else:
                # glass
                world.add(Sphere(center, 0.2, Dielectric(1.5)))

    world.add(Sphere(Vector3(0, 1, 0), 1.0, Dielectric(1.5)))
    world.add(Sphere(Vector3(-4, 1, 0), 1.0, Lambertian(Vector3(0.4, 0.2, 0.1))))
    world.add(Sphere(Vector3(4, 1, 0), 1.0, Metal(Vector3(0.7, 0.6, 0.5), 0.0)))

    aspect_ratio = 16.0 / 9.0
    camera = _camera(Vector3(13, 2, 3), Vector3(0, 0, 0), 20.0, aspect_ratio, aperture=0.1)
    return _finish("random_spheres", world, None, camera, SKY, 400, aspect_ratio, 100, rng)

def two_spheres(rng: random.Random) -> Scene:
    world = HittableList()
    checker = CheckerTexture(Vector3(0.9, 0.9, 0.9), Vector3(0.2, 0.3, 0.1))
    world.add(Sphere(Vector3(0, -10, 0), 10, Lambertian(checker)))
    world.add(Sphere(Vector3(0, 10, 0), 10, Lambertian(checker)))

    aspect_ratio = 16.0 / 9.0
    camera = _camera(Vector3(13, 2, 3), Vector3(0, 0, 0), 20.0, aspect_ratio)
    return _finish("two_spheres", world, None, camera, SKY, 400, aspect_ratio, 100, rng)

def two_perlin_spheres(rng: random.Random) -> Scene:
    world = HittableList()
    pertext = NoiseTexture(4, rng=np.random.default_rng(rng.getrandbits(32)))
    world.add(Sphere(Vector3(0, -1000, 0), 1000, Lambertian(pertext)))
    world.add(Sphere(Vector3(0, 2, 0), 2, Lambertian(pertext)))

    aspect_ratio = 16.0 / 9.0
    camera = _camera(Vector3(13, 2, 3), Vector3(0, 0, 0), 20.0, aspect_ratio)
    return _finish("two_perlin_spheres", world, None, camera, SKY, 400, aspect_ratio, 100, rng)

def earth(rng: random.Random) -> Scene:
    world = HittableList()
    earth_texture = ImageTexture(EARTH_TEXTURE)
    world.add(Sphere(Vector3(0, 0, 0), 2, Lambertian(earth_texture)))

    aspect_ratio = 16.0 / 9.0
    camera = _camera(Vector3(13, 2, 3), Vector3(0, 0, 0), 20.0, aspect_ratio)
    return _finish("earth", world, None, camera, SKY, 400, aspect_ratio, 100, rng)

def simple_light(rng: random.Random) -> Scene:
    world = HittableList()
    pertext = NoiseTexture(4, rng=np.random.default_rng(rng.getrandbits(32)))
    world.add(Sphere(Vector3(0, -1000, 0), 1000, Lambertian(pertext)))
    world.add(Sphere(Vector3(0, 2, 0), 2, Lambertian(pertext)))

    light_rect = XYRect(3, 5, 1, 3, -2, DiffuseLight(Vector3(4, 4, 4)))
    world.add(light_rect)
    lights = HittableList([light_rect])

    aspect_ratio = 16.0 / 9.0
    camera = _camera(Vector3(26, 3, 6), Vector3(0, 2, 0), 20.0, aspect_ratio)
    return _finish("simple_light", world, lights, camera, BLACK, 400, aspect_ratio, 400, rng)

def _cornell_walls(light_intensity: float, light_bounds) -> Tuple[HittableList, HittableList]:
    world = HittableList()
    red = Lambertian(Vector3(0.65, 0.05, 0.05))
    white = Lambertian(Vector3(0.73, 0.73, 0.73))
    green = Lambertian(Vector3(0.12, 0.45, 0.15))
    light = DiffuseLight(Vector3.repeat(light_intensity))

    x0, x1, z0, z1 = light_bounds
    # Flipped so the panel faces down into the box.
    light_rect = FlipFace(XZRect(x0, x1, z0, z1, 554, light))

    world.add(YZRect(0, 555, 0, 555, 555, green))
    world.add(YZRect(0, 555, 0, 555, 0, red))
    world.add(light_rect)
    world.add(XZRect(0, 555, 0, 555, 555, white))
    world.add(XZRect(0, 555, 0, 555, 0, white))
    world.add(XYRect(0, 555, 0, 555, 555, white))

    lights = HittableList([XZRect(x0, x1, z0, z1, 554, None)])
    return world, lights

def _cornell_boxes(material):
    box1 = Box(Vector3(0, 0, 0), Vector3(165, 330, 165), material)
    box1 = Translate(RotateY(box1, 15), Vector3(265, 0, 295))
    box2 = Box(Vector3(0, 0, 0), Vector3(165, 165, 165), material)
    box2 = Translate(RotateY(box2, -18), Vector3(130, 0, 65))
    return box1, box2

def _cornell_camera() -> Camera:
    return _camera(Vector3(278, 278, -800), Vector3(278, 278, 0), 40.0, 1.0)

def empty_cornell_box(rng: random.Random) -> Scene:
    world, lights = _cornell_walls(15, (213, 343, 227, 332))
    return _finish("empty_cornell_box", world, lights, _cornell_camera(),
                   BLACK, 600, 1.0, 200, rng)

def cornell_box(rng: random.Random) -> Scene:
    world, lights = _cornell_walls(15, (213, 343, 227, 332))
    white = Lambertian(Vector3(0.73, 0.73, 0.73))
    for box in _cornell_boxes(white):
        world.add(box)
    return _finish("cornell_box", world, lights, _cornell_camera(),
                   BLACK, 600, 1.0, 200, rng)

def cornell_smoke(rng: random.Random) -> Scene:
    world, lights = _cornell_walls(7, (113, 443, 127, 432))
    white = Lambertian(Vector3(0.73, 0.73, 0.73))
    box1, box2 = _cornell_boxes(white)
    world.add(ConstantMedium(box1, 0.01, Vector3(0, 0, 0)))
    world.add(ConstantMedium(box2, 0.01, Vector3(1, 1, 1)))
    return _finish("cornell_smoke", world, lights, _cornell_camera(),
                   BLACK, 600, 1.0, 200, rng)

def final_scene(rng: random.Random) -> Scene:
    """Everything at once: the book-two cover."""
    boxes1 = HittableList()
    ground = Lambertian(Vector3(0.48, 0.83, 0.53))
    boxes_per_side = 20
    for i in range(boxes_per_side):
        for j in range(boxes_per_side):
            w = 100.0
            x0 = -1000.0 + i * w
            z0 = -1000.0 + j * w
            y1 = rng.uniform(1, 101)
            boxes1.add(Box(Vector3(x0, 0.0, z0), Vector3(x0 + w, y1, z0 + w), ground))

    world = HittableList()
    world.add(boxes1.build_bvh(0.0, 1.0, rng=rng))

    light = DiffuseLight(Vector3(7, 7, 7))
    world.add(FlipFace(XZRect(123, 423, 147, 412, 554, light)))
    lights = HittableList([XZRect(123, 423, 147, 412, 554, None)])

    center1 = Vector3(400, 400, 200)
    center2 = center1 + Vector3(30, 0, 0)
    world.add(MovingSphere(center1, center2, 0.0, 1.0, 50, Lambertian(Vector3(0.7, 0.3, 0.1))))

    world.add(Sphere(Vector3(260, 150, 45), 50, Dielectric(1.5)))
    world.add(Sphere(Vector3(0, 150, 145), 50, Metal(Vector3(0.8, 0.8, 0.9), 1.0)))

    boundary = Sphere(Vector3(360, 150, 145), 70, Dielectric(1.5))
    world.add(boundary)
    world.add(ConstantMedium(boundary, 0.2, Vector3(0.2, 0.4, 0.9)))
    boundary = Sphere(Vector3(0, 0, 0), 5000, Dielectric(1.5))
    world.add(ConstantMedium(boundary, 0.0001, Vector3(1, 1, 1)))

    world.add(Sphere(Vector3(400, 200, 400), 100, Lambertian(ImageTexture(EARTH_TEXTURE))))
    pertext = NoiseTexture(0.1, rng=np.random.default_rng(rng.getrandbits(32)))
    world.add(Sphere(Vector3(220, 280, 300), 80, Lambertian(pertext)))

    boxes2 = HittableList()
    white = Lambertian(Vector3(0.73, 0.73, 0.73))
    for _ in range(1000):
        boxes2.add(Sphere(random_vector(rng, 0, 165), 10, white))
    world.add(Translate(RotateY(boxes2.build_bvh(0.0, 1.0, rng=rng), 15),
                        Vector3(-100, 270, 395)))

    camera = _camera(Vector3(478, 278, -600), Vector3(278, 278, 0), 40.0, 1.0)
    return _finish("final_scene", world, lights, camera, BLACK, 800, 1.0, 10000, rng)

SCENES: Dict[str, Callable[[random.Random], Scene]] = {
    "random_spheres": random_spheres,
    "two_spheres": two_spheres,
    "two_perlin_spheres": two_perlin_spheres,
    "earth": earth,
    "simple_light": simple_light,
    "empty_cornell_box": empty_cornell_box,
    "cornell_box": cornell_box,
    "cornell_smoke": cornell_smoke,
    "final_scene": final_scene,
}

def scene_names():
    return list(SCENES)

def get_scene(name_or_number, seed: Optional[int] = None) -> Scene:
    """
    Build a scene by name or by its 1-based position in the catalogue.
    Raises SceneError for anything else.
    """
    key = str(name_or_number).strip()
    if key.isdigit():
        index = int(key) - 1
        names = scene_names()
        if not 0 <= index < len(names):
            raise SceneError(f"There is no scene {key}; choose 1-{len(names)}")
        key = names[index]
    try:
        builder = SCENES[key]
    except KeyError:
        raise SceneError(f"There is no scene {key!r}; known scenes: "
                         f"{', '.join(scene_names())}") from None
    logger.info("Building scene %s", key)
    return builder(random.Random(seed))
