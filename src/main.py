# main.py
import argparse
import logging
import sys
from core.errors import RenderError
from renderer.raytracer import Renderer
from renderer.settings import QUALITY_LEVELS, RenderSettings
from renderer.tone_mapping import TONE_MAPPERS
from scenes.catalogue import get_scene, scene_names

logger = logging.getLogger("rtnextweek")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rtnextweek",
        description="Render one of the 'Ray Tracing: The Next Week' scenes to an image.",
    )
    parser.add_argument("scene", nargs="?", default="1",
                        help="scene name or number (see --list)")
    parser.add_argument("--list", action="store_true", help="list the scenes and exit")
    parser.add_argument("--quality", choices=sorted(QUALITY_LEVELS), default="final")
    parser.add_argument("--width", type=int, help="image width; height follows the scene aspect")
    parser.add_argument("--samples", type=int, help="samples per pixel")
    parser.add_argument("--depth", type=int, help="maximum bounces per path")
    parser.add_argument("--workers", type=int, help="render processes (default: CPU count)")
    parser.add_argument("--seed", type=int, help="seed for the scene layout and all samples")
    parser.add_argument("--tone-map", choices=sorted(TONE_MAPPERS), default="gamma")
    parser.add_argument("-o", "--output", default="image.png")
    parser.add_argument("--no-progress", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list:
        for number, name in enumerate(scene_names(), start=1):
            print(f"{number}: {name}")
        return 0

    try:
        scene = get_scene(args.scene, seed=args.seed)
        settings = RenderSettings.from_scene(
            scene,
            quality=args.quality,
            width=args.width,
            samples_per_pixel=args.samples,
            max_depth=args.depth,
            workers=args.workers,
            seed=args.seed,
            tone_map=args.tone_map,
            output=args.output,
            progress=not args.no_progress,
        )
        renderer = Renderer(scene, settings)
        renderer.render_to_file()
    except RenderError as e:
        logger.error("%s", e)
        return 1
    except ValueError as e:
        logger.error("Invalid settings: %s", e)
        return 2

    logger.info("Done in %.2fs", renderer.last_render_seconds)
    return 0

if __name__ == "__main__":
    sys.exit(main())
