"""Command line entry point."""

from PIL import Image

from main import build_parser, main


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.scene == "1"
        assert args.quality == "final"
        assert args.tone_map == "gamma"
        assert args.output == "image.png"

    def test_options(self):
        args = build_parser().parse_args(
            ["cornell_box", "--quality", "preview", "--samples", "4", "--seed", "9", "-o", "x.png"])
        assert (args.scene, args.quality, args.samples, args.seed, args.output) == \
            ("cornell_box", "preview", 4, 9, "x.png")


class TestMain:
    def test_list(self, capsys):
        assert main(["--list"]) == 0
        out = capsys.readouterr().out
        assert "1: random_spheres" in out
        assert "9: final_scene" in out

    def test_unknown_scene(self, tmp_path):
        assert main(["teapot", "-o", str(tmp_path / "x.png"), "--no-progress"]) == 1
        assert not (tmp_path / "x.png").exists()

    def test_invalid_settings(self, tmp_path):
        assert main(["two_spheres", "--width", "0", "-o", str(tmp_path / "x.png")]) == 2

    def test_render(self, tmp_path):
        out = tmp_path / "two_spheres.png"
        code = main([
            "two_spheres", "--width", "16", "--samples", "2", "--depth", "3",
            "--workers", "1", "--seed", "1", "-o", str(out), "--no-progress",
        ])
        assert code == 0
        with Image.open(out) as img:
            assert img.size == (16, 9)
