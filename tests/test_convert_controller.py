import numpy as np
import pytest

from image_to_alpha.controllers.convert_controller import ConvertController
from image_to_alpha.errors import LoadError, WriteError
from image_to_alpha.models.pixel_buffer import ImageDimensions
from image_to_alpha.services import export_service as export_module
from image_to_alpha.services.process_service import inverted_alpha


class TestConvert:
    def test_two_pixel_scenario(self, write_image, read_image, tmp_path):
        source = write_image([[(10, 20, 30), (200, 200, 200)]])
        target = tmp_path / "out.png"

        dims = ConvertController().convert(source, target)

        assert dims == ImageDimensions(2, 1)
        assert read_image(target).tolist() == [[[0, 0, 0, 237], [0, 0, 0, 55]]]

    def test_black_becomes_opaque(self, write_image, read_image, tmp_path):
        source = write_image([[(0, 0, 0)] * 4] * 3)
        target = tmp_path / "out.png"
        ConvertController().convert(source, target)
        out = read_image(target)
        assert out.shape == (3, 4, 4)
        assert np.all(out[..., 3] == 255)
        assert not np.any(out[..., :3])

    def test_round_trip_alpha_matches_transform(self, random_png, random_rgba, read_image, tmp_path):
        target = tmp_path / "out.png"
        ConvertController().convert(random_png, target)
        out = read_image(target)

        assert out.shape == random_rgba.shape
        assert not np.any(out[..., :3])
        expected = [[inverted_alpha(*(int(c) for c in px[:3])) for px in row] for row in random_rgba]
        assert out[..., 3].tolist() == expected

    def test_sequential_and_parallel_outputs_identical(self, random_png, tmp_path):
        sequential = tmp_path / "sequential.png"
        parallel = tmp_path / "parallel.png"
        ConvertController(workers=1).convert(random_png, sequential)
        ConvertController(workers=4).convert(random_png, parallel)
        assert sequential.read_bytes() == parallel.read_bytes()

    def test_in_place(self, write_image, read_image):
        source = write_image([[(10, 20, 30), (200, 200, 200)]], name="foo.png")
        ConvertController().convert(source, source)
        assert read_image(source).tolist() == [[[0, 0, 0, 237], [0, 0, 0, 55]]]

    def test_tiff_output(self, write_image, read_image, tmp_path):
        source = write_image([[(10, 20, 30), (200, 200, 200)]])
        target = tmp_path / "out.tif"
        ConvertController().convert(source, target)
        assert read_image(target)[0, :, 3].tolist() == [237, 55]


class TestConvertFailures:
    def test_load_failure_writes_nothing(self, tmp_path):
        target = tmp_path / "out.png"
        with pytest.raises(LoadError):
            ConvertController().convert(tmp_path / "missing.png", target)
        assert not target.exists()

    def test_in_place_write_failure_keeps_original(self, write_image, tmp_path, monkeypatch):
        source = write_image([[(10, 20, 30), (200, 200, 200)]], name="foo.png")
        original = source.read_bytes()

        def fail_replace(src, dst):
            raise OSError(13, "Permission denied")

        monkeypatch.setattr(export_module.os, "replace", fail_replace)
        with pytest.raises(WriteError):
            ConvertController().convert(source, source)

        assert source.read_bytes() == original
        assert [p.name for p in tmp_path.iterdir()] == ["foo.png"]
