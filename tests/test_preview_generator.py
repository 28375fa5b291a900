"""Tests for preview derivation."""

import pytest
from PIL import Image

from conftest import failing_frame_extractor, fake_frame_extractor, make_image_bytes
from vault.exceptions import PreviewError
from vault.services.preview_generator import PreviewGenerator


@pytest.fixture
def generator():
    return PreviewGenerator(frame_extractor=fake_frame_extractor)


def test_image_preview_bounded_to_max_dimension(generator, tmp_path):
    source = tmp_path / "wide.png"
    source.write_bytes(make_image_bytes(size=(1200, 600), fmt="PNG"))
    destination = tmp_path / "previews" / "wide.png.jpg"

    assert generator.generate("image", source, destination) == destination

    with Image.open(destination) as preview:
        assert preview.format == "JPEG"
        assert preview.size == (300, 150)


def test_small_image_not_upscaled(generator, tmp_path):
    source = tmp_path / "small.jpg"
    source.write_bytes(make_image_bytes(size=(120, 80)))
    destination = tmp_path / "small.jpg.jpg"

    generator.generate("image", source, destination)

    with Image.open(destination) as preview:
        assert preview.size == (120, 80)


def test_transparent_image_converted_to_rgb(generator, tmp_path):
    source = tmp_path / "alpha.png"
    Image.new("RGBA", (50, 50), (0, 0, 0, 0)).save(source)
    destination = tmp_path / "alpha.png.jpg"

    generator.generate("image", source, destination)

    with Image.open(destination) as preview:
        assert preview.mode == "RGB"


def test_video_preview_uses_extracted_frame(generator, tmp_path):
    source = tmp_path / "clip.mp4"
    source.write_bytes(b"not decoded by the fake extractor")
    destination = tmp_path / "clip.mp4.jpg"

    assert generator.generate("video", source, destination) == destination

    with Image.open(destination) as preview:
        assert max(preview.size) == 300


@pytest.mark.parametrize("category", ["application", "text", "audio", ""])
def test_other_categories_have_no_preview(generator, tmp_path, category):
    source = tmp_path / "file.bin"
    source.write_bytes(b"data")
    destination = tmp_path / "file.bin.jpg"

    assert generator.generate(category, source, destination) is None
    assert not destination.exists()


def test_corrupt_image_raises_and_leaves_no_artifact(generator, tmp_path):
    source = tmp_path / "broken.jpg"
    source.write_bytes(b"\xff\xd8\xff\xe0 truncated jpeg")
    destination = tmp_path / "broken.jpg.jpg"

    with pytest.raises(PreviewError):
        generator.generate("image", source, destination)
    assert not destination.exists()


def test_frame_extraction_failure_raises(tmp_path):
    generator = PreviewGenerator(frame_extractor=failing_frame_extractor)
    source = tmp_path / "clip.mp4"
    source.write_bytes(b"video")
    destination = tmp_path / "clip.mp4.jpg"

    with pytest.raises(PreviewError):
        generator.generate("video", source, destination)
    assert not destination.exists()


def test_custom_dimension_and_quality(tmp_path):
    generator = PreviewGenerator(max_dimension=64, quality=50, frame_extractor=fake_frame_extractor)
    source = tmp_path / "photo.jpg"
    source.write_bytes(make_image_bytes(size=(640, 480)))
    destination = tmp_path / "photo.jpg.jpg"

    generator.generate("image", source, destination)

    with Image.open(destination) as preview:
        assert preview.size == (64, 48)
