"""
Unit tests for data_preprocessing.py functions.
Tests: resize_if_needed, prepare_image, load_image, is_supported_content_type, get_image_files
"""

import io
import pytest
from pathlib import Path
from PIL import Image

# Ensure src is importable
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.data_preprocessing import (
    MAX_IMAGE_DIMENSION,
    get_image_files,
    is_supported_content_type,
    load_image,
    prepare_image,
    resize_if_needed,
)


@pytest.fixture
def temp_dir(tmp_path):
    """Provide a temporary directory for each test."""
    return tmp_path


class TestResizeIfNeeded:
    def test_small_image_untouched(self):
        img = Image.new("RGB", (300, 200))
        assert resize_if_needed(img, 512).size == (300, 200)

    def test_exact_limit_untouched(self):
        img = Image.new("RGB", (512, 512))
        assert resize_if_needed(img, 512).size == (512, 512)

    def test_landscape_caps_width(self):
        img = Image.new("RGB", (1024, 768))
        assert resize_if_needed(img, 512).size == (512, 384)

    def test_portrait_caps_height(self):
        img = Image.new("RGB", (600, 1200))
        assert resize_if_needed(img, 512).size == (256, 512)

    def test_square_large(self):
        img = Image.new("RGB", (2000, 2000))
        assert resize_if_needed(img, 512).size == (512, 512)

    def test_default_limit(self):
        img = Image.new("RGB", (MAX_IMAGE_DIMENSION * 2, MAX_IMAGE_DIMENSION))
        assert max(resize_if_needed(img).size) == MAX_IMAGE_DIMENSION


class TestPrepareImage:
    def test_converts_to_rgb(self):
        """RGBA/L/P images should be converted to RGB."""
        for mode in ("RGBA", "L", "P"):
            img = Image.new(mode, (64, 64))
            assert prepare_image(img).mode == "RGB"

    def test_resizes_large_image(self):
        img = Image.new("RGBA", (1500, 500))
        out = prepare_image(img)
        assert out.size == (512, 171)
        assert out.mode == "RGB"


class TestLoadImage:
    def test_decodes_png(self):
        buf = io.BytesIO()
        Image.new("RGB", (40, 30), color=(10, 20, 30)).save(buf, format="PNG")
        img = load_image(buf.getvalue())
        assert img.size == (40, 30)

    def test_decodes_gif(self):
        buf = io.BytesIO()
        Image.new("P", (16, 16)).save(buf, format="GIF")
        assert load_image(buf.getvalue()).size == (16, 16)

    def test_invalid_bytes(self):
        with pytest.raises(ValueError, match="Failed to load image"):
            load_image(b"definitely not an image")


class TestContentType:
    @pytest.mark.parametrize("ctype", ["image/png", "image/jpeg", "image/gif", "image/webp"])
    def test_images_accepted(self, ctype):
        assert is_supported_content_type(ctype)

    @pytest.mark.parametrize("ctype", ["text/plain", "application/pdf", "", None])
    def test_others_rejected(self, ctype):
        assert not is_supported_content_type(ctype)


class TestGetImageFiles:
    def test_finds_supported_extensions(self, temp_dir):
        """Should collect .png, .jpg, .jpeg, .gif and .webp files."""
        for name in ["a.jpg", "b.jpeg", "c.png", "d.gif", "e.webp", "f.txt", "g.csv"]:
            (temp_dir / name).touch()
        files = get_image_files(temp_dir)
        assert len(files) == 5

    def test_recursive_search(self, temp_dir):
        """Should search nested directories."""
        sub = temp_dir / "nested"
        sub.mkdir()
        (temp_dir / "top.jpg").touch()
        (sub / "deep.png").touch()
        files = get_image_files(temp_dir)
        assert len(files) == 2

    def test_empty_directory(self, temp_dir):
        """Should return empty list for empty directory."""
        assert get_image_files(temp_dir) == []
