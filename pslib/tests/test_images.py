"""Tests for the image registry and image procedures."""

from __future__ import annotations

import io
import re
from pathlib import Path

import pytest
from PIL import Image as PILImage

from pslib.document.document import DocumentConfig
from pslib.document.images import STRING_CHUNK_BYTES, ImageRegistry
from pslib.document.page import Page
from pslib.errors import DocumentStateError
from pslib.ir.shapes import Image, ImageFit
from pslib.utils.markup_vm import check_markup


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def png_path(tmp_path: Path) -> Path:
    """4x2 solid red PNG on disk."""
    path = tmp_path / "red.png"
    PILImage.new("RGB", (4, 2), (255, 0, 0)).save(path)
    return path


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


class TestRegistration:
    def test_add_file(self, png_path: Path) -> None:
        images = ImageRegistry()
        raw = images.add(png_path)
        assert raw.file_name == "red.png"
        assert raw.procedure_name == "image1"
        assert (raw.width, raw.height) == (4, 2)
        assert "red.png" in images
        assert images.native_size("red.png") == (4, 2)

    def test_counter_ids(self) -> None:
        images = ImageRegistry()
        images.add_image("a.png", PILImage.new("RGB", (1, 1)))
        images.add_image("b.png", PILImage.new("L", (1, 1)))
        assert images.procedure_id("a.png") == "image1"
        assert images.procedure_id("b.png") == "image2"
        assert len(images) == 2

    def test_unknown_name(self) -> None:
        images = ImageRegistry()
        assert images.procedure_id("nope.png") is None
        assert images.native_size("nope.png") is None
        assert images.get("nope.png") is None

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            ImageRegistry().add(tmp_path / "absent.png")

    def test_reregister_keeps_id(self) -> None:
        images = ImageRegistry()
        images.add_image("a.png", PILImage.new("RGB", (1, 1)))
        images.add_image("b.png", PILImage.new("RGB", (1, 1)))
        raw = images.add_image("a.png", PILImage.new("RGB", (3, 2)))
        assert raw.procedure_name == "image1"
        assert images.native_size("a.png") == (3, 2)
        assert images.names() == ["image1", "image2"]
        assert images.add_image("c.png", PILImage.new("RGB", (1, 1))).procedure_name == "image3"
        assert images.preamble().count("/image1 {") == 1


# ---------------------------------------------------------------------------
# Procedures
# ---------------------------------------------------------------------------


class TestImageProcedure:
    def test_rgb_body(self, png_path: Path) -> None:
        images = ImageRegistry()
        images.add(png_path)
        body = images.preamble()
        assert body.startswith("/image1data [\n")
        assert "\n/image1 {\n" in body
        assert "4 2 8 [4 0 0 -2 0 2]" in body
        assert "ff0000" * 8 in body
        assert "false 3 colorimage" in body
        assert body.endswith("} bind def\n")

    def test_grayscale_converted_to_rgb(self) -> None:
        images = ImageRegistry()
        images.add_image("g.png", PILImage.new("L", (2, 2), 128))
        assert "false 3 colorimage" in images.preamble()

    def test_cmyk_keeps_four_components(self) -> None:
        images = ImageRegistry()
        images.add_image("c.jpg", PILImage.new("CMYK", (2, 1), (0, 255, 0, 0)))
        body = images.preamble()
        assert "false 4 colorimage" in body
        assert "00ff0000" * 2 in body

    def test_long_data_wrapped(self) -> None:
        images = ImageRegistry()
        images.add_image("wide.png", PILImage.new("RGB", (40, 1), (1, 2, 3)))
        body = images.preamble()
        hex_lines = [l for l in body.splitlines() if "010203" in l]
        assert len(hex_lines) > 1


# ---------------------------------------------------------------------------
# In a document
# ---------------------------------------------------------------------------


class TestImagesInDocument:
    def test_image_procedure_in_header(self, png_path: Path, fixed_date) -> None:
        images = ImageRegistry()
        images.add(png_path)
        sink = io.StringIO()
        with DocumentConfig(sink=sink, images=images, creation_date=fixed_date).build() as doc:
            doc.add(
                Page(200, 200).add(
                    Image.place(images, "red.png", 0, 0, 100, 100, fit=ImageFit.CROP)
                )
            )
        text = sink.getvalue()
        assert text.index("/image1 {") < text.index("%%Page: 1 1")
        result = check_markup(text)
        assert result["balanced"]
        assert result["operators"].get("image1") == 1

    def test_registry_frozen_by_header(self, fixed_date) -> None:
        images = ImageRegistry()
        images.add_image("a.png", PILImage.new("RGB", (1, 1)))
        DocumentConfig(sink=io.StringIO(), images=images, creation_date=fixed_date).build()
        assert images.frozen
        with pytest.raises(DocumentStateError, match="late.png"):
            images.add_image("late.png", PILImage.new("RGB", (1, 1)))
        assert "late.png" not in images

    def test_page_with_undefined_image_rejected(self, fixed_date) -> None:
        images = ImageRegistry()
        images.add_image("a.png", PILImage.new("RGB", (2, 2)))
        sink = io.StringIO()
        doc = DocumentConfig(sink=sink, creation_date=fixed_date).build()
        page = Page(10, 10).add(Image.place(images, "a.png", 0, 0, 10, 10))
        assert page.procedure_refs == {"image1"}
        with pytest.raises(DocumentStateError, match="image1"):
            doc.add(page)
        assert doc.page_count == 0
        assert "image1" not in sink.getvalue()

    def test_large_image_split_into_strings(self, fixed_date) -> None:
        images = ImageRegistry()
        images.add_image("big.png", PILImage.new("RGB", (200, 200), (9, 8, 7)))
        sink = io.StringIO()
        with DocumentConfig(sink=sink, images=images, creation_date=fixed_date).build() as doc:
            doc.add(Page(300, 300).add(Image.place(images, "big.png", 0, 0, 300, 300)))
        text = sink.getvalue()

        strings = [bytes.fromhex(s) for s in re.findall(r"<([0-9a-f\s]+)>", text)]
        assert len(strings) == 2
        assert all(len(s) <= STRING_CHUNK_BYTES for s in strings)
        assert sum(len(s) for s in strings) == 200 * 200 * 3
        assert "{ image1data image1idx get /image1idx image1idx 1 add def }" in text
        assert check_markup(text)["balanced"]
