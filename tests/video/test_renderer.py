"""Unit tests for the CHIP-8 video renderer."""

from __future__ import annotations

import pytest

from pychip8.video import Display, MONOCHROME, PALETTES, Renderer, validate_palette


def test_render_lit_pixel() -> None:
    display = Display()
    display.toggle(0, 0)
    renderer = Renderer()

    result = renderer.render(display.snapshot())

    assert result.width == 64
    assert result.height == 32
    assert result.get_pixel(0, 0) == (255, 255, 255)
    assert result.get_pixel(1, 0) == (0, 0, 0)


def test_render_scale_factor() -> None:
    display = Display()
    display.toggle(1, 0)
    renderer = Renderer(PALETTES["cyan"])

    result = renderer.render(display.snapshot(), scale=4)

    assert result.width == 256
    assert result.height == 128
    assert result.get_pixel(3, 3) == (0, 0, 0)
    assert result.get_pixel(4, 0) == (0, 255, 255)
    assert result.get_pixel(7, 3) == (0, 255, 255)
    assert result.get_pixel(8, 0) == (0, 0, 0)
    assert len(result.pixels) == 256 * 128 * 3


def test_render_rejects_wrong_size() -> None:
    renderer = Renderer()

    with pytest.raises(ValueError):
        renderer.render([False] * 10)
    with pytest.raises(ValueError):
        renderer.render([False] * 2048, scale=0)


def test_get_pixel_out_of_range() -> None:
    result = Renderer().render([False] * 2048)

    with pytest.raises(IndexError):
        result.get_pixel(64, 0)


def test_validate_palette() -> None:
    assert validate_palette(MONOCHROME) == MONOCHROME
    assert validate_palette([(256, 0, 1), (0, 0, 0)]) == ((0, 0, 1), (0, 0, 0))
    with pytest.raises(ValueError):
        validate_palette([(0, 0, 0)])
    with pytest.raises(ValueError):
        validate_palette([(0, 0), (1, 1, 1)])
