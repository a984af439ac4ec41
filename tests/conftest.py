"""Pytest configuration and fixtures."""

import pytest
from pathlib import Path

STAR_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24">'
    '<path fill="#ff0000" d="M12 2l3.09 6.26L22 9.27l-5 4.87 1.18 6.88L12 17.77l-6.18 3.25'
    'L7 14.14 2 9.27l6.91-1.01L12 2z"/>'
    "</svg>"
)

CIRCLE_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 16 16">'
    '<circle cx="8" cy="8" r="6" stroke="blue" fill="none"/>'
    "</svg>"
)

STAR_PATH = (
    "M259.3 17.8L194 150.2 47.9 171.5c-26.2 3.8-36.7 36.1-17.7 54.6l105.7 103-25 145.5"
    "c-4.5 26.3 23.2 46 46.4 33.7L288 439.6l130.7 68.7c23.2 12.2 50.9-7.4 46.4-33.7"
    "l-25-145.5 105.7-103c19-18.5 8.5-50.8-17.7-54.6L382 150.2 316.7 17.8c-11.7-23.6-45.6-23.9-57.4 0z"
)

HEART_PATH = "M47.6 300.4L228.3 469.1c7.5 7 17.4 10.9 27.7 10.9s20.2-3.9 27.7-10.9L464.4 300.4z"


def write_svgs(folder: Path, icons: dict) -> Path:
    """Write {name: markup} as <name>.svg files into folder."""
    folder.mkdir(parents=True, exist_ok=True)
    for name, markup in icons.items():
        (folder / f"{name}.svg").write_text(markup, encoding="utf-8")
    return folder


def square_svg(size: int = 10) -> str:
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {size} {size}">'
        f'<path fill="#000" d="M0 0h{size}v{size}H0z"/>'
        "</svg>"
    )


@pytest.fixture
def star_svg():
    """Valid icon with a hard-coded red fill."""
    return STAR_SVG


@pytest.fixture
def source_dir(tmp_path):
    """Directory with a valid star.svg and an empty broken.svg."""
    return write_svgs(tmp_path / "svgs", {"star": STAR_SVG, "broken": ""})


@pytest.fixture
def output_dir(tmp_path):
    """Output directory for generated icon sets (not created yet)."""
    return tmp_path / "dist"


@pytest.fixture
def solid_pack():
    """Glyph pack data in the prefix/icons shape."""
    return {
        "prefix": "fas",
        "icons": {
            "star": [576, 512, [], "f005", STAR_PATH],
            "heart": [512, 512, [], "f004", HEART_PATH],
        },
    }


@pytest.fixture
def brands_pack():
    """Glyph pack data in the icon definition shape."""
    return {
        "faGithub": {
            "prefix": "fab",
            "iconName": "github",
            "icon": [496, 512, [], "f09b", HEART_PATH],
        },
    }
