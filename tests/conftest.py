import pytest

from rlayout_lib.schema import BoundingBox, Region, RegionFont


@pytest.fixture
def make_token():
    """Factory for raw decoder text records (the dict shape a JSON bridge sends)."""

    def _make(text, x, y, size=12.0, width=None, font="Helvetica", color=None):
        token = {
            "str": text,
            "transform": [size, 0, 0, size, x, y],
            "fontName": font,
            "width": len(text) * size * 0.5 if width is None else width,
        }
        if color is not None:
            token["color"] = color
        return token

    return _make


@pytest.fixture
def make_page(make_token):
    def _make(lines, width=612.0, height=792.0, operators=None, page_number=None):
        """`lines` is a list of (text, x, y) or (text, x, y, size) tuples."""
        tokens = [make_token(*line) for line in lines]
        page = {"width": width, "height": height, "textTokens": tokens, "operators": operators or []}
        if page_number is not None:
            page["pageNumber"] = page_number
        return page

    return _make


@pytest.fixture
def make_region():
    """Factory for already-built regions, for the document-level stages."""

    def _make(text, y, x=50.0, size=11.0, page=1, width=200.0, alignment="left", index=0):
        bullet = text[:1] if text[:2] in ("• ", "- ", "* ", "● ") else None
        return Region(
            index=index,
            text=text,
            bbox=BoundingBox(
                x=x,
                y=y,
                width=width,
                height=size,
                left=x,
                right=x + width,
                top=y + size,
                bottom=y,
            ),
            font=RegionFont(name="Helvetica", size=size),
            color="#000000",
            isBullet=bullet is not None,
            bulletChar=bullet,
            alignment=alignment,
            pageNumber=page,
        )

    return _make
