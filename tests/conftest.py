"""Shared test fixtures."""

from __future__ import annotations

import pytest

from ascii_export import ArrowShape, BoxShape, LineShape, TextShape


def box(x, y, width, height, created_at=0):
    return BoxShape(id=f"box-{x}-{y}", created_at=created_at, x=x, y=y, width=width, height=height)


def line(x1, y1, x2, y2, created_at=0):
    return LineShape(id=f"line-{x1}-{y1}", created_at=created_at, x1=x1, y1=y1, x2=x2, y2=y2)


def arrow(x1, y1, x2, y2, created_at=0):
    return ArrowShape(id=f"arrow-{x1}-{y1}", created_at=created_at, x1=x1, y1=y1, x2=x2, y2=y2)


def text(x, y, s, created_at=0):
    return TextShape(id=f"text-{x}-{y}", created_at=created_at, x=x, y=y, text=s)


# Shape document as saved by the editor
SAMPLE_DOCUMENT = '''{
  "shapes": [
    {"type": "box", "id": "b1", "createdAt": 1, "x": 0, "y": 0, "width": 40, "height": 20},
    {"type": "arrow", "id": "a1", "createdAt": 2, "x1": -30, "y1": 10, "x2": 0, "y2": 10},
    {"type": "text", "id": "t1", "createdAt": 3, "x": 10, "y": 10, "text": "hi"}
  ]
}'''


@pytest.fixture
def sample_document_path(tmp_path):
    path = tmp_path / "diagram.json"
    path.write_text(SAMPLE_DOCUMENT, encoding="utf-8")
    return path
