#!/usr/bin/env python3
"""Pure Python shape -> ASCII text exporter.

Rasterizes the vector shapes of a sketch canvas (boxes, lines, arrows and
text labels in continuous coordinates) onto a fixed-size monospace
character grid, for export as plain text.

Supports:
- Boxes ('+' corners, '-' / '|' edges)
- Lines and arrows (Bresenham stepping, '>' '<' '^' 'v' heads)
- Text labels, including East Asian wide characters
- JSON shape documents and save/clipboard text normalization
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union
import argparse
import json
import logging
import math
import re
import sys
import unicodedata
import uuid

from wcwidth import wcwidth

logger = logging.getLogger(__name__)

# =============================================================================
# Types
# =============================================================================

@dataclass(frozen=True)
class BoxShape:
    id: str
    created_at: int
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class LineShape:
    id: str
    created_at: int
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class ArrowShape:
    id: str
    created_at: int
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class TextShape:
    id: str
    created_at: int
    x: float
    y: float
    text: str


Shape = Union[BoxShape, LineShape, ArrowShape, TextShape]


@dataclass(frozen=True)
class CellCoord:
    x: int
    y: int


@dataclass(frozen=True)
class Bounds:
    minX: int
    minY: int
    maxX: int
    maxY: int


@dataclass
class ExportConfig:
    grid_cell_size: int = 10
    newline: str = 'lf'  # 'lf' | 'crlf'


Canvas = List[List[str]]

BLANK = ' '
MARGIN = 2


class ShapeError(ValueError):
    """Raised when a shape record or shape document cannot be read."""


# =============================================================================
# Quantization
# =============================================================================

def clamp_cell_size(grid_cell_size: float) -> int:
    try:
        size = int(grid_cell_size)
    except (TypeError, ValueError, OverflowError):
        return 1
    return max(size, 1)


def round_half_away(q: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3)."""
    if not math.isfinite(q):
        return 0
    if q < 0:
        return -round_half_away(-q)
    f = math.floor(q)
    return int(f) + (1 if q - f >= 0.5 else 0)


def to_cell(v: float, grid_cell_size: float) -> int:
    return round_half_away(v / clamp_cell_size(grid_cell_size))


def char_width(ch: str) -> int:
    w = wcwidth(ch)
    if w == 2:
        return 2
    if w == 0:
        return 0
    return 1


def display_width(text: str) -> int:
    return sum(char_width(ch) for ch in text)


# =============================================================================
# Bounds
# =============================================================================

def shape_cell_extent(shape: Shape, grid_cell_size: int) -> Tuple[int, int, int, int]:
    """Grid-space (min_x, min_y, max_x, max_y) covered by a single shape."""
    if isinstance(shape, BoxShape):
        x = to_cell(shape.x, grid_cell_size)
        y = to_cell(shape.y, grid_cell_size)
        w = max(to_cell(shape.width, grid_cell_size), 1)
        h = max(to_cell(shape.height, grid_cell_size), 1)
        return (x, y, x + w, y + h)
    if isinstance(shape, (LineShape, ArrowShape)):
        x1 = to_cell(shape.x1, grid_cell_size)
        y1 = to_cell(shape.y1, grid_cell_size)
        x2 = to_cell(shape.x2, grid_cell_size)
        y2 = to_cell(shape.y2, grid_cell_size)
        return (min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2))
    x = to_cell(shape.x, grid_cell_size)
    y = to_cell(shape.y, grid_cell_size)
    return (x, y, x + display_width(shape.text), y)


def compute_bounds(shapes: Sequence[Shape], grid_cell_size: int) -> Optional[Bounds]:
    if not shapes:
        return None
    min_x, min_y, max_x, max_y = shape_cell_extent(shapes[0], grid_cell_size)
    for shape in shapes[1:]:
        sx0, sy0, sx1, sy1 = shape_cell_extent(shape, grid_cell_size)
        min_x = min(min_x, sx0)
        min_y = min(min_y, sy0)
        max_x = max(max_x, sx1)
        max_y = max(max_y, sy1)
    return Bounds(minX=min_x, minY=min_y, maxX=max_x, maxY=max_y)


# =============================================================================
# Canvas
# =============================================================================

def mk_canvas(width: int, height: int) -> Canvas:
    canvas: Canvas = []
    for _ in range(width):
        canvas.append([BLANK] * height)
    return canvas


def get_canvas_size(canvas: Canvas) -> Tuple[int, int]:
    return (len(canvas), len(canvas[0]) if canvas else 0)


def set_cell(canvas: Canvas, x: int, y: int, ch: str, overwrite: bool) -> None:
    width, height = get_canvas_size(canvas)
    if x < 0 or x >= width or y < 0 or y >= height:
        return
    if overwrite or canvas[x][y] == BLANK:
        canvas[x][y] = ch


def canvas_to_string(canvas: Canvas) -> str:
    width, height = get_canvas_size(canvas)
    lines: List[str] = []
    for y in range(height):
        line = ''.join(canvas[x][y] for x in range(width))
        lines.append(line.rstrip(BLANK))
    return '\n'.join(lines)


# =============================================================================
# Draw
# =============================================================================

def draw_box(canvas: Canvas, box: BoxShape, origin: CellCoord, grid_cell_size: int) -> None:
    x0 = to_cell(box.x, grid_cell_size) - origin.x
    y0 = to_cell(box.y, grid_cell_size) - origin.y
    x1 = x0 + max(to_cell(box.width, grid_cell_size), 1)
    y1 = y0 + max(to_cell(box.height, grid_cell_size), 1)

    set_cell(canvas, x0, y0, '+', True)
    set_cell(canvas, x1, y0, '+', True)
    set_cell(canvas, x0, y1, '+', True)
    set_cell(canvas, x1, y1, '+', True)

    for x in range(x0 + 1, x1):
        set_cell(canvas, x, y0, '-', False)
        set_cell(canvas, x, y1, '-', False)
    for y in range(y0 + 1, y1):
        set_cell(canvas, x0, y, '|', False)
        set_cell(canvas, x1, y, '|', False)


def bresenham(frm: CellCoord, to: CellCoord) -> List[CellCoord]:
    """Ordered 8-connected cells from frm to to, both ends included."""
    x, y = frm.x, frm.y
    dx = abs(to.x - x)
    dy = -abs(to.y - y)
    sx = 1 if x < to.x else -1
    sy = 1 if y < to.y else -1
    err = dx + dy

    path: List[CellCoord] = []
    while True:
        path.append(CellCoord(x, y))
        if x == to.x and y == to.y:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x += sx
        if e2 <= dx:
            err += dx
            y += sy
    return path


def segment_char(dx: int, dy: int) -> str:
    if dx == 0 and dy == 0:
        return '+'
    if dx == 0:
        return '|'
    if dy == 0:
        return '-'
    return '\\' if (dx > 0) == (dy > 0) else '/'


def arrow_head_char(dx: int, dy: int) -> str:
    if abs(dx) >= abs(dy):
        return '>' if dx >= 0 else '<'
    return 'v' if dy >= 0 else '^'


def draw_line(canvas: Canvas, shape: Union[LineShape, ArrowShape], origin: CellCoord, grid_cell_size: int) -> List[CellCoord]:
    frm = CellCoord(
        to_cell(shape.x1, grid_cell_size) - origin.x,
        to_cell(shape.y1, grid_cell_size) - origin.y,
    )
    to = CellCoord(
        to_cell(shape.x2, grid_cell_size) - origin.x,
        to_cell(shape.y2, grid_cell_size) - origin.y,
    )
    path = bresenham(frm, to)

    for curr, nxt in zip(path, path[1:]):
        set_cell(canvas, curr.x, curr.y, segment_char(nxt.x - curr.x, nxt.y - curr.y), False)

    end = path[-1]
    if isinstance(shape, ArrowShape):
        # Heads stay visible on top of box borders.
        set_cell(canvas, end.x, end.y, arrow_head_char(to.x - frm.x, to.y - frm.y), True)
    else:
        set_cell(canvas, end.x, end.y, '+', False)
    return path


def draw_text(canvas: Canvas, shape: TextShape, origin: CellCoord, grid_cell_size: int) -> None:
    cx = to_cell(shape.x, grid_cell_size) - origin.x
    cy = to_cell(shape.y, grid_cell_size) - origin.y
    for ch in shape.text:
        w = char_width(ch)
        if unicodedata.category(ch) == 'Cc':
            # Control characters would break the row layout.
            ch = BLANK
        set_cell(canvas, cx, cy, ch, True)
        if w == 2:
            set_cell(canvas, cx + 1, cy, BLANK, True)
        cx += w


# =============================================================================
# Top-level render
# =============================================================================

def render_shapes_ascii(shapes: Sequence[Shape], grid_cell_size: int = 10) -> str:
    cell_size = clamp_cell_size(grid_cell_size)
    bounds = compute_bounds(shapes, cell_size)
    if bounds is None:
        return ''

    origin = CellCoord(bounds.minX - MARGIN, bounds.minY - MARGIN)
    width = max(bounds.maxX - origin.x + MARGIN + 1, 1)
    height = max(bounds.maxY - origin.y + MARGIN + 1, 1)
    canvas = mk_canvas(width, height)

    boxes = [s for s in shapes if isinstance(s, BoxShape)]
    strokes = [s for s in shapes if isinstance(s, (LineShape, ArrowShape))]
    labels = [s for s in shapes if isinstance(s, TextShape)]
    logger.debug(
        "Rendering %d boxes, %d strokes, %d labels on %dx%d canvas (cell size %d)",
        len(boxes), len(strokes), len(labels), width, height, cell_size,
    )

    for box in boxes:
        draw_box(canvas, box, origin, cell_size)
    for stroke in strokes:
        draw_line(canvas, stroke, origin, cell_size)
    for label in labels:
        draw_text(canvas, label, origin, cell_size)

    return canvas_to_string(canvas)


# =============================================================================
# Shape records
# =============================================================================

SHAPE_FIELDS: Dict[str, Tuple[type, Tuple[str, ...]]] = {
    'box': (BoxShape, ('x', 'y', 'width', 'height')),
    'line': (LineShape, ('x1', 'y1', 'x2', 'y2')),
    'arrow': (ArrowShape, ('x1', 'y1', 'x2', 'y2')),
    'text': (TextShape, ('x', 'y')),
}

SHAPE_TYPES: Dict[type, str] = {cls: name for name, (cls, _) in SHAPE_FIELDS.items()}


def create_id() -> str:
    return str(uuid.uuid4())


def _number(data: Dict[str, object], key: str, shape_type: str) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ShapeError(f"{shape_type} shape field \"{key}\" must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ShapeError(f"{shape_type} shape field \"{key}\" must be finite, got {value!r}")
    return value


def shape_from_dict(data: object) -> Shape:
    if not isinstance(data, dict):
        raise ShapeError(f"Shape record must be an object, got {type(data).__name__}")

    shape_type = data.get('type')
    if not isinstance(shape_type, str) or shape_type not in SHAPE_FIELDS:
        raise ShapeError(f"Unknown shape type: {shape_type!r}. Expected one of {', '.join(SHAPE_FIELDS)}")
    cls, geometry = SHAPE_FIELDS[shape_type]

    shape_id = data.get('id') or create_id()
    created_key = 'createdAt' if 'createdAt' in data else 'created_at'
    created_at = _number(data, created_key, shape_type) if created_key in data else 0

    kwargs: Dict[str, object] = {key: _number(data, key, shape_type) for key in geometry}
    if cls is TextShape:
        text = data.get('text', '')
        if not isinstance(text, str):
            raise ShapeError(f"text shape field \"text\" must be a string, got {text!r}")
        kwargs['text'] = text

    return cls(id=str(shape_id), created_at=int(created_at), **kwargs)


def shape_to_dict(shape: Shape) -> Dict[str, object]:
    out: Dict[str, object] = {
        'id': shape.id,
        'type': SHAPE_TYPES[type(shape)],
        'createdAt': shape.created_at,
    }
    _, geometry = SHAPE_FIELDS[out['type']]
    for key in geometry:
        out[key] = getattr(shape, key)
    if isinstance(shape, TextShape):
        out['text'] = shape.text
    return out


def load_shapes(text: str) -> List[Shape]:
    try:
        doc = json.loads(strip_utf8_bom(text))
    except json.JSONDecodeError as exc:
        raise ShapeError(f"Invalid shape document: {exc}") from exc

    if isinstance(doc, dict):
        doc = doc.get('shapes')
    if not isinstance(doc, list):
        raise ShapeError("Shape document must be a list of shapes or an object with a \"shapes\" list")

    shapes: List[Shape] = []
    for i, record in enumerate(doc):
        try:
            shapes.append(shape_from_dict(record))
        except ShapeError as exc:
            raise ShapeError(f"Shape #{i}: {exc}") from exc
    return shapes


def normalize_box(a: Tuple[float, float], b: Tuple[float, float]) -> Tuple[float, float, float, float]:
    """Turn two drag corners into (x, y, width, height) with non-negative extents."""
    x = min(a[0], b[0])
    y = min(a[1], b[1])
    return (x, y, abs(a[0] - b[0]), abs(a[1] - b[1]))


def snap_to_grid(point: Tuple[float, float], cell_size: float) -> Tuple[float, float]:
    if cell_size <= 0:
        return point
    return (
        round_half_away(point[0] / cell_size) * cell_size,
        round_half_away(point[1] / cell_size) * cell_size,
    )


# =============================================================================
# Text I/O
# =============================================================================

RESERVED_WINDOWS_NAMES = {'CON', 'PRN', 'AUX', 'NUL'}
RESERVED_WINDOWS_NUMBERED = re.compile(r'^(COM|LPT)[1-9]$')
INVALID_WINDOWS_CHARS = re.compile(r'[<>:"/\\|?*]')


def strip_utf8_bom(text: str) -> str:
    if not text:
        return ''
    return text[1:] if text[0] == '\ufeff' else text


def _to_lf(text: str) -> str:
    return text.replace('\r\n', '\n').replace('\r', '\n')


def normalize_for_save(text: str, newline: str = 'lf') -> str:
    lf = _to_lf(text.replace('\x00', ''))
    return lf.replace('\n', '\r\n') if newline == 'crlf' else lf


def normalize_for_clipboard(text: str, platform: str) -> str:
    lf = _to_lf(text.replace('\x00', ''))
    return lf.replace('\n', '\r\n') if platform == 'windows' else lf


def basename(path: str) -> str:
    last = re.split(r'[\\/]', path)[-1]
    return last or path


def dirname(path: str) -> str:
    parts = re.split(r'[\\/]', path)
    if len(parts) <= 1:
        return ''
    return ('\\' if '\\' in path else '/').join(parts[:-1])


def join_path(directory: str, file: str) -> str:
    if not directory:
        return file
    sep = '\\' if '\\' in directory else '/'
    trimmed = directory[:-1] if directory.endswith(('\\', '/')) else directory
    return f"{trimmed}{sep}{file}"


def has_extension(path: str) -> bool:
    base = basename(path)
    if not base or base in ('.', '..') or base.endswith('.'):
        return False
    return '.' in base


def ensure_default_extension(path: str, ext: str) -> str:
    if has_extension(path):
        return path
    return f"{path}.{ext}"


def is_valid_save_path(path: str, platform: str) -> bool:
    if not path or '\x00' in path:
        return False
    if path.endswith(('\\', '/')):
        return False

    base = basename(path)
    if not base or base in ('.', '..'):
        return False
    if platform != 'windows':
        return True

    if INVALID_WINDOWS_CHARS.search(base):
        return False
    if base.endswith((' ', '.')):
        return False
    bare = base[:base.rindex('.')] if '.' in base else base
    bare = bare.upper()
    return bare not in RESERVED_WINDOWS_NAMES and not RESERVED_WINDOWS_NUMBERED.match(bare)


def current_platform() -> str:
    return 'windows' if sys.platform.startswith('win') else 'other'


# =============================================================================
# CLI
# =============================================================================

def export_file(input_path: str, output_path: Optional[str], config: ExportConfig) -> str:
    with open(input_path, 'r', encoding='utf-8') as f:
        shapes = load_shapes(f.read())
    logger.info("Loaded %d shapes from %s", len(shapes), input_path)

    output = render_shapes_ascii(shapes, config.grid_cell_size)
    if output_path is None:
        return output

    target = ensure_default_extension(output_path, 'txt')
    if not is_valid_save_path(target, current_platform()):
        raise OSError(f"Invalid output path: {target}")
    with open(target, 'w', encoding='utf-8', newline='') as f:
        f.write(normalize_for_save(output, config.newline))
    logger.info("Wrote %s", target)
    return output


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Render sketch shapes to plain ASCII text.')
    parser.add_argument('input', help='Path to a JSON shape document')
    parser.add_argument('-o', '--output', help='Write the rendered text here instead of stdout')
    parser.add_argument('--grid-size', type=int, default=10, help='Length units per character cell')
    parser.add_argument('--newline', choices=('lf', 'crlf'), default='lf', help='Line endings for the output file')
    parser.add_argument('--log-level', default='WARNING',
                        choices=('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'), help='Logging level')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    config = ExportConfig(grid_cell_size=args.grid_size, newline=args.newline)

    try:
        output = export_file(args.input, args.output, config)
    except (OSError, ShapeError) as exc:
        logger.error("Export failed: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.output is None:
        print(output)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
