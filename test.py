#!/usr/bin/env python3
from ascii_export import render_shapes_ascii, shape_from_dict


SAMPLES = [
    {
        "title": "Two boxes joined by an arrow",
        "grid": 10,
        "shapes": [
            {"type": "box", "id": "a", "createdAt": 1, "x": 0, "y": 0, "width": 80, "height": 30},
            {"type": "box", "id": "b", "createdAt": 2, "x": 160, "y": 0, "width": 80, "height": 30},
            {"type": "arrow", "id": "c", "createdAt": 3, "x1": 80, "y1": 15, "x2": 160, "y2": 15},
            {"type": "text", "id": "d", "createdAt": 4, "x": 20, "y": 10, "text": "API"},
            {"type": "text", "id": "e", "createdAt": 5, "x": 180, "y": 10, "text": "DB"},
        ],
    },
    {
        "title": "Diagonal strokes",
        "grid": 10,
        "shapes": [
            {"type": "line", "id": "a", "createdAt": 1, "x1": 0, "y1": 0, "x2": 60, "y2": 40},
            {"type": "arrow", "id": "b", "createdAt": 2, "x1": 60, "y1": 0, "x2": 0, "y2": 40},
        ],
    },
    {
        "title": "Wide text label",
        "grid": 10,
        "shapes": [
            {"type": "box", "id": "a", "createdAt": 1, "x": 0, "y": 0, "width": 100, "height": 20},
            {"type": "text", "id": "b", "createdAt": 2, "x": 10, "y": 10, "text": "你好 ok"},
        ],
    },
]


def main() -> int:
    for i, sample in enumerate(SAMPLES, start=1):
        shapes = [shape_from_dict(record) for record in sample["shapes"]]
        print("=" * 80)
        print(f"[{i:03d}] {sample['title']}")
        print("-" * 80)
        print(render_shapes_ascii(shapes, sample.get("grid", 10)))

    print("=" * 80)
    print(f"Rendered {len(SAMPLES)} samples")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
