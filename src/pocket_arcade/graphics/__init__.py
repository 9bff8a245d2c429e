"""Frame-buffer drawing helpers."""

from pocket_arcade.graphics.primitives import (
    Buffer,
    Color,
    blend,
    create_buffer,
    dim,
    draw_circle,
    draw_rect,
    fill,
)

__all__ = [
    "Buffer",
    "Color",
    "blend",
    "create_buffer",
    "dim",
    "draw_circle",
    "draw_rect",
    "fill",
]
