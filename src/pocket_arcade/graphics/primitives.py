"""Drawing primitives over ``(height, width, 3)`` uint8 frame buffers."""

from typing import Tuple
import numpy as np
from numpy.typing import NDArray

# Type aliases
Color = Tuple[int, int, int]
Buffer = NDArray[np.uint8]


def create_buffer(width: int, height: int, color: Color = (0, 0, 0)) -> Buffer:
    """Allocate a frame buffer of the given canvas size."""
    buffer = np.zeros((height, width, 3), dtype=np.uint8)
    buffer[:, :] = color
    return buffer


def fill(buffer: Buffer, color: Color) -> None:
    """Fill entire buffer with color."""
    buffer[:, :] = color


def draw_rect(
    buffer: Buffer,
    x: float,
    y: float,
    width: float,
    height: float,
    color: Color,
    filled: bool = True,
    thickness: int = 1,
) -> None:
    """Draw a rectangle, clipped to the buffer.

    Args:
        buffer: Target numpy array (height, width, 3)
        x: Left edge x coordinate
        y: Top edge y coordinate
        width: Rectangle width
        height: Rectangle height
        color: RGB color tuple
        filled: If True, fill rectangle; if False, draw outline only
        thickness: Line thickness for outline (when filled=False)
    """
    h, w = buffer.shape[:2]

    # Canvas games keep float positions
    x, y = int(round(x)), int(round(y))
    width, height = int(round(width)), int(round(height))

    x1 = max(0, min(x, w))
    y1 = max(0, min(y, h))
    x2 = max(0, min(x + width, w))
    y2 = max(0, min(y + height, h))
    if x2 <= x1 or y2 <= y1:
        return

    if filled:
        buffer[y1:y2, x1:x2] = color
        return

    t = max(1, thickness)
    buffer[y1:min(y1 + t, y2), x1:x2] = color
    buffer[max(y2 - t, y1):y2, x1:x2] = color
    buffer[y1:y2, x1:min(x1 + t, x2)] = color
    buffer[y1:y2, max(x2 - t, x1):x2] = color


def draw_circle(
    buffer: Buffer,
    cx: float,
    cy: float,
    radius: float,
    color: Color,
    filled: bool = True,
) -> None:
    """Draw a circle using a distance mask.

    The outline variant keeps a one pixel ring.
    """
    h, w = buffer.shape[:2]
    y_indices, x_indices = np.ogrid[:h, :w]
    dist_sq = (x_indices - cx) ** 2 + (y_indices - cy) ** 2

    if filled:
        mask = dist_sq <= radius ** 2
    else:
        inner = max(0.0, radius - 1)
        mask = (dist_sq <= radius ** 2) & (dist_sq >= inner ** 2)
    buffer[mask] = color


def blend(color_a: Color, color_b: Color, amount: float) -> Color:
    """Linear mix of two colors, ``amount`` 0 gives ``color_a``."""
    amount = max(0.0, min(1.0, amount))
    r, g, b = (int(x + (y - x) * amount) for x, y in zip(color_a, color_b))
    return (r, g, b)


def dim(color: Color, factor: float = 0.4) -> Color:
    """Darken a color, used for unlit pads and inactive holes."""
    return blend((0, 0, 0), color, factor)
