from __future__ import annotations


Color = tuple[int, int, int]

DEFAULT_ELEMENT_COLOR: Color = (200, 200, 200)
ELEMENT_COLORS: dict[str, Color] = {
    "H": (255, 255, 255),
    "C": (144, 144, 144),
    "N": (48, 80, 248),
    "O": (255, 13, 13),
    "S": (255, 255, 48),
    "P": (255, 128, 0),
    "F": (144, 224, 80),
    "Cl": (31, 240, 31),
    "Br": (166, 41, 41),
}


def element_color(symbol: str) -> Color:
    # Geometry values are upper-cased by the parser, so "CL" must find "Cl".
    color = ELEMENT_COLORS.get(symbol)
    if color is None:
        color = ELEMENT_COLORS.get(symbol.capitalize(), DEFAULT_ELEMENT_COLOR)
    return color


class FrameBuffer:
    """RGBA pixels, transparent until drawn on."""

    __slots__ = ("width", "height", "pixels")

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid frame size {width}x{height}")
        self.width = width
        self.height = height
        self.pixels = bytearray(width * height * 4)

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        if x < 0 or x >= self.width or y < 0 or y >= self.height:
            return
        offset = (y * self.width + x) * 4
        self.pixels[offset:offset + 4] = bytes((*color, 255))

    def get_pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        offset = (y * self.width + x) * 4
        r, g, b, a = self.pixels[offset:offset + 4]
        return r, g, b, a

    def draw_circle_outline(self, cx: int, cy: int, radius: int, color: Color) -> None:
        """Midpoint circle, one octant computed and mirrored eight ways."""
        x, y = 0, radius
        decision = 3 - 2 * radius
        while x <= y:
            for dx, dy in ((x, y), (y, x)):
                self.set_pixel(cx + dx, cy + dy, color)
                self.set_pixel(cx - dx, cy + dy, color)
                self.set_pixel(cx + dx, cy - dy, color)
                self.set_pixel(cx - dx, cy - dy, color)
            if decision < 0:
                decision += 4 * x + 6
            else:
                decision += 4 * (x - y) + 10
                y -= 1
            x += 1

    def to_bytes(self) -> bytes:
        return bytes(self.pixels)
