"""Tray icon composer: GHz text over a baseline-centered sparkline."""

from __future__ import annotations

from io import BytesIO

from PIL import Image, ImageDraw, ImageFont

from .models import IconSpec, SparklineStyle
from .sparkline import _rgb, render_sparkline


_FALLBACK_FONTS = (
    "UniversCnBold.ttf",
    "DejaVuSansCondensed-Bold.ttf",
    "LiberationSansNarrow-Bold.ttf",
    "arialnb.ttf",
    "segoeuib.ttf",
    "Arial.ttf",
)


def format_ghz(ghz: float) -> str:
    return f"{max(0.0, ghz):.1f}"


class IconRenderer:
    """Renders square RGBA icons; text is sized to the largest font that fits."""

    def __init__(
        self,
        size: int = 32,
        font_path: str | None = None,
        style: SparklineStyle | None = None,
        min_font_px: int = 6,
        max_font_px: int = 30,
    ) -> None:
        self.size = size
        self.font_path = font_path
        self.style = style or SparklineStyle()
        self.min_font_px = min_font_px
        self.max_font_px = max_font_px
        self._font_name: str | None = None
        self._font_resolved = False

    def _resolve_font(self) -> str | None:
        if self._font_resolved:
            return self._font_name
        self._font_resolved = True
        candidates = ([self.font_path] if self.font_path else []) + list(_FALLBACK_FONTS)
        for name in candidates:
            try:
                ImageFont.truetype(name, 12)
            except Exception:
                continue
            self._font_name = name
            break
        return self._font_name

    def _font(self, size: int):
        name = self._resolve_font()
        if name is None:
            try:
                return ImageFont.load_default(size=size)
            except TypeError:  # Pillow < 10.1 has no sized default font
                return ImageFont.load_default()
        return ImageFont.truetype(name, size)

    def _best_font(self, draw: ImageDraw.ImageDraw, text: str, max_w: int, max_h: int):
        lo, hi = self.min_font_px, self.max_font_px
        best = self._font(lo)
        while lo <= hi:
            mid = (lo + hi) // 2
            font = self._font(mid)
            left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
            if right - left <= max_w and bottom - top <= max_h:
                best = font
                lo = mid + 1
            else:
                hi = mid - 1
        return best

    def render(self, spec: IconSpec) -> Image.Image:
        size = self.size
        image = Image.new("RGBA", (size, size), (0, 0, 0, 0))

        if spec.plot is not None and len(spec.plot) >= 2:
            render_sparkline(image, (1, 1, size - 1, size - 1), spec.plot, self.style)

        draw = ImageDraw.Draw(image)
        text = format_ghz(spec.ghz)
        font = self._best_font(draw, text, int(size * 0.98), int(size * 0.92))
        left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
        x = max(1, (size - (right - left)) // 2 - left)
        y = max(1, (size - (bottom - top)) // 2 - top)

        draw.text((x + 1, y + 1), text, font=font, fill=_rgb(spec.shadow) + (255,))
        draw.text((x, y), text, font=font, fill=_rgb(spec.text_color) + (255,))
        return image

    def render_png(self, spec: IconSpec) -> bytes:
        buf = BytesIO()
        self.render(spec).save(buf, format="PNG")
        return buf.getvalue()
