from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import re
from typing import Protocol

from PIL import ImageFont

from chartframe.errors import InvalidOptionError


DEFAULT_FONT_FAMILY = "Verdana"
DEFAULT_FONT_SIZE = 10.0
DEFAULT_ASPECT_RATIO = 0.6
FONT_FALLBACK_PATTERNS = (
    "verdana",
    "dejavusans",
    "dejavu sans",
    "liberationsans",
    "arial",
    "helvetica",
)

_MARKUP = re.compile(r"<[^<>]*>")
_ENTITY = re.compile(r"&[#A-Za-z0-9]+;")


@dataclass(frozen=True)
class TextStyle:
    font_size: float = DEFAULT_FONT_SIZE
    font_family: str = DEFAULT_FONT_FAMILY
    aspect_ratio: float = DEFAULT_ASPECT_RATIO

    def __post_init__(self) -> None:
        if self.font_size <= 0:
            raise InvalidOptionError("font_size must be > 0")
        if self.aspect_ratio <= 0:
            raise InvalidOptionError("aspect_ratio must be > 0")


class TextMeasurer(Protocol):
    def width(self, text: str, style: TextStyle) -> float: ...


def visible_length(text: str) -> int:
    """Character count with markup tags dropped and each entity counted once."""
    return len(_ENTITY.sub("x", _MARKUP.sub("", text)))


def estimate_text_width(text: str, style: TextStyle) -> float:
    return visible_length(text) * style.font_size * style.aspect_ratio


class EstimatedTextMeasurer:
    def width(self, text: str, style: TextStyle) -> float:
        return estimate_text_width(text, style)


class PillowTextMeasurer:
    """Measures with a TrueType font when one is installed, else Pillow's default font."""

    def width(self, text: str, style: TextStyle) -> float:
        plain = _ENTITY.sub("x", _MARKUP.sub("", text))
        if not plain:
            return 0.0
        font = _load_font(style.font_family, style.font_size)
        left, _top, right, _bottom = font.getbbox(plain)
        return float(max(0, right - left))


@lru_cache(maxsize=64)
def _load_font(font_family: str, font_size: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    size = max(1, int(round(font_size)))
    font_path = _resolve_font_path(font_family)
    if font_path is None:
        return ImageFont.load_default()
    try:
        return ImageFont.truetype(str(font_path), size=size)
    except OSError:
        return ImageFont.load_default()


@lru_cache(maxsize=16)
def _resolve_font_path(font_family: str) -> Path | None:
    wanted = font_family.strip().lower() if font_family.strip() else DEFAULT_FONT_FAMILY.lower()
    patterns = (wanted,) + FONT_FALLBACK_PATTERNS

    font_dirs = [
        Path.home() / "Library" / "Fonts",
        Path("/Library/Fonts"),
        Path("/System/Library/Fonts"),
        Path("/usr/share/fonts"),
        Path("/usr/local/share/fonts"),
    ]

    candidates: list[Path] = []
    for base in font_dirs:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf", "*.ttc"):
            candidates.extend(base.rglob(ext))

    for pattern in patterns:
        p = pattern.replace(" ", "")
        for path in candidates:
            if p in path.name.lower().replace(" ", ""):
                return path
    return None
