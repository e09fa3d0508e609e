import json
import logging
import string
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import NamedTuple, Optional

from .errors import ConfigError, MalformedPaletteEntry, ResourceError

logger = logging.getLogger(__name__)

# =========================
# WHEEL FILE FORMAT
# =========================
# "pallete" is the key wheel files have always used; keep it for compatibility.
PALETTE_KEY = "pallete"
FONT_KEY = "font"
CHOICES_KEY = "choices"
DEFAULT_FONT = "default"
DEFAULT_PALETTE = ("#fb2646", "#0077ff")


class Color(NamedTuple):
    r: int
    g: int
    b: int
    a: int = 255

    @property
    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def css(self) -> str:
        return f"rgba({self.r},{self.g},{self.b},{self.a / 255:.3f})"


# Pink: a bad palette entry should be obvious on screen, not fatal.
FALLBACK_COLOR = Color(255, 109, 194)


def _hex_to_rgb(hex_code: str) -> Color:
    digits = hex_code[1:] if hex_code.startswith("#") else hex_code
    if len(digits) != 6 or any(c not in string.hexdigits for c in digits):
        raise MalformedPaletteEntry(hex_code)
    return Color(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def parse_hex_color(hex_code: str) -> Color:
    """
    Convert '#rrggbb' (or 'rrggbb') to an opaque Color.
    Anything else gives FALLBACK_COLOR and a warning in the log.
    """
    try:
        return _hex_to_rgb(hex_code)
    except MalformedPaletteEntry:
        logger.warning("Malformed palette entry %r, using fallback color", hex_code)
        return FALLBACK_COLOR


# ---- Records ----
@dataclass(frozen=True)
class WheelChoice:
    name: str
    desc: Optional[str] = None

    @classmethod
    def from_record(cls, record) -> "WheelChoice":
        if not isinstance(record, dict):
            raise ConfigError(f"choice must be an object, got {type(record).__name__}")
        name = record.get("name")
        if not isinstance(name, str) or not name:
            raise ConfigError(f"choice needs a non-empty 'name': {record!r}")
        desc = record.get("desc")
        if desc is not None and not isinstance(desc, str):
            raise ConfigError(f"'desc' of choice {name!r} must be a string or null")
        return cls(name, desc)

    def to_record(self) -> dict:
        return {"name": self.name, "desc": self.desc}


@dataclass(frozen=True)
class WheelConfig:
    """
    Immutable description of a wheel: what is written on each sector and
    how the sectors are colored. Sector i uses palette[i % len(palette)].
    """
    palette: tuple = DEFAULT_PALETTE
    font: str = DEFAULT_FONT
    choices: tuple = field(default_factory=tuple)

    @classmethod
    def default(cls) -> "WheelConfig":
        return cls(
            palette=DEFAULT_PALETTE,
            font=DEFAULT_FONT,
            choices=(WheelChoice("Yes"), WheelChoice("No")),
        )

    @classmethod
    def from_record(cls, record) -> "WheelConfig":
        # An empty choice list is allowed here; SpinEngine refuses it.
        if not isinstance(record, dict):
            raise ConfigError(f"wheel must be a JSON object, got {type(record).__name__}")
        for key in (PALETTE_KEY, FONT_KEY, CHOICES_KEY):
            if key not in record:
                raise ConfigError(f"wheel is missing required field '{key}'")

        palette = record[PALETTE_KEY]
        if not isinstance(palette, list) or not all(isinstance(p, str) for p in palette):
            raise ConfigError(f"'{PALETTE_KEY}' must be a list of hex strings")
        font = record[FONT_KEY]
        if not isinstance(font, str):
            raise ConfigError(f"'{FONT_KEY}' must be a string")
        choices = record[CHOICES_KEY]
        if not isinstance(choices, list):
            raise ConfigError(f"'{CHOICES_KEY}' must be a list")

        return cls(
            palette=tuple(palette),
            font=font,
            choices=tuple(WheelChoice.from_record(c) for c in choices),
        )

    @classmethod
    def load(cls, path) -> "WheelConfig":
        """Attempts to load a wheel from a json file."""
        path = Path(path)
        try:
            record = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"cannot read wheel file {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"wheel file {path} is not valid JSON: {e}") from e
        wheel = cls.from_record(record)
        logger.info("Loaded wheel %s (%d choices)", path, len(wheel.choices))
        return wheel

    def to_record(self) -> dict:
        return {
            PALETTE_KEY: list(self.palette),
            FONT_KEY: self.font,
            CHOICES_KEY: [c.to_record() for c in self.choices],
        }

    def dump(self, path) -> None:
        Path(path).write_text(json.dumps(self.to_record(), indent=2), encoding="utf-8")

    # ---- Colors ----
    def palette_as_colors(self) -> list:
        return [parse_hex_color(hex_code) for hex_code in self.palette]

    @cached_property
    def colors(self) -> tuple:
        # parsed once so a bad entry is reported once, not every frame
        return tuple(self.palette_as_colors())

    def sector_color(self, index: int) -> Color:
        if not self.colors:
            return FALLBACK_COLOR
        return self.colors[index % len(self.colors)]


def resolve_font(font_ref: str, assets_dir=None) -> Optional[Path]:
    """
    Map the wheel's font reference to a font file.
    'default' means the renderer's own font and gives None.
    """
    if font_ref == DEFAULT_FONT:
        return None
    path = Path(font_ref)
    if not path.is_absolute() and assets_dir is not None and not path.exists():
        path = Path(assets_dir) / path
    if not path.is_file():
        raise ResourceError(f"font file not found: {font_ref}")
    return path
