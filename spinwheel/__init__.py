"""Spinning selection wheel: spin physics, wheel configuration and drawing."""
from .config import FALLBACK_COLOR, Color, WheelChoice, WheelConfig, parse_hex_color
from .engine import FRICTION, STOP_THRESHOLD, SpinEngine
from .errors import ConfigError, MalformedPaletteEntry, ResourceError, SpinWheelError

__all__ = [
    "Color",
    "ConfigError",
    "FALLBACK_COLOR",
    "FRICTION",
    "MalformedPaletteEntry",
    "ResourceError",
    "STOP_THRESHOLD",
    "SpinEngine",
    "SpinWheelError",
    "WheelChoice",
    "WheelConfig",
    "parse_hex_color",
]
