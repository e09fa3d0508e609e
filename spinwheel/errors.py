class SpinWheelError(Exception):
    """Base class for errors that stop a wheel session."""


class ConfigError(SpinWheelError):
    """The wheel file is missing, unreadable or structurally invalid."""


class ResourceError(SpinWheelError):
    """A file the wheel refers to (e.g. its font) does not exist."""


class MalformedPaletteEntry(ValueError):
    # never escapes parse_hex_color; the sector gets FALLBACK_COLOR instead
    pass
