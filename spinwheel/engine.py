import logging
import math
import time

import numpy as np

from .errors import ConfigError

logger = logging.getLogger(__name__)

# =========================
# SPIN PHYSICS CONSTANTS
# =========================
TWO_PI = 2.0 * math.pi
FRICTION = 0.98                # per-tick decay; lower = the wheel stops sooner
STOP_THRESHOLD = 0.00005       # below this velocity the wheel is at rest
MIN_SPIN_VELOCITY = 0.4
MAX_SPIN_VELOCITY = 1.5


def ticks_to_rest(v0: float, friction: float = FRICTION, threshold: float = STOP_THRESHOLD) -> int:
    """Number of ticks a spin started at v0 takes to fall below threshold."""
    if v0 < threshold:
        return 0
    return math.ceil(math.log(threshold / v0) / math.log(friction))


class SpinEngine:
    """
    Angle / velocity state of one wheel and the sector under the pointer.

    Friction is applied once per tick() call, not per second, so the
    spin-down rate follows the caller's frame rate.
    """

    def __init__(self, sector_count: int, rng=None, clock=time.monotonic):
        if sector_count < 1:
            raise ConfigError("a wheel needs at least one choice")
        self.sector_count = sector_count
        # anything with uniform(low, high); seed it for reproducible spins
        self.rng = rng if rng is not None else np.random.default_rng()
        self.clock = clock

        self.angle = 0.0
        self.velocity = 0.0
        self.is_spinning = False
        self._tick_reference = self.clock()

    def start_spin(self) -> None:
        # callers check is_spinning first; see request_spin()
        self._tick_reference = self.clock()
        self.angle = 0.0
        self.velocity = float(self.rng.uniform(MIN_SPIN_VELOCITY, MAX_SPIN_VELOCITY))
        self.is_spinning = True
        logger.debug("Spin started at velocity %.4f", self.velocity)

    def request_spin(self) -> bool:
        """Spin trigger: starts a spin unless one is already running."""
        if self.is_spinning:
            return False
        self.start_spin()
        return True

    def tick(self, elapsed_seconds: float) -> None:
        if self.is_spinning:
            self.angle += self.velocity * elapsed_seconds
            self.velocity *= FRICTION
        if self.velocity < STOP_THRESHOLD:
            if self.is_spinning:
                logger.debug("Wheel settled at angle %.4f (index %d)", self.angle, self.current_index())
            self.is_spinning = False
            self.velocity = 0.0

    def elapsed(self) -> float:
        return self.clock() - self._tick_reference

    def update(self) -> None:
        """One host-loop frame: tick with the time since the spin started."""
        self.tick(self.elapsed())

    def current_index(self) -> int:
        n = self.sector_count
        scaled = n * self.angle / TWO_PI
        # ceil + reflection puts sector 0 under the pointer at angle 0;
        # exact boundaries round the way this formula says, e.g. n=2, angle=pi -> 0
        return math.ceil((n - 1) - (scaled % n)) % n
