"""
Identifier generation for TraceChain entities.

Identifiers have the shape "{seconds}_{suffix}" where seconds is the wall
clock at generation time. Two strategies produce the suffix:

- "clock": a finer-grained clock reading modulo 10000. Two identifiers taken
  in the same second with congruent fine clock readings collide. Kept for
  compatibility with identifiers issued by earlier deployments.
- "unique": 12 hex characters of a random UUID.
"""

import time
import uuid
from typing import Callable


CLOCK_STRATEGY = "clock"
UNIQUE_STRATEGY = "unique"
SUPPORTED_STRATEGIES = (CLOCK_STRATEGY, UNIQUE_STRATEGY)


def current_timestamp(clock: Callable[[], float] = time.time) -> int:
    """Return the clock reading truncated to whole seconds since the epoch."""
    return int(clock())


class IdentifierGenerator:
    """Produces identifiers for new products, participants and events"""

    def __init__(self, strategy: str = UNIQUE_STRATEGY,
                 clock: Callable[[], float] = time.time,
                 fine_clock: Callable[[], int] = time.time_ns):
        """
        Args:
            strategy: "unique" or "clock"
            clock: Coarse wall clock returning seconds since the epoch
            fine_clock: Fine-grained clock returning nanoseconds, used by "clock"

        Raises:
            ValueError: If the strategy is not supported
        """
        if strategy not in SUPPORTED_STRATEGIES:
            raise ValueError(
                f"Unsupported identifier strategy '{strategy}', "
                f"expected one of: {', '.join(SUPPORTED_STRATEGIES)}"
            )
        self.strategy = strategy
        self.clock = clock
        self.fine_clock = fine_clock

    def generate_id(self) -> str:
        """Generate a new identifier"""
        timestamp = current_timestamp(self.clock)
        if self.strategy == CLOCK_STRATEGY:
            random_part = self.fine_clock() % 10000
        else:
            random_part = uuid.uuid4().hex[:12]
        return f"{timestamp}_{random_part}"

    def __call__(self) -> str:
        return self.generate_id()

    def __repr__(self) -> str:
        return f"IdentifierGenerator(strategy={self.strategy!r})"
