# Area: Shared
"""Wall-clock helpers shared by rooms, tickets, and ladders."""

import math
import time
from datetime import datetime, timezone
from typing import Callable, Optional

# Returns epoch seconds. Services take one of these so tests can drive time.
Clock = Callable[[], float]

WEEK_SECONDS = 7 * 24 * 60 * 60


def system_clock() -> float:
    return time.time()


def to_iso(epoch_seconds: Optional[float]) -> Optional[str]:
    """Format epoch seconds as a millisecond-precision UTC ISO string."""
    if epoch_seconds is None:
        return None
    stamp = datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)
    return stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero on the positive side, like JS Math.round."""
    factor = 10 ** digits
    rounded = math.floor(value * factor + 0.5) / factor
    return int(rounded) if digits == 0 else rounded


def elapsed_seconds(clock: Clock, since: float) -> int:
    """Whole seconds elapsed since an epoch timestamp."""
    return int(round_half_up(clock() - since))
