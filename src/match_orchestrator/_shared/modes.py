# Area: Shared
"""
match_orchestrator._shared.modes — Match modes
==============================================

Every ladder, queue, and room belongs to exactly one mode.
"""

from enum import Enum
from typing import Any, List, Optional

from ..errors import InvalidModeError


class MatchMode(Enum):
    """
    Match modes.

    SPEEDRUN and ENDURANCE are rated; SANDBOX is unrated practice with
    damped rating movement.
    """
    SPEEDRUN = "speedrun"
    ENDURANCE = "endurance"
    SANDBOX = "sandbox"


# Modes with a matchmaking queue and a ladder record
MATCHMAKING_MODES: List[MatchMode] = [MatchMode.SPEEDRUN, MatchMode.ENDURANCE, MatchMode.SANDBOX]

# Modes that may be chosen when creating a lobby room by hand
LOBBY_MODES: List[MatchMode] = [MatchMode.SPEEDRUN, MatchMode.ENDURANCE]


def parse_mode(value: Any, default: Optional[MatchMode] = MatchMode.SPEEDRUN) -> MatchMode:
    """
    Parse a mode string.

    Args:
        value: Raw mode value (None selects the default)
        default: Mode used when value is None

    Returns:
        The MatchMode

    Raises:
        InvalidModeError: If value is not a known mode
    """
    if isinstance(value, MatchMode):
        return value
    if value is None and default is not None:
        return default
    try:
        return MatchMode(value)
    except ValueError:
        raise InvalidModeError(value) from None
