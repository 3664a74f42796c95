from enum import Enum
from typing import Final

DONE_FILE_NAME: Final[str] = "done"
DEFAULT_POLL_INTERVAL_SECONDS: Final[float] = 1.0
DEFAULT_GRACEFUL_SHUTDOWN_SECONDS: Final[float] = 60.0


class GatherState(Enum):
    WAITING = "waiting"
    GRACE_PERIOD = "grace_period"
    TRANSMITTING = "transmitting"
    DONE = "done"
    ABORTED = "aborted"


class GatherOutcome(Enum):
    """Terminal outcome of a successful gather run."""
    DONE = "done"
    ABORTED = "aborted"


class TransmissionError(RuntimeError):
    pass
