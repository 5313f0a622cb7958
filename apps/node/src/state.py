import signal
import threading
from enum import Enum

# ---------------------------------------------------------------------------
# Listener state
# ---------------------------------------------------------------------------


class ListenerState(Enum):
    WAKE_LISTENING = "wake_listening"         # waiting for the wake word
    COMMAND_LISTENING = "command_listening"   # feeding frames to the intent engine
    STOPPED = "stopped"                       # terminal


# ---------------------------------------------------------------------------
# Cancellation
#
# The token is the only datum shared between the listener loop and the
# signal handler. CPython runs signal handlers on the main thread between
# bytecodes, so a cancel() lands after the in-flight frame read returns and
# is seen at the top of the next loop iteration.
# ---------------------------------------------------------------------------


class CancellationToken:
    """Running flag that starts set and can be cleared exactly once."""

    def __init__(self):
        self._cancelled = threading.Event()

    @property
    def running(self) -> bool:
        return not self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()


def install_signal_handlers(token: CancellationToken, signals=(signal.SIGINT, signal.SIGTERM)) -> dict:
    """
    Route `signals` to token.cancel(). Returns the previous handlers keyed by
    signal number so they can be restored.

    Must be called from the main thread.
    """
    def handle_signal(signum, frame):
        token.cancel()

    previous = {}
    for signum in signals:
        previous[signum] = signal.signal(signum, handle_signal)
    return previous


def restore_signal_handlers(previous: dict) -> None:
    """Put back handlers returned by install_signal_handlers()."""
    for signum, handler in previous.items():
        signal.signal(signum, handler)
