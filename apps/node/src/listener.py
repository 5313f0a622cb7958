from typing import Callable

from state import CancellationToken, ListenerState
from wait import LISTENING_SYMBOLS, SLEEPING_SYMBOLS, Wait

# ---------------------------------------------------------------------------
# Command acquisition
# ---------------------------------------------------------------------------


class CommandListener:
    """
    Two nested polling loops over a single audio source.

    WAKE_LISTENING feeds every frame to the wake word engine. A detection
    switches to COMMAND_LISTENING, which feeds frames to the intent engine
    until it finalizes; an understood intent is handed to the dispatcher and
    the listener goes back to waiting for the wake word. The cancellation
    token is checked before every frame read in both loops, and a cancelled
    token moves either state to STOPPED.

    Collaborators:
        wake_engine:   process(frame) -> keyword index or None
        intent_engine: process(frame) -> bool, get_inference() -> Inference
        audio:         context manager with a blocking read() -> frame
        dispatcher:    dispatch(intent_name)
    """

    def __init__(
        self,
        wake_engine,
        intent_engine,
        audio,
        dispatcher,
        token: CancellationToken,
        on_state_change: Callable[[ListenerState, ListenerState], None] | None = None,
    ):
        self.wake_engine = wake_engine
        self.intent_engine = intent_engine
        self.audio = audio
        self.dispatcher = dispatcher
        self.token = token
        self.on_state_change = on_state_change
        self.state = ListenerState.WAKE_LISTENING
        self._sleeping = Wait(SLEEPING_SYMBOLS)

    def run(self) -> None:
        """
        Listen until the token is cancelled. Frame read and dispatch errors
        propagate; the audio source is stopped either way.
        """
        if self.state is ListenerState.STOPPED:
            raise RuntimeError("listener already stopped")

        if not self.token.running:
            self._set_state(ListenerState.STOPPED)
        else:
            with self.audio:
                while self.state is not ListenerState.STOPPED:
                    if self.state is ListenerState.WAKE_LISTENING:
                        self._listen_for_wake_word()
                    else:
                        self._handle_inference(self._listen_for_command())

        print("\nStopping...")

    def _set_state(self, new_state: ListenerState) -> None:
        old_state, self.state = self.state, new_state
        if self.on_state_change is not None and old_state is not new_state:
            self.on_state_change(old_state, new_state)

    def _listen_for_wake_word(self) -> None:
        if not self.token.running:
            self._set_state(ListenerState.STOPPED)
            return

        frame = self.audio.read()
        keyword_index = self.wake_engine.process(frame)
        if keyword_index is None:
            print(f"\rsleeping {next(self._sleeping)}", end="", flush=True)
            return

        print(f"\n[wakeword] Detected {keyword_index}")
        self._set_state(ListenerState.COMMAND_LISTENING)

    def _listen_for_command(self):
        """Feed frames to the intent engine. Returns the Inference, or None if cancelled."""
        print("[command] Listening for commands...")
        wait = Wait(LISTENING_SYMBOLS)

        while self.token.running:
            frame = self.audio.read()
            if self.intent_engine.process(frame):
                print("\n[command] finalized")
                return self.intent_engine.get_inference()
            print(f"\rlisten for command {next(wait)}", end="", flush=True)

        return None

    def _handle_inference(self, inference) -> None:
        if inference is None:
            self._set_state(ListenerState.STOPPED)
            return

        if not inference.understood:
            print("[command] Did not understand the command")
        elif not inference.intent:
            # understood without an intent name: nothing to run
            print("[command] No intent in inference")
        else:
            print(f"[command] intent: '{inference.intent}'")
            for slot, value in inference.slots.items():
                print(f"[command] slot: {slot} = {value}")
            self.dispatcher.dispatch(inference.intent)

        self._set_state(ListenerState.WAKE_LISTENING)
