import numpy as np
import sounddevice as sd

from errors import AudioDeviceError, AudioReadError

# ---------------------------------------------------------------------------
# Audio constants
# ---------------------------------------------------------------------------

SAMPLE_RATE = 16000
CHANNELS = 1
DEFAULT_DEVICE = -1     # -1 selects the system default input device


# ---------------------------------------------------------------------------
# Device utilities
# ---------------------------------------------------------------------------

def available_devices() -> list:
    """Return (index, name) for every device with at least one input channel."""
    try:
        devices = sd.query_devices()
    except sd.PortAudioError as e:
        raise AudioDeviceError(f"Failed to get audio devices: {e}") from e
    return [
        (i, dev['name'])
        for i, dev in enumerate(devices)
        if dev['max_input_channels'] > 0
    ]


def list_devices():
    for i, name in available_devices():
        print(f"index: {i}, device name: {name}")


# ---------------------------------------------------------------------------
# Capture
# ---------------------------------------------------------------------------

class AudioSource:
    """
    Blocking 16-bit mono capture, one fixed-length frame per read().

    Usable as a context manager: capture starts on enter and stops on exit.
    """

    def __init__(self, frame_length: int, device: int | None = DEFAULT_DEVICE,
                 sample_rate: int = SAMPLE_RATE):
        self.frame_length = frame_length
        self.device = None if device is None or device < 0 else device
        self.sample_rate = sample_rate
        self._stream = None

    def start(self) -> None:
        try:
            self._stream = sd.InputStream(
                samplerate=self.sample_rate,
                channels=CHANNELS,
                dtype='int16',
                blocksize=self.frame_length,
                device=self.device,
            )
            self._stream.start()
        except (sd.PortAudioError, ValueError) as e:
            self._stream = None
            raise AudioDeviceError(f"Failed to start audio recording: {e}") from e
        print(f"[audio] Capture started (device={self.device if self.device is not None else 'default'}, "
              f"{self.sample_rate}Hz, frame={self.frame_length})")

    def stop(self) -> None:
        if self._stream is None:
            return
        stream, self._stream = self._stream, None
        try:
            try:
                stream.stop()
            finally:
                stream.close()
        except sd.PortAudioError as e:
            raise AudioDeviceError(f"Failed to stop audio recording: {e}") from e

    def read(self) -> np.ndarray:
        """Block until one frame is available and return it as int16 samples."""
        if self._stream is None:
            raise AudioReadError("Failed to read audio frame: capture not started")
        try:
            data, overflowed = self._stream.read(self.frame_length)
        except sd.PortAudioError as e:
            raise AudioReadError(f"Failed to read audio frame: {e}") from e
        if overflowed:
            print("[audio] input overflow")
        return data[:, 0].copy()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.stop()
            return False
        # keep the error that ended the run
        try:
            self.stop()
        except AudioDeviceError as e:
            print(f"[audio] {e}")
        return False
