from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

import numpy as np
import pvporcupine
import pvrhino

from errors import EngineInitError

# ---------------------------------------------------------------------------
# Engine constants
# ---------------------------------------------------------------------------

SAMPLE_RATE = 16000
OWW_FRAME_SAMPLES = int(SAMPLE_RATE * 0.08)   # 80 ms window for openWakeWord
DEFAULT_THRESHOLD = 0.6                       # openWakeWord score that counts as a detection

PORCUPINE_SUFFIXES = {".ppn"}
OWW_SUFFIXES = {".onnx", ".tflite"}


@dataclass(frozen=True)
class Inference:
    understood: bool
    intent: str | None = None
    slots: dict = field(default_factory=dict)


def _pcm(frame) -> list:
    return np.asarray(frame, dtype=np.int16).tolist()


# ---------------------------------------------------------------------------
# Wake word engines
# ---------------------------------------------------------------------------

class PorcupineWakeWordEngine:
    """Picovoice Porcupine over one or more .ppn keyword files."""

    def __init__(self, access_key: str, keyword_paths: Sequence[Path]):
        try:
            self._porcupine = pvporcupine.create(
                access_key=access_key,
                keyword_paths=[str(p) for p in keyword_paths],
            )
        except pvporcupine.PorcupineError as e:
            raise EngineInitError(f"Failed to create Porcupine: {e}") from e

    @property
    def frame_length(self) -> int:
        return self._porcupine.frame_length

    @property
    def sample_rate(self) -> int:
        return self._porcupine.sample_rate

    def process(self, frame) -> int | None:
        keyword_index = self._porcupine.process(_pcm(frame))
        return keyword_index if keyword_index >= 0 else None

    def delete(self) -> None:
        self._porcupine.delete()


class OpenWakeWordEngine:
    """
    openWakeWord over .onnx / .tflite models. A detection is the first model
    whose score reaches `threshold`; the prediction buffers are reset after a
    detection so the same utterance does not fire again on the next frame.
    """

    frame_length = OWW_FRAME_SAMPLES
    sample_rate = SAMPLE_RATE

    def __init__(self, model_paths: Sequence[Path], threshold: float = DEFAULT_THRESHOLD):
        try:
            import openwakeword.utils
            from openwakeword.model import Model
        except ImportError as e:
            raise EngineInitError(
                "openWakeWord models need the 'openwakeword' extra: pip install bambam[openwakeword]"
            ) from e

        framework = "tflite" if all(Path(p).suffix == ".tflite" for p in model_paths) else "onnx"
        try:
            # shared melspectrogram + embedding models
            openwakeword.utils.download_models()
            self._model = Model(
                wakeword_models=[str(p) for p in model_paths],
                inference_framework=framework,
            )
        except Exception as e:
            raise EngineInitError(f"Failed to load openWakeWord models: {e}") from e
        self.threshold = threshold
        self._names = list(self._model.models)

    def process(self, frame) -> int | None:
        prediction = self._model.predict(np.asarray(frame, dtype=np.int16))
        for index, name in enumerate(self._names):
            if float(prediction.get(name, 0.0)) >= self.threshold:
                self._model.reset()
                return index
        return None

    def delete(self) -> None:
        self._model.reset()


def create_wake_word_engine(access_key: str, keyword_paths: Sequence[Path]):
    """Pick the wake word backend from the keyword file suffixes."""
    suffixes = {Path(p).suffix.lower() for p in keyword_paths}
    if not suffixes:
        raise EngineInitError("no wake word model configured")
    if suffixes <= PORCUPINE_SUFFIXES:
        return PorcupineWakeWordEngine(access_key, keyword_paths)
    if suffixes <= OWW_SUFFIXES:
        return OpenWakeWordEngine(keyword_paths)
    raise EngineInitError(f"unsupported wake word model type(s): {', '.join(sorted(suffixes))}")


# ---------------------------------------------------------------------------
# Intent engine
# ---------------------------------------------------------------------------

class IntentEngine:
    """
    Picovoice Rhino speech-to-intent over a .rhn context.

    Frames whose length differs from Rhino's own frame length are split and
    buffered. Samples left over when Rhino finalizes belong to no utterance
    and are dropped.
    """

    def __init__(self, access_key: str, context_path: Path):
        try:
            self._rhino = pvrhino.create(access_key=access_key, context_path=str(context_path))
        except pvrhino.RhinoError as e:
            raise EngineInitError(f"Failed to create Rhino: {e}") from e
        self._pending = np.zeros(0, dtype=np.int16)

    @property
    def frame_length(self) -> int:
        return self._rhino.frame_length

    def process(self, frame) -> bool:
        pending = np.concatenate((self._pending, np.asarray(frame, dtype=np.int16)))
        size = self.frame_length
        offset = 0
        while len(pending) - offset >= size:
            is_finalized = self._rhino.process(pending[offset:offset + size].tolist())
            offset += size
            if is_finalized:
                self._pending = np.zeros(0, dtype=np.int16)
                return True
        self._pending = pending[offset:]
        return False

    def get_inference(self) -> Inference:
        inference = self._rhino.get_inference()
        return Inference(
            understood=bool(inference.is_understood),
            intent=inference.intent,
            slots=dict(inference.slots or {}),
        )

    def delete(self) -> None:
        self._rhino.delete()
