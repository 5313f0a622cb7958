import sys
import types

# ---------------------------------------------------------------------------
# sounddevice without PortAudio
#
# Importing sounddevice raises OSError when the PortAudio shared library is
# missing (CI containers, headless boxes). Tests never touch a real device:
# they monkeypatch query_devices/InputStream. Register a stand-in module so
# audio.py and main.py import either way.
# ---------------------------------------------------------------------------

try:
    import sounddevice  # noqa: F401
except OSError:
    class PortAudioError(Exception):
        pass

    def _unavailable(*args, **kwargs):
        raise PortAudioError("PortAudio library not found")

    fake_sd = types.ModuleType("sounddevice")
    fake_sd.PortAudioError = PortAudioError
    fake_sd.query_devices = _unavailable
    fake_sd.InputStream = _unavailable
    sys.modules["sounddevice"] = fake_sd
