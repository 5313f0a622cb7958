import json
import signal
import types

import pytest

import main
from audio import DEFAULT_DEVICE
from errors import AudioDeviceError, AudioReadError


class TestParseArgs:
    def test_defaults(self):
        args = main.parse_args([])
        assert args.device == DEFAULT_DEVICE
        assert args.list_devices is False

    @pytest.mark.parametrize("flag", ["--device", "--dev"])
    def test_device(self, flag):
        assert main.parse_args([flag, "3"]).device == 3

    @pytest.mark.parametrize("flag", ["--list-devices", "--show_audio_devices"])
    def test_list_devices(self, flag):
        assert main.parse_args([flag]).list_devices is True

    def test_rejects_unknown_flags(self):
        with pytest.raises(SystemExit):
            main.parse_args(["--threshold", "0.5"])


class TestMain:
    def test_list_devices_exits_without_listening(self, monkeypatch):
        calls = []
        monkeypatch.setattr(main, "list_devices", lambda: calls.append("list"))
        monkeypatch.setattr(main, "listen", lambda device: calls.append("listen"))
        assert main.main(["--list-devices"]) == 0
        assert calls == ["list"]

    def test_device_enumeration_failure_is_reported(self, monkeypatch, capsys):
        def list_devices():
            raise AudioDeviceError("Failed to get audio devices")

        monkeypatch.setattr(main, "list_devices", list_devices)
        assert main.main(["--show_audio_devices"]) == 1
        assert "[error] Failed to get audio devices" in capsys.readouterr().out

    def test_normal_shutdown_prints_done(self, monkeypatch, capsys):
        seen = []
        monkeypatch.setattr(main, "listen", seen.append)
        assert main.main(["--dev", "2"]) == 0
        assert seen == [2]
        assert capsys.readouterr().out.strip().endswith("done")

    def test_missing_config_fails(self, monkeypatch, tmp_path, capsys):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert main.main([]) == 1
        assert "could not open" in capsys.readouterr().out

    def test_malformed_config_fails(self, monkeypatch, tmp_path, capsys):
        monkeypatch.setenv("HOME", str(tmp_path))
        config_dir = tmp_path / ".config" / "bambam"
        config_dir.mkdir(parents=True)
        (config_dir / "config.json").write_text(json.dumps({"access_key": "k"}))
        assert main.main([]) == 1
        assert "missing field" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# listen() wiring
# ---------------------------------------------------------------------------

def current_handlers():
    return {s: signal.getsignal(s) for s in (signal.SIGINT, signal.SIGTERM)}


class FakeEngine:
    frame_length = 512
    sample_rate = 16000

    def __init__(self):
        self.deleted = False

    def delete(self):
        self.deleted = True


class TestListen:
    @pytest.fixture
    def engines(self, monkeypatch, tmp_path):
        wake, intent = FakeEngine(), FakeEngine()
        monkeypatch.setattr(main, "default_config_path", lambda: tmp_path / "config.json")
        monkeypatch.setattr(main, "read_config", lambda path: types.SimpleNamespace(
            access_key="k", ppn_file="wake.ppn", rhn_file="home.rhn"))
        monkeypatch.setattr(main, "expand_config_path", lambda path: path)
        monkeypatch.setattr(main, "create_wake_word_engine", lambda key, paths: wake)
        monkeypatch.setattr(main, "IntentEngine", lambda key, path: intent)
        monkeypatch.setattr(main, "AudioSource", lambda frame_length, device, sample_rate: object())
        monkeypatch.setattr(main, "ActionDispatcher", lambda config: object())
        return wake, intent

    def test_signal_handlers_restored_after_run(self, monkeypatch, engines):
        installed = {}

        class Listener:
            def __init__(self, *args):
                pass

            def run(self):
                installed.update(current_handlers())

        before = current_handlers()
        monkeypatch.setattr(main, "CommandListener", Listener)
        main.listen(DEFAULT_DEVICE)

        assert installed[signal.SIGINT] is not before[signal.SIGINT]
        assert current_handlers() == before
        assert all(engine.deleted for engine in engines)

    def test_signal_handlers_restored_after_failure(self, monkeypatch, engines):
        class Listener:
            def __init__(self, *args):
                pass

            def run(self):
                raise AudioReadError("Failed to read audio frame: device gone")

        before = current_handlers()
        monkeypatch.setattr(main, "CommandListener", Listener)
        with pytest.raises(AudioReadError):
            main.listen(DEFAULT_DEVICE)

        assert current_handlers() == before
        assert all(engine.deleted for engine in engines)
