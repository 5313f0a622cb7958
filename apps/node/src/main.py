#!/usr/bin/env python3
import argparse
import sys

from actions import ActionDispatcher
from audio import DEFAULT_DEVICE, AudioSource, list_devices
from config import default_config_path, expand_config_path, read_config
from engines import IntentEngine, create_wake_word_engine
from listener import CommandListener
from state import CancellationToken, install_signal_handlers, restore_signal_handlers


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Bam-Bam voice command")
    parser.add_argument('--list-devices', '--show_audio_devices', dest='list_devices',
                        action='store_true', help='List audio input devices and exit')
    parser.add_argument('--device', '--dev', dest='device', type=int, default=DEFAULT_DEVICE,
                        metavar='INDEX', help='Index of input audio device (default: system default)')
    return parser.parse_args(argv)


def listen(device: int) -> None:
    """
    Load the config, build both engines and the capture stream, and run the
    command listener until SIGINT/SIGTERM.
    """
    config_path = default_config_path()
    config = read_config(config_path)
    print(f"[config] Loaded {config_path}")

    wake_engine = create_wake_word_engine(config.access_key, [expand_config_path(config.ppn_file)])
    try:
        intent_engine = IntentEngine(config.access_key, expand_config_path(config.rhn_file))
    except Exception:
        wake_engine.delete()
        raise

    previous_handlers = {}
    try:
        audio = AudioSource(wake_engine.frame_length, device=device, sample_rate=wake_engine.sample_rate)
        token = CancellationToken()
        previous_handlers = install_signal_handlers(token)

        listener = CommandListener(
            wake_engine,
            intent_engine,
            audio,
            ActionDispatcher(config),
            token,
        )
        listener.run()
    finally:
        restore_signal_handlers(previous_handlers)
        intent_engine.delete()
        wake_engine.delete()


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        if args.list_devices:
            list_devices()
            return 0
        listen(args.device)
    except Exception as e:
        print(f"\n[error] {e}")
        return 1

    print("done")
    return 0


if __name__ == '__main__':
    sys.exit(main())
