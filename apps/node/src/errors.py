# ---------------------------------------------------------------------------
# Error hierarchy
#
# Setup errors (config, engines, audio device) abort startup. Frame read and
# action dispatch errors end the listening run. main() reports all of them.
# ---------------------------------------------------------------------------


class BamBamError(Exception):
    """Base class for every error raised by the voice trigger."""


class ConfigReadError(BamBamError):
    """The configuration file could not be opened or read."""


class ConfigParseError(BamBamError):
    """The configuration file is not a JSON object with the required fields."""


class PathExpansionError(BamBamError):
    """A configured path references an environment variable that is not set."""


class EngineInitError(BamBamError):
    """The wake word or intent engine failed to construct."""


class AudioDeviceError(BamBamError):
    """Audio devices could not be enumerated, or capture failed to start/stop."""


class AudioReadError(BamBamError):
    """A frame could not be read from the capture stream."""


class ActionLaunchError(BamBamError):
    """A resolved action script could not be executed."""
