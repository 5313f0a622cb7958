import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from config import BamBamConfig, expand_config_path
from errors import ActionLaunchError

# ---------------------------------------------------------------------------
# Known commands
# ---------------------------------------------------------------------------


class Command(Enum):
    """Intents that map to an action script. The value names the config field."""
    LOCK_DOOR = "lock_door"
    KITCHEN_LIGHT_YELLOW = "kitchen_light_yellow"
    KITCHEN_LIGHT_PURPLE = "kitchen_light_purple"
    UNKNOWN = None

    @classmethod
    def parse(cls, name: str) -> "Command":
        for command in cls:
            if command.value is not None and command.value == name:
                return command
        return cls.UNKNOWN

    def script(self, config: BamBamConfig) -> Path | None:
        """Resolved script path for this command, or None for UNKNOWN."""
        if self is Command.UNKNOWN:
            return None
        return expand_config_path(getattr(config, self.value))


@dataclass(frozen=True)
class ActionResult:
    command: Command
    name: str
    script: Path | None = None
    returncode: int | None = None

    @property
    def launched(self) -> bool:
        return self.script is not None


# ---------------------------------------------------------------------------
# Launcher
# ---------------------------------------------------------------------------

Launcher = Callable[[Path], int]


def run_script(script: Path) -> int:
    """
    Run `script` with its own path as the first argument and wait for it to
    exit. Returns the exit status without interpreting it.
    """
    print(f"[action] run {script}")
    try:
        completed = subprocess.run([str(script), str(script)])
    except OSError as e:
        raise ActionLaunchError(f"could not run {script}: {e}") from e
    print(f"[action] ran {script} {completed.returncode}")
    return completed.returncode


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


class ActionDispatcher:
    """
    Maps recognized intent names to configured action scripts.

    Unknown names are logged and ignored so that a misheard command never
    stops the listening loop. Path expansion and launch failures propagate.
    """

    def __init__(self, config: BamBamConfig, launcher: Launcher = run_script):
        self.config = config
        self.launcher = launcher

    def dispatch(self, name: str) -> ActionResult:
        command = Command.parse(name)
        if command is Command.UNKNOWN:
            print(f"[action] unknown command {name}")
            return ActionResult(command=command, name=name)

        script = command.script(self.config)
        returncode = self.launcher(script)
        return ActionResult(command=command, name=name, script=script, returncode=returncode)
