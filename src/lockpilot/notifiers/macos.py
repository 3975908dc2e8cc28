"""macOS notifier driven by osascript and pmset."""

import logging
import subprocess

from lockpilot.timers.errors import NotifierError
from lockpilot.timers.types import TimerAction

logger = logging.getLogger(__name__)

OSASCRIPT = "/usr/bin/osascript"
PMSET = "/usr/bin/pmset"
DEFAULT_DIALOG_TITLE = "LockPilot"

LOCK_KEYSTROKE_SCRIPT = (
    'tell application "System Events" to keystroke "q" '
    "using {control down, command down}"
)
SCREEN_SAVER_SCRIPT = 'tell application "System Events" to start current screen saver'
SHUTDOWN_SCRIPT = 'tell application "System Events" to shut down'
RESTART_SCRIPT = 'tell application "System Events" to restart'


class MacOSNotifier:
    """Shows dialogs, locks the screen, shuts down or restarts a Mac."""

    def __init__(self, dialog_title: str = DEFAULT_DIALOG_TITLE) -> None:
        self._dialog_title = dialog_title

    def notify(self, action: TimerAction, message: str | None) -> None:
        match action:
            case TimerAction.POPUP:
                self._popup(message or "")
            case TimerAction.LOCK:
                self._lock()
            case TimerAction.SHUTDOWN:
                run_osascript(SHUTDOWN_SCRIPT)
            case TimerAction.REBOOT:
                run_osascript(RESTART_SCRIPT)

    def _popup(self, message: str) -> None:
        script = (
            f'display dialog "{_escape(message)}" '
            f'with title "{_escape(self._dialog_title)}" '
            'buttons {"OK"} default button "OK"'
        )
        run_osascript(script)

    def _lock(self) -> None:
        # Ctrl+Cmd+Q first, then the screen saver, then force display sleep.
        for script in (LOCK_KEYSTROKE_SCRIPT, SCREEN_SAVER_SCRIPT):
            try:
                run_osascript(script)
                return
            except NotifierError as e:
                logger.warning("lock_fallback", extra={"error.message": str(e)})
        _run([PMSET, "displaysleepnow"])


def run_osascript(script: str) -> None:
    _run([OSASCRIPT, "-e", script])


def _run(command: list[str]) -> None:
    try:
        result = subprocess.run(command, capture_output=True, text=True)
    except OSError as e:
        raise NotifierError(f"Failed to run {command[0]}: {e}") from e
    if result.returncode != 0:
        raise NotifierError(result.stderr.strip() or f"{command[0]} exited {result.returncode}")


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')
