"""Desktop notifications.

Uses the platform's command-line notifier:
- macOS: osascript "display notification"
- Linux/BSD: notify-send

Delivery problems are logged and never interrupt the daemon.
"""

import shutil
import subprocess
import sys
from typing import List, Optional

from jdd.core.constants import APP_NAME
from jdd.infrastructure.logger import Logger


def _applescript_string(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


class Notifier:
    """Sends desktop notifications when enabled."""

    def __init__(self, enabled: bool, logger: Logger, app_name: str = APP_NAME):
        self.enabled = enabled
        self.logger = logger
        self.app_name = app_name

    def build_command(self, title: str, message: str) -> Optional[List[str]]:
        """Return the notifier command for this platform, or None."""
        if sys.platform == "darwin":
            script = (
                f"display notification {_applescript_string(message)} "
                f"with title {_applescript_string(title)} "
                f"subtitle {_applescript_string(self.app_name)}"
            )
            return ["osascript", "-e", script]

        if shutil.which("notify-send"):
            return ["notify-send", "--app-name", self.app_name, title, message]

        return None

    def send(self, title: str, message: str) -> bool:
        """Send a notification.

        Returns:
            True if the notifier command ran successfully
        """
        if not self.enabled:
            return False

        command = self.build_command(title, message)
        if command is None:
            self.logger.warning("No desktop notifier available", platform=sys.platform)
            return False

        try:
            result = subprocess.run(command, capture_output=True, text=True, timeout=10)
        except (OSError, subprocess.SubprocessError) as e:
            self.logger.warning(f"Failed to send notification: {e}")
            return False

        if result.returncode != 0:
            self.logger.warning(
                "Notifier exited with an error",
                command=command[0],
                returncode=result.returncode,
                stderr=result.stderr.strip(),
            )
            return False

        return True
