"""
Desktop notification provider.

Raises native notifications through the platform's command-line helper:
``osascript`` on macOS and ``notify-send`` on Linux. Platforms without a
helper report permission as denied and the reminder degrades to sound and
banner only.
"""

import subprocess
import sys
import threading
from shutil import which
from typing import Dict, Any, List, Optional

from ...interfaces.notification import NotificationInterface
from ...utils.logging_config import get_logger


class DesktopNotificationProvider(NotificationInterface):
    """
    Native desktop notifications.

    Configuration:
        - app_name: Name shown as the notification source (default: BarberPro)
        - urgency: notify-send urgency level (default: critical, stays on screen)
        - timeout: Seconds to wait for the helper process (default: 5)
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = config or {}
        self.app_name = config.get("app_name", "BarberPro")
        self.urgency = config.get("urgency", "critical")
        self.timeout = config.get("timeout", 5)
        self._permission_granted = False
        self._permission_requested = False
        self.logger = get_logger("notification")

    @property
    def permission_granted(self) -> bool:
        return self._permission_granted

    def _helper(self) -> Optional[str]:
        if sys.platform == "darwin":
            return which("osascript")
        if sys.platform.startswith("linux"):
            return which("notify-send")
        return None

    async def request_permission(self) -> bool:
        """The desktop grants permission when a notification helper is installed."""
        if self._permission_requested:
            return self._permission_granted
        self._permission_requested = True

        helper = self._helper()
        self._permission_granted = helper is not None
        if self._permission_granted:
            self.logger.info(f"🔔 Desktop notifications enabled via {helper}")
        else:
            self.logger.warning(
                f"Desktop notifications unavailable on {sys.platform}; "
                "reminders will use sound and banner only"
            )
        return self._permission_granted

    def _build_command(self, helper: str, title: str, body: str) -> List[str]:
        if sys.platform == "darwin":
            # AppleScript strings need backslash and double-quote escaping
            esc_title = title.replace('\\', '\\\\').replace('"', '\\"')
            esc_body = body.replace('\\', '\\\\').replace('"', '\\"')
            script = (
                f'display notification "{esc_body}" with title "{esc_title}" '
                f'sound name "Glass"'
            )
            return [helper, "-e", script]
        return [helper, "--app-name", self.app_name, "--urgency", self.urgency, title, body]

    def notify(self, title: str, body: str) -> bool:
        """
        Hand the notification to the platform helper on a daemon thread.

        The helper can take seconds to return (or hang until the timeout), so
        the reminder tick never waits on it. Helper failures are logged from
        the worker thread.
        """
        if not self._permission_granted:
            return False

        helper = self._helper()
        if helper is None:
            return False

        command = self._build_command(helper, title, body)
        threading.Thread(target=self._send, args=(command,), daemon=True,
                         name="barberpro-notify").start()
        return True

    def _send(self, command: List[str]) -> bool:
        try:
            result = subprocess.run(
                command,
                check=False,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            self.logger.warning("Notification helper timed out")
            return False
        except OSError as e:
            self.logger.warning(f"Notification helper failed to start: {e}")
            return False

        if result.returncode != 0:
            self.logger.warning(f"Notification helper exited {result.returncode}: {result.stderr.strip()}")
            return False
        return True
