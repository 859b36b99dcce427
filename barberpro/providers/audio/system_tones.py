"""
Audible alerts through the platform's system sounds.
"""

from typing import Dict, Any, Optional

from ...interfaces.audio import AudioAlertInterface
from ...utils.tones import play_reminder_chime, play_dismiss_tone, audio_backend_available


class SystemToneProvider(AudioAlertInterface):
    """
    Plays the reminder chime on a background thread.

    Configuration:
        - enabled: Set False to mute without swapping providers (default: True)
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = config or {}
        self.enabled = config.get("enabled", True)

    def play_chime(self) -> None:
        if self.enabled:
            play_reminder_chime()

    def play_dismiss(self) -> None:
        if self.enabled:
            play_dismiss_tone()

    def is_available(self) -> bool:
        return self.enabled and audio_backend_available()
