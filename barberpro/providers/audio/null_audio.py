"""
Silent audio provider for headless runs and tests.
"""

from typing import Dict, Any, Optional

from ...interfaces.audio import AudioAlertInterface


class NullAudioProvider(AudioAlertInterface):
    """Counts chimes instead of playing them."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.chimes = 0
        self.dismissals = 0

    def play_chime(self) -> None:
        self.chimes += 1

    def play_dismiss(self) -> None:
        self.dismissals += 1

    def is_available(self) -> bool:
        return False
