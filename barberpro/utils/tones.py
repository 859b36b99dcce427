"""
Tiny, resilient reminder tones.

Design goals:
- Non-blocking: fire-and-forget on a background thread
- No dependency on PyAudio or pygame (avoids device conflicts)
- Cross-platform best-effort with safe fallbacks
- Never raise exceptions to callers
"""

import os
import sys
import threading
import subprocess
from shutil import which
from typing import Callable, List, Sequence, Tuple

from .logging_config import get_logger


logger = get_logger("tones")

# Ascending C5-E5-G5 arpeggio: (frequency Hz, duration ms)
REMINDER_ARPEGGIO: List[Tuple[float, int]] = [
    (523.25, 200),
    (659.25, 200),
    (783.99, 300),
]

LINUX_PLAYERS = ("canberra-gtk-play", "paplay", "aplay")


def play_reminder_chime() -> None:
    """Fire-and-forget reminder chime with robust fallbacks."""
    _play_async(_beep_impl_reminder)


def play_dismiss_tone() -> None:
    """Short single tone confirming an alarm was dismissed."""
    _play_async(_beep_impl_dismiss)


def audio_backend_available() -> bool:
    """Check if any platform sound backend is present."""
    if sys.platform == "darwin":
        return which("afplay") is not None
    if sys.platform.startswith("win"):
        return True
    return any(which(player) for player in LINUX_PLAYERS)


def _beep_impl_reminder() -> None:
    """Three-note ascending chime for an upcoming appointment."""
    if sys.platform.startswith("win"):
        # winsound can play the exact arpeggio
        if _win_arpeggio(REMINDER_ARPEGGIO):
            return
    _beep_platform(
        mac_sounds=["Glass", "Ping"],
        linux_ids=["alarm-clock-elapsed", "bell"],
        win_tone=(783, 300),
    )


def _beep_impl_dismiss() -> None:
    """Soft tone for alarm dismissal."""
    _beep_platform(
        mac_sounds=["Pop", "Tink"],
        linux_ids=["dialog-information", "bell"],
        win_tone=(600, 120),
    )


def _win_arpeggio(notes: Sequence[Tuple[float, int]]) -> bool:
    try:
        import winsound  # type: ignore
        for freq, dur in notes:
            winsound.Beep(int(freq), int(dur))
        return True
    except Exception as e:
        logger.debug(f"winsound arpeggio failed: {e}")
        return False


def _beep_platform(mac_sounds, linux_ids, win_tone) -> None:
    """Best-effort short beep for the current platform."""
    try:
        # macOS: system sounds via afplay (does not touch audio devices)
        if sys.platform == "darwin":
            try:
                afplay = which("afplay")
                if afplay:
                    for sound in mac_sounds:
                        candidate = f"/System/Library/Sounds/{sound}.aiff"
                        if os.path.exists(candidate):
                            subprocess.run(
                                [afplay, candidate],
                                check=False,
                                stdout=subprocess.DEVNULL,
                                stderr=subprocess.DEVNULL,
                            )
                            return
            except Exception as e:
                logger.debug(f"afplay failed: {e}")

        # Windows: try winsound, otherwise fall back to bell char
        if sys.platform.startswith("win"):
            try:
                import winsound  # type: ignore
                freq, dur = win_tone
                winsound.Beep(int(freq), int(dur))
                return
            except Exception as e:
                logger.debug(f"winsound failed: {e}")

        # Linux/other: event ids first, then common files
        linux_candidates = []
        for event_id in linux_ids:
            linux_candidates.append(("canberra-gtk-play", ["--id", event_id]))
        linux_candidates.extend(
            [
                ("paplay", ["/usr/share/sounds/freedesktop/stereo/alarm-clock-elapsed.oga"]),
                ("paplay", ["/usr/share/sounds/freedesktop/stereo/bell.oga"]),
                ("aplay", ["/usr/share/sounds/alsa/Front_Center.wav"]),
            ]
        )

        for player, args in linux_candidates:
            try:
                if which(player):
                    subprocess.run(
                        [player, *args],
                        check=False,
                        stdout=subprocess.DEVNULL,
                        stderr=subprocess.DEVNULL,
                    )
                    return
            except Exception as e:
                logger.debug(f"{player} failed: {e}")

        _fallback_bell()
    except Exception as e:
        # Never propagate exceptions
        logger.warning(f"Reminder tone failed: {e}")


def _play_async(fn: Callable[[], None]) -> None:
    try:
        t = threading.Thread(target=fn, daemon=True, name="barberpro-tone")
        t.start()
    except Exception as e:
        logger.warning(f"Could not start tone thread: {e}")
        _fallback_bell()


def _fallback_bell() -> None:
    try:
        sys.stdout.write("\a")
        sys.stdout.flush()
    except Exception:
        pass
