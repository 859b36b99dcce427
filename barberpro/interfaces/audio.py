"""
Abstract interface for audible alert providers.
"""

from abc import ABC, abstractmethod


class AudioAlertInterface(ABC):
    """Abstract base class for all audible alert providers."""

    @abstractmethod
    def play_chime(self) -> None:
        """
        Play a short reminder chime without blocking the caller.

        Implementations may raise if the audio subsystem is unavailable;
        callers are expected to catch and log.
        """
        pass

    def play_dismiss(self) -> None:
        """Short confirmation tone when an alarm is dismissed. Optional."""
        pass

    def is_available(self) -> bool:
        """Check if the provider can produce sound at all."""
        return True
