"""
Audible alert providers.
"""

from .system_tones import SystemToneProvider
from .null_audio import NullAudioProvider

__all__ = ['SystemToneProvider', 'NullAudioProvider']
