"""
Tests for the reminder tone helpers (players mocked, nothing is played).
"""

import pytest
from unittest.mock import MagicMock, patch

from barberpro.utils import tones


MODULE = 'barberpro.utils.tones'


@pytest.fixture
def linux():
    with patch(f'{MODULE}.sys') as mock_sys:
        mock_sys.platform = 'linux'
        yield mock_sys


class TestTones:

    def test_chime_runs_on_daemon_thread(self):
        with patch(f'{MODULE}.threading.Thread') as thread_cls:
            tones.play_reminder_chime()
        kwargs = thread_cls.call_args.kwargs
        assert kwargs["target"] is tones._beep_impl_reminder
        assert kwargs["daemon"] is True
        thread_cls.return_value.start.assert_called_once()

    def test_linux_prefers_canberra_event(self, linux):
        with patch(f'{MODULE}.which', side_effect=lambda p: f"/usr/bin/{p}"), \
             patch(f'{MODULE}.subprocess.run') as run:
            tones._beep_impl_reminder()
        assert run.call_args.args[0] == ["canberra-gtk-play", "--id", "alarm-clock-elapsed"]

    def test_falls_back_to_paplay(self, linux):
        available = {"paplay"}
        with patch(f'{MODULE}.which', side_effect=lambda p: p if p in available else None), \
             patch(f'{MODULE}.subprocess.run') as run:
            tones._beep_impl_dismiss()
        assert run.call_args.args[0][0] == "paplay"

    def test_bell_when_no_player(self, linux):
        with patch(f'{MODULE}.which', return_value=None), \
             patch(f'{MODULE}._fallback_bell') as bell:
            tones._beep_impl_reminder()
        bell.assert_called_once()

    def test_player_errors_never_propagate(self, linux):
        with patch(f'{MODULE}.which', side_effect=lambda p: p), \
             patch(f'{MODULE}.subprocess.run', side_effect=OSError("broken")), \
             patch(f'{MODULE}._fallback_bell') as bell:
            tones._beep_impl_reminder()
        bell.assert_called_once()

    def test_backend_detection(self, linux):
        with patch(f'{MODULE}.which', return_value=None):
            assert tones.audio_backend_available() is False
        with patch(f'{MODULE}.which', side_effect=lambda p: p if p == "aplay" else None):
            assert tones.audio_backend_available() is True
