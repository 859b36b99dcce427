"""
Pytest configuration and shared fixtures for BarberPro tests.
"""

import pytest
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from barberpro.models.data_models import Appointment, AppointmentStatus
from barberpro.providers.audio.null_audio import NullAudioProvider
from barberpro.providers.local_store.memory_store import MemoryKeyValueStore
from barberpro.providers.notification.null_notification import NullNotificationProvider
from barberpro.providers.remote_store.memory_store import InMemoryRemoteStore


TODAY = "2026-10-19"


class FakeClock:
    """Settable clock usable both as ``datetime.now`` and ``time.time`` stand-in."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, delta):
        self.now = self.now + delta


@pytest.fixture(scope="session")
def project_root():
    """Return the project root path."""
    return PROJECT_ROOT


@pytest.fixture
def clock():
    """Local wall clock fixed at 10:00 on TODAY."""
    return FakeClock(datetime(2026, 10, 19, 10, 0, 0))


@pytest.fixture
def epoch_clock():
    """Epoch-seconds clock for the backup throttle."""
    return FakeClock(1_800_000_000.0)


@pytest.fixture
def local_store():
    return MemoryKeyValueStore()


@pytest.fixture
def remote_store():
    return InMemoryRemoteStore()


@pytest.fixture
def notifier():
    """Notifier that grants permission when asked."""
    return NullNotificationProvider({"grant_permission": True})


@pytest.fixture
def audio():
    return NullAudioProvider()


@pytest.fixture
def reminder_config():
    return {
        "poll_interval_seconds": 30,
        "lookahead_min_minutes": 4,
        "lookahead_max_minutes": 6,
        "alarm_repeat_seconds": 3,
        "continuous_alarm": True,
        "os_notifications": True,
    }


@pytest.fixture
def backup_config():
    return {
        "sync_interval_hours": 24,
        "check_interval_seconds": 3600,
        "last_sync_key": "barber-last-cloud-sync",
    }


@pytest.fixture
def make_appointment():
    """Factory for appointments on TODAY with barber "1"."""
    counter = {"n": 0}

    def _make(time="10:05", **overrides):
        counter["n"] += 1
        fields = {
            "id": f"apt-{counter['n']}",
            "client_name": f"Cliente {counter['n']}",
            "client_phone": "11999990000",
            "barber_id": "1",
            "date": TODAY,
            "time": time,
            "services": ["1"],
            "status": AppointmentStatus.SCHEDULED,
        }
        fields.update(overrides)
        return Appointment(**fields)

    return _make


@pytest.fixture
def testing_config(tmp_path):
    """Framework config wired to in-memory providers."""
    return {
        "owner_id": None,
        "notification": {"provider": "null", "config": {"grant_permission": True}},
        "audio": {"provider": "null", "config": {}},
        "remote_store": {"provider": "memory", "config": {}},
        "local_store": {"provider": "memory", "config": {}},
        "reminders": {"poll_interval_seconds": 30, "alarm_repeat_seconds": 3},
        "backup": {"sync_interval_hours": 24, "check_interval_seconds": 3600},
        "logging": {"level": "DEBUG", "log_file": None, "use_colors": False, "use_emojis": False},
    }
