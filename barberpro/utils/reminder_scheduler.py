"""
Appointment reminder scheduler.

Polls the appointment list on a fixed interval and fires a one-shot alert
(chime, banner and OS notification) for each of the selected barber's
scheduled appointments that enters the lookahead band, e.g. more than 4 and
at most 6 minutes before it starts.

An appointment alerts at most once per viewed day: its id goes into the
notified set before any side effect runs, and that set is only cleared when
the viewed date changes. Dismissing the alarm silences the repeating chime
but leaves the id in the notified set.

Known gap: a tick that never happens (device asleep through the whole band)
means that reminder never fires. Nothing tries to catch up.
"""

from datetime import datetime
from typing import Callable, Dict, Any, Iterable, List, Optional, Set, Tuple

from ..config_models import ReminderConfig
from ..interfaces.audio import AudioAlertInterface
from ..interfaces.notification import NotificationInterface
from ..models.data_models import Appointment, AppointmentStatus, ReminderAlert
from ..providers.audio.null_audio import NullAudioProvider
from ..providers.notification.null_notification import NullNotificationProvider
from .error_handling import ErrorHandler, ErrorKind
from .logging_config import get_logger
from .periodic_timer import PeriodicTimer


COMPONENT = "reminders"

logger = get_logger(COMPONENT)


def minutes_until(appointment: Appointment, now: datetime) -> float:
    """Minutes from ``now`` until the appointment starts (negative once started)."""
    return (appointment.start_datetime() - now).total_seconds() / 60.0


def in_lookahead_band(minutes: float, low: float, high: float) -> bool:
    """Lower bound exclusive, upper bound inclusive."""
    return low < minutes <= high


def find_due_appointments(
    appointments: Iterable[Appointment],
    now: datetime,
    selected_date: Optional[str],
    barber_id: Optional[str],
    notified: Set[str],
    low: float = 4.0,
    high: float = 6.0,
) -> List[Tuple[Appointment, float]]:
    """
    Decide which appointments should alert on this tick.

    Pure: reads its arguments and returns (appointment, minutes_until) pairs
    without touching ``notified``.
    """
    today = now.date().isoformat()
    if selected_date != today:
        return []

    due = []
    for appointment in appointments:
        if appointment.date != today:
            continue
        if appointment.barber_id != barber_id:
            continue
        if appointment.status != AppointmentStatus.SCHEDULED:
            continue
        if appointment.id in notified:
            continue
        try:
            minutes = minutes_until(appointment, now)
        except ValueError:
            logger.warning(f"Skipping appointment {appointment.id} with bad time {appointment.time!r}")
            continue
        if in_lookahead_band(minutes, low, high):
            due.append((appointment, minutes))
    return due


class ReminderScheduler:
    """
    Owns the reminder poll timer, the notified set and the alarm.

    Usage:
        scheduler = ReminderScheduler(REMINDER_CONFIG, state.get_appointments,
                                      notifier=notifier, audio=audio)
        scheduler.set_view("2026-10-19", barber_id="1")
        await scheduler.start()
        ...
        scheduler.dismiss_alarm()
        scheduler.stop()
    """

    def __init__(
        self,
        config: Dict[str, Any],
        appointments_provider: Callable[[], List[Appointment]],
        notifier: Optional[NotificationInterface] = None,
        audio: Optional[AudioAlertInterface] = None,
        clock: Callable[[], datetime] = datetime.now,
        on_alert: Optional[Callable[[ReminderAlert], None]] = None,
        on_dismiss: Optional[Callable[[ReminderAlert], None]] = None,
        error_handler: Optional[ErrorHandler] = None,
    ):
        self.settings = ReminderConfig(**config)
        self._appointments_provider = appointments_provider
        self.notifier = notifier or NullNotificationProvider()
        self.audio = audio or NullAudioProvider()
        self._clock = clock
        self._on_alert = on_alert
        self._on_dismiss = on_dismiss
        self.error_handler = error_handler or ErrorHandler()

        self._notified: Set[str] = set()
        self._selected_date: Optional[str] = None
        self._barber_id: Optional[str] = None
        self._permission_requested = False
        self.active_alert: Optional[ReminderAlert] = None

        self._poll_timer = PeriodicTimer(
            self.settings.poll_interval_seconds, self.check_reminders, name="reminder-poll"
        )
        self._alarm_timer = PeriodicTimer(
            self.settings.alarm_repeat_seconds, self._ring, name="reminder-alarm"
        )

    # ------------------------------------------------------------------
    # View state
    # ------------------------------------------------------------------

    @property
    def selected_date(self) -> Optional[str]:
        return self._selected_date

    @property
    def barber_id(self) -> Optional[str]:
        return self._barber_id

    @property
    def notified_ids(self) -> Set[str]:
        return set(self._notified)

    def set_view(self, selected_date: str, barber_id: Optional[str] = None) -> None:
        """
        Update the viewed date and, optionally, the selected barber.

        A new date starts a new day context: every appointment becomes
        eligible to alert again.
        """
        if selected_date != self._selected_date:
            if self._notified:
                logger.debug(f"Viewed date changed to {selected_date}, clearing {len(self._notified)} marker(s)")
            self._notified.clear()
            self._selected_date = selected_date
        if barber_id is not None:
            self._barber_id = barber_id

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._poll_timer.is_running

    @property
    def alarm_ringing(self) -> bool:
        return self._alarm_timer.is_running

    async def request_permission(self) -> bool:
        """Ask for notification permission once per scheduler."""
        if self._permission_requested:
            return self.notifier.permission_granted
        self._permission_requested = True
        try:
            granted = await self.notifier.request_permission()
        except Exception as e:
            self.error_handler.record(COMPONENT, ErrorKind.PERMISSION_DENIED,
                                      "Notification permission request failed", e)
            return False
        if granted:
            logger.info("🔔 Notificações ativadas: alertas 5 minutos antes dos agendamentos")
        else:
            self.error_handler.record(COMPONENT, ErrorKind.PERMISSION_DENIED,
                                      "Notification permission not granted; using sound and banner only")
        return granted

    async def start(self) -> bool:
        """Start polling (one immediate check, then every poll interval)."""
        if not self.settings.enabled:
            logger.info("Reminders disabled by configuration")
            return False
        if self.is_running:
            return False
        if self.settings.os_notifications:
            await self.request_permission()
        self._poll_timer.start()
        logger.info(f"Reminder polling every {self.settings.poll_interval_seconds:g}s")
        return True

    def stop(self) -> None:
        """Stop polling and silence any alarm. Safe to call repeatedly."""
        self._poll_timer.stop()
        self._alarm_timer.stop()

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def check_reminders(self) -> List[ReminderAlert]:
        """
        Run one reminder check.

        Returns:
            Alerts fired on this tick
        """
        now = self._clock()
        due = find_due_appointments(
            self._appointments_provider(),
            now,
            self._selected_date,
            self._barber_id,
            self._notified,
            self.settings.lookahead_min_minutes,
            self.settings.lookahead_max_minutes,
        )

        fired = []
        for appointment, minutes in due:
            # Mark first so a failing side effect can never cause a refire
            self._notified.add(appointment.id)
            alert = ReminderAlert(
                appointment_id=appointment.id,
                client_name=appointment.client_name,
                time=appointment.time,
                minutes_until=minutes,
                fired_at=now,
            )
            self._fire(alert)
            fired.append(alert)
        return fired

    def _fire(self, alert: ReminderAlert) -> None:
        logger.warning(f"⏰ Lembrete de Agendamento! {alert}")
        self.active_alert = alert

        self._start_alarm()

        if self._on_alert is not None:
            try:
                self._on_alert(alert)
            except Exception as e:
                self.error_handler.record(COMPONENT, ErrorKind.UNEXPECTED,
                                          "Alert banner callback failed", e,
                                          appointment_id=alert.appointment_id)

        if self.settings.os_notifications and self.notifier.permission_granted:
            try:
                self.notifier.notify(alert.title, alert.body)
            except Exception as e:
                self.error_handler.record(COMPONENT, ErrorKind.PERMISSION_DENIED,
                                          "OS notification failed", e,
                                          appointment_id=alert.appointment_id)

    def _start_alarm(self) -> None:
        if not self.settings.continuous_alarm:
            self._ring()
            return
        if self._alarm_timer.is_running:
            # Already ringing for an earlier alert; the banner now shows the new one
            return
        try:
            self._alarm_timer.start()
        except RuntimeError:
            # No running loop (synchronous caller): ring once
            self._ring()

    def _ring(self) -> None:
        try:
            self.audio.play_chime()
        except Exception as e:
            self.error_handler.record(COMPONENT, ErrorKind.AUDIO_UNAVAILABLE,
                                      "Erro ao tocar som de notificação", e)

    # ------------------------------------------------------------------
    # Dismissal
    # ------------------------------------------------------------------

    def dismiss_alarm(self) -> bool:
        """
        Silence the alarm and clear the banner.

        The appointment stays notified and will not alert again today.

        Returns:
            True if there was an active alert
        """
        self._alarm_timer.stop()
        alert, self.active_alert = self.active_alert, None
        if alert is None:
            return False
        logger.info(f"Alarm dismissed for {alert.client_name}", appointment_id=alert.appointment_id)
        try:
            self.audio.play_dismiss()
        except Exception as e:
            self.error_handler.record(COMPONENT, ErrorKind.AUDIO_UNAVAILABLE,
                                      "Dismiss tone failed", e)
        if self._on_dismiss is not None:
            try:
                self._on_dismiss(alert)
            except Exception as e:
                self.error_handler.record(COMPONENT, ErrorKind.UNEXPECTED,
                                          "Dismiss callback failed", e)
        return True

    def acknowledge(self, appointment_id: str) -> bool:
        """Dismiss the alarm if it belongs to ``appointment_id`` (e.g. its status changed)."""
        if self.active_alert is not None and self.active_alert.appointment_id == appointment_id:
            return self.dismiss_alarm()
        return False

    def get_status(self) -> Dict[str, Any]:
        return {
            "running": self.is_running,
            "selected_date": self._selected_date,
            "barber_id": self._barber_id,
            "notified": sorted(self._notified),
            "active_alert": str(self.active_alert) if self.active_alert else None,
            "alarm_ringing": self.alarm_ringing,
            "notifications_permitted": self.notifier.permission_granted,
        }
