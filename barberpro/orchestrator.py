"""
Barbershop orchestrator.
Builds the providers, wires the shop state to the reminder scheduler and the
backup throttler, and owns their lifecycle.
"""

import asyncio
import time
from datetime import datetime
from typing import Callable, Dict, Any, Optional

from .factory import ProviderFactory
from .interfaces import (
    NotificationInterface,
    AudioAlertInterface,
    RemoteStoreInterface,
    KeyValueStoreInterface,
)
from .models.data_models import AppointmentStatus, ReminderAlert
from .utils.backup_throttler import BackupThrottler
from .utils.error_handling import ErrorHandler, ErrorKind, ErrorSeverity, ComponentError
from .utils.logging_config import get_logger
from .utils import reports
from .utils.reminder_scheduler import ReminderScheduler
from .utils.shop_state import ShopStateManager


logger = get_logger("orchestrator")


class BarbershopOrchestrator:
    """
    Single owner of every background activity:
    - Reminder polling and the alarm
    - Throttled cloud backup and its periodic check
    - Change notifications from the shop state
    """

    def __init__(
        self,
        config: Dict[str, Any],
        clock: Callable[[], datetime] = datetime.now,
        wall_clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self._clock = clock
        self._wall_clock = wall_clock
        self.error_handler = ErrorHandler()

        # Providers (created in initialize)
        self.notifier: Optional[NotificationInterface] = None
        self.audio: Optional[AudioAlertInterface] = None
        self.remote_store: Optional[RemoteStoreInterface] = None
        self.local_store: Optional[KeyValueStoreInterface] = None

        # Components
        self.state: Optional[ShopStateManager] = None
        self.scheduler: Optional[ReminderScheduler] = None
        self.throttler: Optional[BackupThrottler] = None

        self._visible = True
        self._background_started = False
        self._stop_event: Optional[asyncio.Event] = None
        self.is_initialized = False

    async def initialize(self, start_background: bool = True) -> bool:
        """
        Create providers and components, log in the configured owner and,
        unless ``start_background`` is False, start the timers.

        Args:
            start_background: False for one-shot commands (sync, pull, reset)
        """
        try:
            logger.info("🚀 Initializing BarbershopOrchestrator...")
            self._create_providers()

            if not await self.remote_store.initialize():
                self.error_handler.record("orchestrator", ErrorKind.TRANSIENT_IO,
                                          "Remote store unavailable, backups will retry")

            self.state = ShopStateManager(self.local_store)
            self.throttler = BackupThrottler(
                self.config.get("backup", {}),
                self.remote_store,
                self.local_store,
                self.state.snapshot,
                self.state.replace_collection,
                clock=self._wall_clock,
                error_handler=self.error_handler,
            )
            self.scheduler = ReminderScheduler(
                self.config.get("reminders", {}),
                self.state.get_appointments,
                notifier=self.notifier,
                audio=self.audio,
                clock=self._clock,
                on_alert=self._on_alert,
                on_dismiss=self._on_dismiss,
                error_handler=self.error_handler,
            )
            self.state.add_listener(self._on_state_changed)

            barbers = self.state.get_barbers()
            self.scheduler.set_view(self._today(), barbers[0].id if barbers else None)

            owner_id = self.config.get("owner_id")
            if owner_id:
                await self.login(owner_id)

            if start_background:
                await self.scheduler.start()
                self.throttler.start()
                self._background_started = True

            self.is_initialized = True
            logger.info("✅ Orchestrator ready")
            return True

        except Exception as e:
            error = ComponentError(
                component="orchestrator",
                kind=ErrorKind.UNEXPECTED,
                severity=ErrorSeverity.FATAL,
                message="Initialization failed",
                exception=e
            )
            self.error_handler.handle_error(error)
            return False

    def _create_providers(self):
        cfg = self.config
        self.local_store = ProviderFactory.create_local_store(
            cfg["local_store"]["provider"], cfg["local_store"].get("config", {}))
        self.remote_store = ProviderFactory.create_remote_store(
            cfg["remote_store"]["provider"], cfg["remote_store"].get("config", {}))
        self.notifier = ProviderFactory.create_notification_provider(
            cfg["notification"]["provider"], cfg["notification"].get("config", {}))
        self.audio = ProviderFactory.create_audio_provider(
            cfg["audio"]["provider"], cfg["audio"].get("config", {}))

    def _today(self) -> str:
        return self._clock().date().isoformat()

    def _require_initialized(self):
        if not self.is_initialized and self.state is None:
            raise RuntimeError("Orchestrator not initialized. Call initialize() first.")

    # ------------------------------------------------------------------
    # Event wiring
    # ------------------------------------------------------------------

    def _on_state_changed(self, collection: str, item_id: Optional[str]) -> None:
        if collection == "appointments" and item_id:
            appointment = self.state.find("appointments", item_id)
            if appointment is None or appointment.status != AppointmentStatus.SCHEDULED:
                self.scheduler.acknowledge(item_id)
        self.throttler.notify_data_changed()

    def _on_alert(self, alert: ReminderAlert) -> None:
        print(f"\n⏰ {alert.title}\n   {alert}\n   (press d + Enter to dismiss)\n")

    def _on_dismiss(self, alert: ReminderAlert) -> None:
        print(f"🔕 Alarme silenciado: {alert.client_name}")

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    async def login(self, owner_id: str) -> bool:
        """Set the owner and load their backup once for this session."""
        self._require_initialized()
        self.throttler.set_owner(owner_id)
        return await self.throttler.load_from_remote()

    def logout(self) -> None:
        self._require_initialized()
        self.throttler.set_owner(None)

    # ------------------------------------------------------------------
    # View and foreground
    # ------------------------------------------------------------------

    def select_date(self, selected_date: str) -> None:
        self._require_initialized()
        self.scheduler.set_view(selected_date)

    def select_barber(self, barber_id: str) -> None:
        self._require_initialized()
        self.scheduler.set_view(self.scheduler.selected_date or self._today(), barber_id)

    def set_visible(self, visible: bool) -> Optional[asyncio.Task]:
        """Record foreground state; coming back to the foreground triggers a backup check."""
        self._require_initialized()
        became_visible = visible and not self._visible
        self._visible = visible
        if became_visible:
            return self.throttler.notify_visible()
        return None

    def dismiss_alarm(self) -> bool:
        self._require_initialized()
        return self.scheduler.dismiss_alarm()

    # ------------------------------------------------------------------
    # Explicit actions
    # ------------------------------------------------------------------

    async def save_now(self) -> bool:
        """Forced backup, ignoring the throttle."""
        self._require_initialized()
        return await self.throttler.sync(forced=True)

    async def reset_all_data(self, delete_remote: bool = False) -> Dict[str, bool]:
        """
        Restore the seed data locally and, when asked, delete the cloud backup.
        """
        self._require_initialized()
        self.scheduler.dismiss_alarm()
        self.state.reset()
        remote_deleted = False
        if delete_remote:
            remote_deleted = await self.throttler.delete_remote()
        return {"local_reset": True, "remote_deleted": remote_deleted}

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def daily_report(self, day: Optional[str] = None) -> Dict[str, Any]:
        """Cuts of one day (default today) plus the free slots of the selected barber."""
        self._require_initialized()
        day = day or self._today()
        barber_id = self.scheduler.barber_id
        report = reports.daily_summary(self.state.get_cuts(), day)
        report["barber_id"] = barber_id
        report["free_slots"] = (
            reports.available_time_slots(self.state.get_appointments(), day, barber_id)
            if barber_id else []
        )
        return report

    def monthly_report(self, year: Optional[int] = None, month: Optional[int] = None) -> Dict[str, Any]:
        """Month figures plus open tabs, unpaid bills and plan totals."""
        self._require_initialized()
        now = self._clock()
        year = year or now.year
        month = month or now.month
        state = self.state
        report = reports.monthly_analysis(
            state.get_cuts(), state.get_transactions(), state.get_appointments(), year, month)
        bills = state.get_bills()
        report["fiados_pending"] = reports.total_pending(state.get_fiados())
        report["bills_pending"] = reports.bills_pending(bills)
        report["overdue_bills"] = [b.id for b in reports.overdue_bills(bills, now.date())]
        services = state.get_services()
        report["plans"] = {
            plan.client_name: reports.plan_monthly_total(plan, services, year, month)
            for plan in state.get_monthly_plans() if plan.active
        }
        return report

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def run_forever(self):
        """Block until shutdown() is called."""
        self._require_initialized()
        self._stop_event = asyncio.Event()
        logger.info("💈 Running (Ctrl+C to stop)")
        await self._stop_event.wait()

    async def shutdown(self):
        """Stop every timer and wait for in-flight backups."""
        logger.info("🧹 Shutting down...")
        if self.scheduler:
            self.scheduler.stop()
        if self.throttler:
            await self.throttler.drain()
            self.throttler.stop()
        self._background_started = False
        if self._stop_event is not None:
            self._stop_event.set()
        logger.info("✅ Shutdown complete")

    def get_status(self) -> Dict[str, Any]:
        """Get orchestrator status."""
        return {
            'initialized': self.is_initialized,
            'background_running': self._background_started,
            'visible': self._visible,
            'reminders': self.scheduler.get_status() if self.scheduler else None,
            'backup': self.throttler.get_status() if self.throttler else None,
            'errors': self.error_handler.get_error_summary(),
            'providers': {
                'notification': type(self.notifier).__name__ if self.notifier else None,
                'audio': type(self.audio).__name__ if self.audio else None,
                'remote_store': type(self.remote_store).__name__ if self.remote_store else None,
                'local_store': type(self.local_store).__name__ if self.local_store else None,
            },
        }
