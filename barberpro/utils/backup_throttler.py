"""
Throttled cloud backup.

Pushes a snapshot of every user collection to the remote store at most once
per sync interval (24h by default). A forced push (the explicit "save now"
action) bypasses the throttle. The last successful push time lives in the
local store under ``barber-last-cloud-sync`` so the throttle survives
restarts.

Triggers:
    - data change, only after the session's first remote load
    - the app becoming visible again
    - a periodic check (hourly by default)

Every trigger is fire-and-forget: a failing push is logged, leaves the marker
untouched and the next trigger retries.
"""

import asyncio
import time
from typing import Callable, Dict, Any, List, Optional

from ..config_models import BackupConfig
from ..interfaces.local_store import KeyValueStoreInterface
from ..interfaces.remote_store import RemoteStoreInterface
from ..models.data_models import COLLECTIONS, UserData
from .error_handling import ErrorHandler, ErrorKind
from .logging_config import get_logger
from .periodic_timer import PeriodicTimer


COMPONENT = "backup"

logger = get_logger(COMPONENT)


def should_sync(last_sync: float, now: float, interval: float, forced: bool = False) -> bool:
    """
    Throttle decision.

    Args:
        last_sync: Epoch seconds of the last successful push (0 if never)
        now: Current epoch seconds
        interval: Minimum seconds between unforced pushes
        forced: Explicit user request

    Returns:
        True if a push should happen now
    """
    if forced:
        return True
    return now - last_sync >= interval


class BackupThrottler:
    """
    Remote backup with a persisted throttle marker.

    Usage:
        throttler = BackupThrottler(BACKUP_CONFIG, remote, local,
                                    state.snapshot, state.replace_collection)
        throttler.set_owner("user-123")
        await throttler.load_from_remote()
        throttler.start()
        ...
        await throttler.sync(forced=True)
    """

    def __init__(
        self,
        config: Dict[str, Any],
        remote_store: RemoteStoreInterface,
        local_store: KeyValueStoreInterface,
        snapshot_provider: Callable[[], UserData],
        apply_collection: Callable[[str, List[Any]], None],
        clock: Callable[[], float] = time.time,
        error_handler: Optional[ErrorHandler] = None,
    ):
        self.settings = BackupConfig(**config)
        self.remote = remote_store
        self.local = local_store
        self._snapshot_provider = snapshot_provider
        self._apply_collection = apply_collection
        self._clock = clock
        self.error_handler = error_handler or ErrorHandler()

        self._owner_id: Optional[str] = None
        self._has_loaded = False
        self._pushes_in_flight = 0
        self._trigger_task: Optional[asyncio.Task] = None
        self._check_timer = PeriodicTimer(
            self.settings.check_interval_seconds,
            self._periodic_check,
            name="backup-check",
            fire_immediately=False,
        )

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    @property
    def owner_id(self) -> Optional[str]:
        return self._owner_id

    @property
    def has_loaded(self) -> bool:
        return self._has_loaded

    def set_owner(self, owner_id: Optional[str]) -> None:
        """Set the signed-in owner. ``None`` (logout) resets the load flag."""
        if owner_id == self._owner_id:
            return
        if owner_id is None:
            logger.info("Owner signed out, backup paused")
        else:
            logger.info(f"Backup owner set to {owner_id}")
        self._owner_id = owner_id
        self._has_loaded = False

    # ------------------------------------------------------------------
    # Throttle marker
    # ------------------------------------------------------------------

    @property
    def last_sync_timestamp(self) -> float:
        """Epoch seconds of the last successful push, 0.0 if none or unreadable."""
        raw = self.local.get(self.settings.last_sync_key)
        if raw is None:
            return 0.0
        try:
            return float(raw)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring unreadable sync marker {raw!r}")
            return 0.0

    def should_sync_now(self, forced: bool = False) -> bool:
        return should_sync(
            self.last_sync_timestamp,
            self._clock(),
            self.settings.sync_interval_seconds,
            forced,
        )

    # ------------------------------------------------------------------
    # Remote operations
    # ------------------------------------------------------------------

    async def sync(self, forced: bool = False) -> bool:
        """
        Push a snapshot if the throttle allows it.

        An unforced call is skipped while another push is still running, since
        the marker it would check is not written yet.

        Returns:
            True if a push succeeded
        """
        if not self.settings.enabled or self._owner_id is None:
            return False
        if self._pushes_in_flight and not forced:
            logger.debug("Push already in flight, skipping unforced sync")
            return False
        if not self.should_sync_now(forced):
            logger.debug("Backup throttled")
            return False

        owner_id = self._owner_id
        self._pushes_in_flight += 1
        try:
            record = self._snapshot_provider().to_remote_record(owner_id)
            await self.remote.upsert(owner_id, record)
        except Exception as e:
            self.error_handler.record(COMPONENT, ErrorKind.TRANSIENT_IO,
                                      "Erro ao salvar na nuvem", e, owner_id=owner_id)
            return False
        finally:
            self._pushes_in_flight -= 1

        try:
            self.local.set(self.settings.last_sync_key, self._clock())
        except Exception as e:
            # The remote copy is fine; without a marker the next trigger pushes again
            self.error_handler.record(COMPONENT, ErrorKind.TRANSIENT_IO,
                                      "Backup saved but the sync marker could not be written",
                                      e, owner_id=owner_id)
            return False
        logger.info("☁️ Dados salvos na nuvem", owner_id=owner_id, forced=forced)
        return True

    async def load_from_remote(self) -> bool:
        """
        Replace local collections with the owner's remote record.

        Runs once per session. Collections missing from the record or not a
        well-formed list keep their local value. A fetch failure leaves the
        session unloaded so a later call can retry.

        Returns:
            True if the session is now loaded
        """
        if self._owner_id is None:
            return False
        if self._has_loaded:
            return True

        try:
            record = await self.remote.fetch(self._owner_id)
        except Exception as e:
            self.error_handler.record(COMPONENT, ErrorKind.TRANSIENT_IO,
                                      "Erro ao carregar da nuvem", e, owner_id=self._owner_id)
            return False

        if record:
            applied = self._apply_record(record)
            logger.info(f"☁️ Dados carregados da nuvem ({len(applied)} coleções)")
        else:
            logger.info("No remote record yet, keeping local data")

        self._has_loaded = True
        return True

    def _apply_record(self, record: Dict[str, Any]) -> List[str]:
        applied = []
        for name, (entity_cls, column) in COLLECTIONS.items():
            value = record.get(column)
            if value is None:
                continue
            if not isinstance(value, list):
                self.error_handler.record(COMPONENT, ErrorKind.MALFORMED_PAYLOAD,
                                          f"Remote '{column}' is not a list, keeping local",
                                          column=column)
                continue
            try:
                items = [entity_cls.from_dict(item) for item in value]
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                self.error_handler.record(COMPONENT, ErrorKind.MALFORMED_PAYLOAD,
                                          f"Remote '{column}' has malformed items, keeping local",
                                          e, column=column)
                continue
            self._apply_collection(name, items)
            applied.append(name)
        return applied

    async def delete_remote(self) -> bool:
        """
        Delete the owner's remote record and the local throttle marker.

        Returns:
            True if the remote record was deleted
        """
        if self._owner_id is None:
            return False
        try:
            await self.remote.delete(self._owner_id)
        except Exception as e:
            self.error_handler.record(COMPONENT, ErrorKind.TRANSIENT_IO,
                                      "Erro ao deletar dados da nuvem", e, owner_id=self._owner_id)
            return False
        self.local.remove(self.settings.last_sync_key)
        logger.info("☁️ Dados da nuvem removidos")
        return True

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    def notify_data_changed(self) -> Optional[asyncio.Task]:
        """Throttled push after a local change, once the session has loaded."""
        if self._owner_id is None or not self._has_loaded:
            return None
        return self._schedule_sync("data change")

    def notify_visible(self) -> Optional[asyncio.Task]:
        """Throttled push when the app comes back to the foreground."""
        if self._owner_id is None:
            return None
        return self._schedule_sync("visible")

    def _periodic_check(self) -> None:
        if self._owner_id is not None:
            self._schedule_sync("periodic check")

    def _schedule_sync(self, reason: str) -> Optional[asyncio.Task]:
        # One triggered push at a time; later triggers share it
        if self._trigger_task is not None and not self._trigger_task.done():
            logger.debug(f"Push already scheduled, {reason} trigger joins it")
            return self._trigger_task
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(f"No running loop, {reason} trigger ignored")
            return None
        logger.debug(f"Backup trigger: {reason}")
        self._trigger_task = loop.create_task(self.sync(forced=False))
        return self._trigger_task

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._check_timer.is_running

    def start(self) -> bool:
        """Start the periodic throttle check."""
        if not self.settings.enabled:
            logger.info("Cloud backup disabled by configuration")
            return False
        return self._check_timer.start()

    async def drain(self) -> None:
        """Wait for triggered pushes that are still running."""
        task = self._trigger_task
        if task is not None and not task.done():
            await asyncio.gather(task, return_exceptions=True)

    def stop(self) -> None:
        """Stop the periodic check and cancel outstanding pushes."""
        self._check_timer.stop()
        task, self._trigger_task = self._trigger_task, None
        if task is not None and not task.done():
            task.cancel()

    def get_status(self) -> Dict[str, Any]:
        last = self.last_sync_timestamp
        return {
            "enabled": self.settings.enabled,
            "owner_id": self._owner_id,
            "has_loaded": self._has_loaded,
            "last_sync": last or None,
            "next_sync_due": (last + self.settings.sync_interval_seconds) if last else None,
            "periodic_check_running": self.is_running,
            "push_scheduled": self._trigger_task is not None and not self._trigger_task.done(),
            "pushes_in_flight": self._pushes_in_flight,
        }
