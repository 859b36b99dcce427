"""
Shop state manager.

Owns the eight user collections, keeps each one persisted under its own key
in the local store and tells listeners about every change. The reminder
scheduler reads appointments from here and the backup throttler snapshots
and replaces whole collections through ``snapshot`` and
``replace_collection``.
"""

import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, Any, List, Optional

from ..interfaces.local_store import KeyValueStoreInterface
from ..models.data_models import (
    COLLECTIONS,
    Appointment,
    AppointmentStatus,
    AttendedDay,
    Barber,
    Bill,
    CutRecord,
    Fiado,
    FiadoEntry,
    MonthlyPlan,
    Service,
    Transaction,
    TransactionType,
    UserData,
)
from ..models.initial_data import default_barbers, default_services
from .logging_config import get_logger
from .reports import booked_times


logger = get_logger("state")


class SlotTakenError(ValueError):
    """The barber already has a non-cancelled appointment at that date and time."""

# Collection name -> local storage key
STORAGE_KEYS: Dict[str, str] = {
    "services": "barber-services",
    "barbers": "barber-barbers",
    "appointments": "barber-appointments",
    "cuts": "barber-cuts",
    "transactions": "barber-transactions",
    "bills": "barber-bills",
    "fiados": "barber-fiados",
    "monthly_plans": "barber-monthly-plans",
}

# Listener signature: (collection name, id of the touched item or None)
ChangeListener = Callable[[str, Optional[str]], None]


def new_id() -> str:
    return uuid.uuid4().hex[:16]


class ShopStateManager:
    """
    In-memory collections mirrored to a key-value store.

    Services and barbers fall back to the seed data when nothing is stored.
    Every other collection starts empty.
    """

    def __init__(self, local_store: KeyValueStoreInterface):
        self.local = local_store
        self._collections: Dict[str, List[Any]] = {}
        self._listeners: List[ChangeListener] = []
        self.load()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _defaults(self, name: str) -> List[Any]:
        if name == "services":
            return default_services()
        if name == "barbers":
            return default_barbers()
        return []

    def load(self) -> None:
        """(Re)load every collection from the local store."""
        for name, (entity_cls, _) in COLLECTIONS.items():
            raw = self.local.get(STORAGE_KEYS[name])
            if raw is None:
                self._collections[name] = self._defaults(name)
                continue
            try:
                self._collections[name] = [entity_cls.from_dict(item) for item in raw]
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Stored '{name}' is unreadable, using defaults: {e}")
                self._collections[name] = self._defaults(name)

    def _persist(self, name: str) -> None:
        self.local.set(STORAGE_KEYS[name], [item.to_dict() for item in self._collections[name]])

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _changed(self, name: str, item_id: Optional[str] = None) -> None:
        self._persist(name)
        for listener in list(self._listeners):
            try:
                listener(name, item_id)
            except Exception as e:
                logger.exception(f"State listener failed for '{name}': {e}")

    # ------------------------------------------------------------------
    # Generic collection access
    # ------------------------------------------------------------------

    def get(self, name: str) -> List[Any]:
        """Return a shallow copy of a collection."""
        if name not in self._collections:
            raise ValueError(f"Unknown collection '{name}'. Available: {list(COLLECTIONS.keys())}")
        return list(self._collections[name])

    def find(self, name: str, item_id: str) -> Optional[Any]:
        for item in self._collections[name]:
            if item.id == item_id:
                return item
        return None

    def _add(self, name: str, item: Any) -> Any:
        if not getattr(item, "id", None):
            item.id = new_id()
        self._collections[name].append(item)
        self._changed(name, item.id)
        return item

    def _update(self, name: str, item: Any) -> bool:
        items = self._collections[name]
        for index, existing in enumerate(items):
            if existing.id == item.id:
                items[index] = item
                self._changed(name, item.id)
                return True
        logger.warning(f"No {name} entry with id {item.id} to update")
        return False

    def _delete(self, name: str, item_id: str) -> bool:
        items = self._collections[name]
        kept = [item for item in items if item.id != item_id]
        if len(kept) == len(items):
            return False
        self._collections[name] = kept
        self._changed(name, item_id)
        return True

    def replace_collection(self, name: str, items: List[Any]) -> None:
        """Replace a whole collection (used when loading a remote backup)."""
        if name not in self._collections:
            raise ValueError(f"Unknown collection '{name}'. Available: {list(COLLECTIONS.keys())}")
        self._collections[name] = list(items)
        self._changed(name)

    def snapshot(self) -> UserData:
        return UserData(**{name: list(items) for name, items in self._collections.items()})

    def reset(self) -> None:
        """Clear every stored collection and restore the seed data."""
        for name in COLLECTIONS:
            self.local.remove(STORAGE_KEYS[name])
            self._collections[name] = self._defaults(name)
        for name in COLLECTIONS:
            self._changed(name)
        logger.info("Local data reset to defaults")

    # ------------------------------------------------------------------
    # Services and barbers
    # ------------------------------------------------------------------

    def get_services(self) -> List[Service]:
        return self.get("services")

    def add_service(self, service: Service) -> Service:
        return self._add("services", service)

    def update_service(self, service: Service) -> bool:
        return self._update("services", service)

    def delete_service(self, service_id: str) -> bool:
        return self._delete("services", service_id)

    def get_barbers(self) -> List[Barber]:
        return self.get("barbers")

    def add_barber(self, barber: Barber) -> Barber:
        return self._add("barbers", barber)

    def update_barber(self, barber: Barber) -> bool:
        return self._update("barbers", barber)

    def delete_barber(self, barber_id: str) -> bool:
        return self._delete("barbers", barber_id)

    # ------------------------------------------------------------------
    # Appointments
    # ------------------------------------------------------------------

    def get_appointments(self) -> List[Appointment]:
        return self.get("appointments")

    def _check_slot(self, appointment: Appointment) -> None:
        if appointment.status == AppointmentStatus.CANCELLED:
            return
        taken = booked_times(self._collections["appointments"], appointment.date,
                             appointment.barber_id, exclude_id=appointment.id or None)
        if appointment.time in taken:
            raise SlotTakenError(
                f"Barber {appointment.barber_id} is already booked at "
                f"{appointment.date} {appointment.time}"
            )

    def add_appointment(self, appointment: Appointment) -> Appointment:
        """
        Book an appointment.

        Raises:
            SlotTakenError: If the barber already has that date and time
        """
        self._check_slot(appointment)
        return self._add("appointments", appointment)

    def update_appointment(self, appointment: Appointment) -> bool:
        """Replace an appointment (reschedule, edit client or services)."""
        self._check_slot(appointment)
        return self._update("appointments", appointment)

    def update_appointment_status(self, appointment_id: str, status: AppointmentStatus) -> bool:
        appointment = self.find("appointments", appointment_id)
        if appointment is None:
            return False
        status = AppointmentStatus(status)
        if appointment.status == AppointmentStatus.CANCELLED and status != AppointmentStatus.CANCELLED:
            # Reinstating a cancelled booking needs its slot back
            self._check_slot(replace(appointment, status=status))
        appointment.status = status
        self._changed("appointments", appointment_id)
        return True

    def delete_appointment(self, appointment_id: str) -> bool:
        return self._delete("appointments", appointment_id)

    # ------------------------------------------------------------------
    # Cuts and cash flow
    # ------------------------------------------------------------------

    def get_cuts(self) -> List[CutRecord]:
        return self.get("cuts")

    def add_cut(self, cut: CutRecord) -> CutRecord:
        """Log a cut and book its total as income."""
        self._add("cuts", cut)
        self.add_transaction(Transaction(
            id=f"{new_id()}-auto",
            type=TransactionType.INCOME,
            category="Cortes",
            description=cut.client_name or "Corte",
            amount=cut.total,
            date=cut.date,
        ))
        return cut

    def update_cut(self, cut: CutRecord) -> bool:
        return self._update("cuts", cut)

    def delete_cut(self, cut_id: str) -> bool:
        return self._delete("cuts", cut_id)

    def get_transactions(self) -> List[Transaction]:
        return self.get("transactions")

    def add_transaction(self, transaction: Transaction) -> Transaction:
        return self._add("transactions", transaction)

    def update_transaction(self, transaction: Transaction) -> bool:
        return self._update("transactions", transaction)

    def delete_transaction(self, transaction_id: str) -> bool:
        return self._delete("transactions", transaction_id)

    # ------------------------------------------------------------------
    # Bills
    # ------------------------------------------------------------------

    def get_bills(self) -> List[Bill]:
        return self.get("bills")

    def add_bill(self, bill: Bill) -> Bill:
        return self._add("bills", bill)

    def update_bill(self, bill: Bill) -> bool:
        return self._update("bills", bill)

    def delete_bill(self, bill_id: str) -> bool:
        return self._delete("bills", bill_id)

    def pay_bill(self, bill_id: str) -> bool:
        """Toggle a bill between paid and unpaid."""
        bill = self.find("bills", bill_id)
        if bill is None:
            return False
        bill.paid = not bill.paid
        bill.paid_at = datetime.now().isoformat() if bill.paid else None
        self._changed("bills", bill_id)
        return True

    # ------------------------------------------------------------------
    # Fiados (client tabs)
    # ------------------------------------------------------------------

    def get_fiados(self) -> List[Fiado]:
        return self.get("fiados")

    def add_fiado(self, fiado: Fiado) -> Fiado:
        return self._add("fiados", fiado)

    def update_fiado(self, fiado: Fiado) -> bool:
        return self._update("fiados", fiado)

    def delete_fiado(self, fiado_id: str) -> bool:
        return self._delete("fiados", fiado_id)

    def add_fiado_entry(self, fiado_id: str, entry: FiadoEntry) -> Optional[FiadoEntry]:
        fiado = self.find("fiados", fiado_id)
        if fiado is None:
            return None
        if not entry.id:
            entry.id = new_id()
        fiado.entries.append(entry)
        self._changed("fiados", fiado_id)
        return entry

    def confirm_fiado_payment(self, fiado_id: str, entry_id: str) -> bool:
        fiado = self.find("fiados", fiado_id)
        if fiado is None:
            return False
        for entry in fiado.entries:
            if entry.id == entry_id:
                entry.paid = True
                entry.paid_at = datetime.now().isoformat()
                self._changed("fiados", fiado_id)
                return True
        return False

    def delete_fiado_entry(self, fiado_id: str, entry_id: str) -> bool:
        """Remove one entry; removing the last one deletes the whole tab."""
        fiado = self.find("fiados", fiado_id)
        if fiado is None:
            return False
        remaining = [e for e in fiado.entries if e.id != entry_id]
        if len(remaining) == len(fiado.entries):
            return False
        if not remaining:
            return self.delete_fiado(fiado_id)
        fiado.entries = remaining
        self._changed("fiados", fiado_id)
        return True

    # ------------------------------------------------------------------
    # Monthly plans
    # ------------------------------------------------------------------

    def get_monthly_plans(self) -> List[MonthlyPlan]:
        return self.get("monthly_plans")

    def add_monthly_plan(self, plan: MonthlyPlan) -> MonthlyPlan:
        return self._add("monthly_plans", plan)

    def update_monthly_plan(self, plan: MonthlyPlan) -> bool:
        return self._update("monthly_plans", plan)

    def delete_monthly_plan(self, plan_id: str) -> bool:
        return self._delete("monthly_plans", plan_id)

    def add_plan_attendance(self, plan_id: str, date: str, service_ids: List[str]) -> bool:
        if not service_ids:
            return False
        plan = self.find("monthly_plans", plan_id)
        if plan is None:
            return False
        plan.attended_days.append(AttendedDay(date=date, service_ids=list(service_ids)))
        self._changed("monthly_plans", plan_id)
        return True
