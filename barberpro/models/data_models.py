"""
Common data structures for the barbershop framework.

Entities serialise to camelCase dictionaries so local files and the remote
``user_data`` record stay readable by every client of the same account.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
from datetime import date, datetime, time
from enum import Enum


class AppointmentStatus(str, Enum):
    """Enum for appointment statuses."""
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class TransactionType(str, Enum):
    """Enum for cash flow transaction types."""
    INCOME = "income"
    EXPENSE = "expense"


def _now_iso() -> str:
    return datetime.now().isoformat()


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


@dataclass
class Service:
    """A priced service offered by the shop (haircut, beard, ...)."""
    id: str
    name: str
    price: float
    icon: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Service":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            price=float(data["price"]),
            icon=data.get("icon", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "price": self.price, "icon": self.icon}


@dataclass
class Barber:
    """A staff member who can take appointments."""
    id: str
    name: str
    avatar: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Barber":
        return cls(id=str(data["id"]), name=data["name"], avatar=data.get("avatar"))

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({"id": self.id, "name": self.name, "avatar": self.avatar})


@dataclass
class Appointment:
    """A booked time slot for a client with one barber."""
    id: str
    client_name: str
    client_phone: str
    barber_id: str
    date: str   # YYYY-MM-DD
    time: str   # HH:MM
    services: List[str] = field(default_factory=list)
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Appointment":
        return cls(
            id=str(data["id"]),
            client_name=data["clientName"],
            client_phone=data.get("clientPhone", ""),
            barber_id=str(data["barberId"]),
            date=data["date"],
            time=data["time"],
            services=list(data.get("services", [])),
            status=AppointmentStatus(data.get("status", "scheduled")),
            notes=data.get("notes"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "clientName": self.client_name,
            "clientPhone": self.client_phone,
            "barberId": self.barber_id,
            "date": self.date,
            "time": self.time,
            "services": list(self.services),
            "status": self.status.value,
            "notes": self.notes,
        })

    def start_datetime(self) -> datetime:
        """Combine date and time-of-day into a naive local datetime."""
        day = date.fromisoformat(self.date)
        hours, minutes = (int(part) for part in self.time.split(":")[:2])
        return datetime.combine(day, time(hours, minutes))


@dataclass
class CutRecord:
    """A walk-in cut logged at the chair."""
    id: str
    barber_id: str
    date: str
    services: List[str]
    total: float
    client_name: Optional[str] = None
    created_at: str = field(default_factory=_now_iso)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CutRecord":
        return cls(
            id=str(data["id"]),
            barber_id=str(data["barberId"]),
            date=data["date"],
            services=list(data.get("services", [])),
            total=float(data["total"]),
            client_name=data.get("clientName"),
            created_at=data.get("createdAt") or _now_iso(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "barberId": self.barber_id,
            "date": self.date,
            "services": list(self.services),
            "total": self.total,
            "clientName": self.client_name,
            "createdAt": self.created_at,
        })


@dataclass
class Transaction:
    """A cash flow entry."""
    id: str
    type: TransactionType
    category: str
    description: str
    amount: float
    date: str
    created_at: str = field(default_factory=_now_iso)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        return cls(
            id=str(data["id"]),
            type=TransactionType(data["type"]),
            category=data.get("category", ""),
            description=data.get("description", ""),
            amount=float(data["amount"]),
            date=data["date"],
            created_at=data.get("createdAt") or _now_iso(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "category": self.category,
            "description": self.description,
            "amount": self.amount,
            "date": self.date,
            "createdAt": self.created_at,
        }


@dataclass
class Bill:
    """A bill the shop has to pay."""
    id: str
    description: str
    amount: float
    due_date: str
    paid: bool = False
    paid_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Bill":
        return cls(
            id=str(data["id"]),
            description=data.get("description", ""),
            amount=float(data["amount"]),
            due_date=data["dueDate"],
            paid=bool(data.get("paid", False)),
            paid_at=data.get("paidAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "description": self.description,
            "amount": self.amount,
            "dueDate": self.due_date,
            "paid": self.paid,
            "paidAt": self.paid_at,
        })


@dataclass
class FiadoEntry:
    """A single charge on a client's tab."""
    id: str
    amount: float
    description: str
    service_ids: Optional[List[str]] = None
    created_at: str = field(default_factory=_now_iso)
    paid: bool = False
    paid_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FiadoEntry":
        service_ids = data.get("serviceIds")
        return cls(
            id=str(data["id"]),
            amount=float(data["amount"]),
            description=data.get("description", ""),
            service_ids=list(service_ids) if service_ids is not None else None,
            created_at=data.get("createdAt") or _now_iso(),
            paid=bool(data.get("paid", False)),
            paid_at=data.get("paidAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "amount": self.amount,
            "description": self.description,
            "serviceIds": list(self.service_ids) if self.service_ids is not None else None,
            "createdAt": self.created_at,
            "paid": self.paid,
            "paidAt": self.paid_at,
        })


@dataclass
class Fiado:
    """A client's running tab ("fiado")."""
    id: str
    client_name: str
    entries: List[FiadoEntry] = field(default_factory=list)
    client_phone: Optional[str] = None
    created_at: str = field(default_factory=_now_iso)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Fiado":
        return cls(
            id=str(data["id"]),
            client_name=data["clientName"],
            entries=[FiadoEntry.from_dict(e) for e in data.get("entries", [])],
            client_phone=data.get("clientPhone"),
            created_at=data.get("createdAt") or _now_iso(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "clientName": self.client_name,
            "clientPhone": self.client_phone,
            "entries": [e.to_dict() for e in self.entries],
            "createdAt": self.created_at,
        })


@dataclass
class AttendedDay:
    """A visit counted against a monthly plan."""
    date: str
    service_ids: List[str]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AttendedDay":
        return cls(date=data["date"], service_ids=list(data.get("serviceIds", [])))

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "serviceIds": list(self.service_ids)}


@dataclass
class MonthlyPlan:
    """A recurring subscription ("mensalidade") for a client."""
    id: str
    client_name: str
    monthly_price: float
    allowed_days: List[int] = field(default_factory=list)  # 0 = Sunday .. 6 = Saturday
    attended_days: List[AttendedDay] = field(default_factory=list)
    client_phone: Optional[str] = None
    discount_percentage: Optional[float] = None
    created_at: str = field(default_factory=_now_iso)
    active: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MonthlyPlan":
        discount = data.get("discountPercentage")
        return cls(
            id=str(data["id"]),
            client_name=data["clientName"],
            monthly_price=float(data.get("monthlyPrice", 0)),
            allowed_days=[int(d) for d in data.get("allowedDays", [])],
            attended_days=[AttendedDay.from_dict(a) for a in data.get("attendedDays", [])],
            client_phone=data.get("clientPhone"),
            discount_percentage=float(discount) if discount is not None else None,
            created_at=data.get("createdAt") or _now_iso(),
            active=bool(data.get("active", True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "clientName": self.client_name,
            "clientPhone": self.client_phone,
            "monthlyPrice": self.monthly_price,
            "discountPercentage": self.discount_percentage,
            "allowedDays": list(self.allowed_days),
            "attendedDays": [a.to_dict() for a in self.attended_days],
            "createdAt": self.created_at,
            "active": self.active,
        })


# Collection name -> (entity class, remote column)
COLLECTIONS: Dict[str, tuple] = {
    "services": (Service, "services"),
    "barbers": (Barber, "barbers"),
    "appointments": (Appointment, "appointments"),
    "cuts": (CutRecord, "cuts"),
    "transactions": (Transaction, "transactions"),
    "bills": (Bill, "bills"),
    "fiados": (Fiado, "fiados"),
    "monthly_plans": (MonthlyPlan, "monthly_plans"),
}


@dataclass
class UserData:
    """Snapshot of every user-owned collection."""
    services: List[Service] = field(default_factory=list)
    barbers: List[Barber] = field(default_factory=list)
    appointments: List[Appointment] = field(default_factory=list)
    cuts: List[CutRecord] = field(default_factory=list)
    transactions: List[Transaction] = field(default_factory=list)
    bills: List[Bill] = field(default_factory=list)
    fiados: List[Fiado] = field(default_factory=list)
    monthly_plans: List[MonthlyPlan] = field(default_factory=list)

    def to_remote_record(self, owner_id: str) -> Dict[str, Any]:
        """Build the upsert payload for the remote ``user_data`` table."""
        record: Dict[str, Any] = {"user_id": owner_id}
        for name, (_, column) in COLLECTIONS.items():
            record[column] = [item.to_dict() for item in getattr(self, name)]
        return record


@dataclass
class ReminderAlert:
    """An appointment reminder that has fired."""
    appointment_id: str
    client_name: str
    time: str
    minutes_until: float
    fired_at: datetime = field(default_factory=datetime.now)

    @property
    def title(self) -> str:
        return "⏰ Cliente chegando em 5 minutos!"

    @property
    def body(self) -> str:
        return f"{self.client_name} às {self.time}"

    def __str__(self) -> str:
        return f"{self.client_name} às {self.time} - em {self.minutes_until:.0f} minutos!"
