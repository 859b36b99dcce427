"""
Read-only summaries over the shop collections.
"""

from collections import Counter
from datetime import date
from typing import Dict, Any, Iterable, List, Optional, Set

from ..models.data_models import (
    Appointment,
    AppointmentStatus,
    Bill,
    CutRecord,
    Fiado,
    MonthlyPlan,
    Service,
    Transaction,
    TransactionType,
)
from ..models.initial_data import TIME_SLOTS


WEEKDAY_NAMES = ['Dom', 'Seg', 'Ter', 'Qua', 'Qui', 'Sex', 'Sáb']


def _in_month(iso_date: str, year: int, month: int) -> bool:
    try:
        day = date.fromisoformat(iso_date[:10])
    except ValueError:
        return False
    return day.year == year and day.month == month


def _sunday_first_weekday(iso_date: str) -> int:
    # date.weekday() is Monday=0; the shop counts Sunday=0
    return (date.fromisoformat(iso_date[:10]).weekday() + 1) % 7


def daily_summary(cuts: Iterable[CutRecord], day: str) -> Dict[str, Any]:
    """Earnings, cut count, named clients and service counts for one day."""
    day_cuts = [cut for cut in cuts if cut.date == day]
    service_count = Counter(service_id for cut in day_cuts for service_id in cut.services)
    return {
        "date": day,
        "earnings": sum(cut.total for cut in day_cuts),
        "cuts": len(day_cuts),
        "named_clients": sum(1 for cut in day_cuts if cut.client_name),
        "service_count": dict(service_count),
    }


def monthly_analysis(
    cuts: Iterable[CutRecord],
    transactions: Iterable[Transaction],
    appointments: Iterable[Appointment],
    year: int,
    month: int,
) -> Dict[str, Any]:
    month_cuts = [c for c in cuts if _in_month(c.date, year, month)]
    month_transactions = [t for t in transactions if _in_month(t.date, year, month)]
    month_appointments = [a for a in appointments if _in_month(a.date, year, month)]

    income = sum(t.amount for t in month_transactions if t.type == TransactionType.INCOME)
    expenses = sum(t.amount for t in month_transactions if t.type == TransactionType.EXPENSE)

    day_revenue = {day: 0.0 for day in range(7)}
    for cut in month_cuts:
        day_revenue[_sunday_first_weekday(cut.date)] += cut.total

    status_count = {status.value: 0 for status in AppointmentStatus}
    for appointment in month_appointments:
        status_count[appointment.status.value] += 1

    return {
        "year": year,
        "month": month,
        "revenue": sum(c.total for c in month_cuts),
        "cuts": len(month_cuts),
        "income": income,
        "expenses": expenses,
        "net_profit": income - expenses,
        "service_count": dict(Counter(s for c in month_cuts for s in c.services)),
        "day_revenue": day_revenue,
        "appointment_status": status_count,
    }


def fiado_pending(fiado: Fiado) -> float:
    return sum(e.amount for e in fiado.entries if not e.paid)


def fiado_paid(fiado: Fiado) -> float:
    return sum(e.amount for e in fiado.entries if e.paid)


def total_pending(fiados: Iterable[Fiado]) -> float:
    """Outstanding amount across every client tab."""
    return sum(fiado_pending(f) for f in fiados)


def bills_pending(bills: Iterable[Bill]) -> float:
    return sum(b.amount for b in bills if not b.paid)


def overdue_bills(bills: Iterable[Bill], today: Optional[date] = None) -> List[Bill]:
    today = today or date.today()
    return [b for b in bills if not b.paid and date.fromisoformat(b.due_date[:10]) < today]


def plan_usage_total(
    plan: MonthlyPlan,
    services: Iterable[Service],
    year: int,
    month: int,
) -> float:
    """
    Value of the services a plan client used in a month, after the plan discount.

    Unknown service ids count as zero.
    """
    prices = {s.id: s.price for s in services}
    total = 0.0
    for attendance in plan.attended_days:
        if _in_month(attendance.date, year, month):
            total += sum(prices.get(service_id, 0.0) for service_id in attendance.service_ids)
    if plan.discount_percentage:
        total *= 1 - plan.discount_percentage / 100
    return total


def plan_monthly_total(
    plan: MonthlyPlan,
    services: Iterable[Service],
    year: int,
    month: int,
) -> float:
    """Amount owed for the month: the fixed price when set, otherwise the discounted usage."""
    if plan.monthly_price > 0:
        return plan.monthly_price
    return plan_usage_total(plan, services, year, month)


def booked_times(
    appointments: Iterable[Appointment],
    day: str,
    barber_id: str,
    exclude_id: Optional[str] = None,
) -> Set[str]:
    """Times a barber is booked on a day. Cancelled appointments free their slot."""
    return {
        a.time for a in appointments
        if a.date == day
        and a.barber_id == barber_id
        and a.status != AppointmentStatus.CANCELLED
        and a.id != exclude_id
    }


def available_time_slots(
    appointments: Iterable[Appointment],
    day: str,
    barber_id: str,
) -> List[str]:
    """Half-hour slots still free for a barber on a day."""
    taken = booked_times(appointments, day, barber_id)
    return [slot for slot in TIME_SLOTS if slot not in taken]
