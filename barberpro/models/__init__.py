"""
Data models for the barbershop framework.
"""

from .data_models import (
    AppointmentStatus,
    TransactionType,
    Service,
    Barber,
    Appointment,
    CutRecord,
    Transaction,
    Bill,
    FiadoEntry,
    Fiado,
    AttendedDay,
    MonthlyPlan,
    UserData,
    ReminderAlert,
    COLLECTIONS,
)
from .initial_data import default_services, default_barbers, TIME_SLOTS

__all__ = [
    'AppointmentStatus',
    'TransactionType',
    'Service',
    'Barber',
    'Appointment',
    'CutRecord',
    'Transaction',
    'Bill',
    'FiadoEntry',
    'Fiado',
    'AttendedDay',
    'MonthlyPlan',
    'UserData',
    'ReminderAlert',
    'COLLECTIONS',
    'default_services',
    'default_barbers',
    'TIME_SLOTS',
]
