"""
Seed data used on first run and after a full reset.
"""

from typing import List

from .data_models import Service, Barber


def default_services() -> List[Service]:
    return [
        Service(id="1", name="Cabelo", price=35, icon="✂️"),
        Service(id="2", name="Barba", price=25, icon="🧔"),
        Service(id="3", name="Sobrancelha", price=15, icon="👁️"),
        Service(id="4", name="Luzes", price=80, icon="💇"),
        Service(id="5", name="Pigmentação", price=60, icon="🎨"),
        Service(id="6", name="Relaxamento", price=50, icon="💆"),
    ]


def default_barbers() -> List[Barber]:
    return [Barber(id="1", name="Você")]


# Half-hour booking grid, 06:00 through 23:00
TIME_SLOTS: List[str] = [
    f"{hour:02d}:{minute:02d}"
    for hour in range(6, 24)
    for minute in (0, 30)
    if not (hour == 23 and minute == 30)
]
