"""
BarberPro - background services for a barbershop management app.

This framework provides:
- Appointment reminders (chime, banner and desktop notification 5 minutes ahead)
- Throttled cloud backup of the shop data (Supabase, at most once per 24h)
- Local persistence of services, barbers, appointments, cuts, cash flow,
  bills, client tabs and monthly plans

Usage:
    from barberpro.orchestrator import BarbershopOrchestrator
    from barberpro.config import get_framework_config

    config = get_framework_config()
    orchestrator = BarbershopOrchestrator(config)
    await orchestrator.initialize()
    await orchestrator.run_forever()
"""

from .orchestrator import BarbershopOrchestrator
from .factory import ProviderFactory
from .config import get_framework_config
from . import interfaces
from . import models
from . import providers

__version__ = "1.0.0"

__all__ = [
    'BarbershopOrchestrator',
    'ProviderFactory',
    'get_framework_config',
    'interfaces',
    'models',
    'providers'
]
