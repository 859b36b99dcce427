"""
Tests for the orchestrator wiring (in-memory providers, fake clocks).
"""

import asyncio
import pytest

from types import SimpleNamespace

from barberpro.main import cmd_report
from barberpro.models.data_models import (
    AppointmentStatus,
    AttendedDay,
    Bill,
    CutRecord,
    Fiado,
    FiadoEntry,
    MonthlyPlan,
    Service,
)
from barberpro.models.initial_data import default_services
from barberpro.orchestrator import BarbershopOrchestrator

from conftest import TODAY


OWNER = "owner-1"


@pytest.fixture
def orchestrator(testing_config, clock, epoch_clock):
    return BarbershopOrchestrator(testing_config, clock=clock, wall_clock=epoch_clock)


async def ready(orchestrator, owner=None):
    assert await orchestrator.initialize(start_background=False) is True
    if owner:
        assert await orchestrator.login(owner) is True
    return orchestrator


class TestInitialization:

    @pytest.mark.asyncio
    async def test_initialize_without_background(self, orchestrator):
        await ready(orchestrator)

        assert orchestrator.is_initialized
        assert orchestrator.scheduler.selected_date == TODAY
        assert orchestrator.scheduler.barber_id == "1"
        assert not orchestrator.scheduler.is_running
        assert not orchestrator.throttler.is_running
        assert [s.name for s in orchestrator.state.get_services()] == [s.name for s in default_services()]

    def test_methods_require_initialize(self, orchestrator):
        with pytest.raises(RuntimeError, match="not initialized"):
            orchestrator.select_date(TODAY)
        with pytest.raises(RuntimeError):
            orchestrator.dismiss_alarm()

    @pytest.mark.asyncio
    async def test_bad_provider_fails_initialize(self, testing_config, clock, epoch_clock):
        testing_config["local_store"] = {"provider": "floppy", "config": {}}
        orchestrator = BarbershopOrchestrator(testing_config, clock=clock, wall_clock=epoch_clock)

        assert await orchestrator.initialize(start_background=False) is False
        assert orchestrator.get_status()["errors"]["by_severity"] == {"fatal": 1}

    @pytest.mark.asyncio
    async def test_configured_owner_logs_in(self, testing_config, clock, epoch_clock):
        testing_config["owner_id"] = OWNER
        orchestrator = BarbershopOrchestrator(testing_config, clock=clock, wall_clock=epoch_clock)

        await ready(orchestrator)

        assert orchestrator.throttler.owner_id == OWNER
        assert orchestrator.throttler.has_loaded


class TestSession:

    @pytest.mark.asyncio
    async def test_login_loads_remote_backup(self, orchestrator):
        await ready(orchestrator)
        orchestrator.remote_store.records[OWNER] = {
            "user_id": OWNER,
            "services": [Service("9", "Corte Kids", 30).to_dict()],
        }

        assert await orchestrator.login(OWNER) is True

        assert [s.name for s in orchestrator.state.get_services()] == ["Corte Kids"]
        # Loading never pushes the data straight back
        await orchestrator.throttler.drain()
        assert orchestrator.remote_store.upsert_count == 0

    @pytest.mark.asyncio
    async def test_logout_pauses_backup(self, orchestrator, make_appointment):
        await ready(orchestrator, OWNER)
        orchestrator.logout()

        orchestrator.state.add_appointment(make_appointment())
        await orchestrator.throttler.drain()

        assert orchestrator.remote_store.upsert_count == 0
        assert not orchestrator.throttler.has_loaded


class TestChangeWiring:

    @pytest.mark.asyncio
    async def test_change_pushes_once_per_interval(self, orchestrator, make_appointment, epoch_clock):
        await ready(orchestrator, OWNER)

        orchestrator.state.add_appointment(make_appointment())
        await orchestrator.throttler.drain()
        orchestrator.state.add_appointment(make_appointment(time="10:30"))
        await orchestrator.throttler.drain()

        assert orchestrator.remote_store.upsert_count == 1
        assert orchestrator.local_store.get("barber-last-cloud-sync") == epoch_clock.now
        assert len(orchestrator.remote_store.records[OWNER]["appointments"]) == 1

    @pytest.mark.asyncio
    async def test_status_change_silences_alarm(self, orchestrator, make_appointment):
        await ready(orchestrator)
        appointment = orchestrator.state.add_appointment(make_appointment(time="10:05"))

        alerts = orchestrator.scheduler.check_reminders()
        assert [a.appointment_id for a in alerts] == [appointment.id]
        assert orchestrator.scheduler.alarm_ringing

        orchestrator.state.update_appointment_status(appointment.id, AppointmentStatus.COMPLETED)

        assert orchestrator.scheduler.active_alert is None
        assert not orchestrator.scheduler.alarm_ringing
        assert orchestrator.audio.dismissals == 1

    @pytest.mark.asyncio
    async def test_unrelated_change_keeps_alarm(self, orchestrator, make_appointment):
        await ready(orchestrator)
        due = orchestrator.state.add_appointment(make_appointment(time="10:05"))
        other = orchestrator.state.add_appointment(make_appointment(time="15:00"))
        orchestrator.scheduler.check_reminders()

        orchestrator.state.update_appointment_status(other.id, AppointmentStatus.CANCELLED)

        assert orchestrator.scheduler.active_alert.appointment_id == due.id
        orchestrator.dismiss_alarm()
        assert not orchestrator.scheduler.alarm_ringing

    @pytest.mark.asyncio
    async def test_deleted_appointment_silences_alarm(self, orchestrator, make_appointment):
        await ready(orchestrator)
        appointment = orchestrator.state.add_appointment(make_appointment(time="10:05"))
        orchestrator.scheduler.check_reminders()

        orchestrator.state.delete_appointment(appointment.id)

        assert orchestrator.scheduler.active_alert is None
        # Still notified for the day
        assert appointment.id in orchestrator.scheduler.notified_ids


class TestActions:

    @pytest.mark.asyncio
    async def test_save_now_ignores_throttle(self, orchestrator):
        await ready(orchestrator, OWNER)

        assert await orchestrator.save_now() is True
        assert await orchestrator.save_now() is True
        assert orchestrator.remote_store.upsert_count == 2

    @pytest.mark.asyncio
    async def test_save_now_needs_owner(self, orchestrator):
        await ready(orchestrator)
        assert await orchestrator.save_now() is False

    @pytest.mark.asyncio
    async def test_foreground_triggers_backup(self, orchestrator):
        await ready(orchestrator, OWNER)

        assert orchestrator.set_visible(False) is None
        task = orchestrator.set_visible(True)
        assert task is not None
        assert await task is True
        assert orchestrator.set_visible(True) is None

    @pytest.mark.asyncio
    async def test_reset_local_only(self, orchestrator):
        await ready(orchestrator)
        orchestrator.state.add_service(Service("", "Corte Kids", 30))

        result = await orchestrator.reset_all_data()

        assert result == {"local_reset": True, "remote_deleted": False}
        assert len(orchestrator.state.get_services()) == len(default_services())

    @pytest.mark.asyncio
    async def test_reset_with_remote(self, orchestrator):
        await ready(orchestrator, OWNER)
        await orchestrator.save_now()
        assert OWNER in orchestrator.remote_store.records

        result = await orchestrator.reset_all_data(delete_remote=True)
        await orchestrator.throttler.drain()

        assert result == {"local_reset": True, "remote_deleted": True}
        # The reset data is the next backup
        record = orchestrator.remote_store.records[OWNER]
        assert [s["name"] for s in record["services"]] == [s.name for s in default_services()]


class TestReports:

    async def stock(self, orchestrator, make_appointment):
        await ready(orchestrator)
        state = orchestrator.state
        state.add_appointment(make_appointment(time="09:00"))
        state.add_cut(CutRecord(id="c1", barber_id="1", date=TODAY, services=["1", "2"], total=60, client_name="Pedro"))
        state.add_cut(CutRecord(id="c2", barber_id="1", date="2026-10-02", services=["1"], total=35))
        state.add_fiado(Fiado(id="f1", client_name="Zé", entries=[
            FiadoEntry(id="e1", amount=35, description="Corte"),
            FiadoEntry(id="e2", amount=25, description="Barba", paid=True),
        ]))
        state.add_bill(Bill(id="b1", description="Aluguel", amount=800, due_date="2026-10-10"))
        state.add_bill(Bill(id="b2", description="Luz", amount=150, due_date="2026-10-30"))
        state.add_monthly_plan(MonthlyPlan(id="p1", client_name="Caio", monthly_price=120))
        state.add_monthly_plan(MonthlyPlan(
            id="p2", client_name="Bia", monthly_price=0,
            attended_days=[AttendedDay(date="2026-10-05", service_ids=["1"])],
        ))
        return orchestrator

    @pytest.mark.asyncio
    async def test_daily_report(self, orchestrator, make_appointment):
        await self.stock(orchestrator, make_appointment)

        report = orchestrator.daily_report()

        assert report["date"] == TODAY
        assert report["earnings"] == 60
        assert report["cuts"] == 1
        assert report["barber_id"] == "1"
        assert "09:00" not in report["free_slots"]
        assert len(report["free_slots"]) == 34

    @pytest.mark.asyncio
    async def test_monthly_report(self, orchestrator, make_appointment):
        await self.stock(orchestrator, make_appointment)

        report = orchestrator.monthly_report()

        assert (report["year"], report["month"]) == (2026, 10)
        assert report["revenue"] == 95
        assert report["income"] == 95
        assert report["fiados_pending"] == 35
        assert report["bills_pending"] == 950
        assert report["overdue_bills"] == ["b1"]
        assert report["plans"] == {"Caio": 120, "Bia": 35}

    @pytest.mark.asyncio
    async def test_monthly_report_other_month(self, orchestrator, make_appointment):
        await self.stock(orchestrator, make_appointment)

        report = orchestrator.monthly_report(2026, 9)

        assert report["revenue"] == 0
        assert report["plans"] == {"Caio": 120, "Bia": 0}

    @pytest.mark.asyncio
    async def test_report_command(self, orchestrator, make_appointment, capsys):
        await self.stock(orchestrator, make_appointment)

        await cmd_report(orchestrator, SimpleNamespace(date=None, month="2026-10", barber=None))

        out = capsys.readouterr().out
        assert "Faturamento: R$ 60.00" in out
        assert "Mês 2026-10" in out
        assert "Caio: R$ 120.00" in out
        assert "(1 vencidas)" in out

    @pytest.mark.asyncio
    async def test_report_command_rejects_bad_month(self, orchestrator, capsys):
        await ready(orchestrator)

        await cmd_report(orchestrator, SimpleNamespace(date=None, month="outubro", barber=None))

        assert "Invalid month" in capsys.readouterr().out


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_background_start_and_shutdown(self, orchestrator):
        assert await orchestrator.initialize() is True
        status = orchestrator.get_status()
        assert status["background_running"] is True
        assert status["reminders"]["running"] is True
        assert status["backup"]["periodic_check_running"] is True

        await orchestrator.shutdown()
        assert not orchestrator.scheduler.is_running
        assert not orchestrator.throttler.is_running

        # Idempotent
        await orchestrator.shutdown()

    @pytest.mark.asyncio
    async def test_run_forever_returns_on_shutdown(self, orchestrator):
        await ready(orchestrator)
        runner = asyncio.create_task(orchestrator.run_forever())
        await asyncio.sleep(0)

        await orchestrator.shutdown()

        await asyncio.wait_for(runner, timeout=1)

    @pytest.mark.asyncio
    async def test_status_lists_providers(self, orchestrator):
        await ready(orchestrator)
        providers = orchestrator.get_status()["providers"]
        assert providers == {
            "notification": "NullNotificationProvider",
            "audio": "NullAudioProvider",
            "remote_store": "InMemoryRemoteStore",
            "local_store": "MemoryKeyValueStore",
        }
