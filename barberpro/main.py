"""
Command-line interface for the barbershop framework.
"""

import asyncio
import argparse
import sys
import threading
from pathlib import Path

from .orchestrator import BarbershopOrchestrator
from .config import get_framework_config, print_config_summary
from .utils.logging_config import setup_logging


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="BarberPro - appointment reminders and cloud backup",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--owner', help='Owner id to back up for (overrides BARBERPRO_OWNER_ID)')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    run = subparsers.add_parser(
        'run',
        help='Run reminders and backup until interrupted'
    )
    run.add_argument('--date', help='Viewed date (YYYY-MM-DD, default: today)')
    run.add_argument('--barber', help='Selected barber id (default: first barber)')

    subparsers.add_parser(
        'sync',
        help='Push a backup now, ignoring the 24h throttle'
    )

    subparsers.add_parser(
        'pull',
        help='Load the cloud backup into local data'
    )

    reset = subparsers.add_parser(
        'reset',
        help='Restore local data to the defaults'
    )
    reset.add_argument('--remote', action='store_true', help='Also delete the cloud backup')
    reset.add_argument('--yes', action='store_true', help='Do not ask for confirmation')

    report = subparsers.add_parser(
        'report',
        help='Show the daily summary and the month figures'
    )
    report.add_argument('--date', help='Day to summarise (YYYY-MM-DD, default: today)')
    report.add_argument('--month', help='Month to analyse (YYYY-MM, default: current month)')
    report.add_argument('--barber', help='Barber id for the free slots (default: first barber)')

    subparsers.add_parser(
        'status',
        help='Show orchestrator status'
    )

    subparsers.add_parser(
        'config',
        help='Show configuration'
    )

    return parser


def _start_stdin_reader(queue: asyncio.Queue) -> None:
    """Feed stdin lines into the queue from a daemon thread (never blocks shutdown)."""
    loop = asyncio.get_running_loop()

    def _reader():
        for line in sys.stdin:
            loop.call_soon_threadsafe(queue.put_nowait, line)
        loop.call_soon_threadsafe(queue.put_nowait, "")

    threading.Thread(target=_reader, daemon=True, name="barberpro-stdin").start()


async def cmd_run(orchestrator: BarbershopOrchestrator, args):
    """Run until interrupted, reading single-letter commands from stdin."""
    print("\n" + "="*60)
    print("BarberPro")
    print("="*60 + "\n")

    if args.date:
        orchestrator.select_date(args.date)
    if args.barber:
        orchestrator.select_barber(args.barber)

    print("Commands: [d] dismiss alarm  [s] save now  [h] hide  [v] show  [q] quit\n")

    lines: asyncio.Queue = asyncio.Queue()
    _start_stdin_reader(lines)

    runner = asyncio.create_task(orchestrator.run_forever())
    try:
        while not runner.done():
            line = await lines.get()
            if not line:
                # stdin closed: keep running headless
                await runner
                break
            command = line.strip().lower()
            if command == 'd':
                if not orchestrator.dismiss_alarm():
                    print("No active alarm")
            elif command == 's':
                ok = await orchestrator.save_now()
                print("☁️ Salvo na nuvem" if ok else "⚠️  Backup failed (see log)")
            elif command == 'h':
                orchestrator.set_visible(False)
            elif command == 'v':
                orchestrator.set_visible(True)
            elif command == 'q':
                break
    finally:
        await orchestrator.shutdown()
        await runner


async def cmd_sync(orchestrator: BarbershopOrchestrator):
    """Forced push."""
    if orchestrator.throttler.owner_id is None:
        print("❌ No owner set (use --owner or BARBERPRO_OWNER_ID)")
        return
    ok = await orchestrator.save_now()
    print("✅ Backup saved" if ok else "❌ Backup failed")


async def cmd_pull(orchestrator: BarbershopOrchestrator):
    """Report the result of the login-time load."""
    if orchestrator.throttler.owner_id is None:
        print("❌ No owner set (use --owner or BARBERPRO_OWNER_ID)")
        return
    if orchestrator.throttler.has_loaded:
        print("✅ Local data replaced by the cloud backup where present")
    else:
        print("❌ Could not load the cloud backup")


async def cmd_reset(orchestrator: BarbershopOrchestrator, args):
    """Restore defaults, optionally deleting the cloud backup."""
    if not args.yes:
        scope = "local data AND the cloud backup" if args.remote else "local data"
        answer = input(f"This erases all {scope}. Type 'yes' to continue: ")
        if answer.strip().lower() != 'yes':
            print("Aborted")
            return
    result = await orchestrator.reset_all_data(delete_remote=args.remote)
    print("✅ Local data reset")
    if args.remote:
        print("✅ Cloud backup deleted" if result["remote_deleted"] else "❌ Cloud backup not deleted")


async def cmd_status(orchestrator: BarbershopOrchestrator):
    """Show orchestrator status."""
    print("\n" + "="*60)
    print("Orchestrator Status")
    print("="*60 + "\n")

    status = orchestrator.get_status()
    print(f"Initialized: {status['initialized']}")

    print(f"\nReminders:")
    for key, value in status['reminders'].items():
        print(f"  {key}: {value}")

    print(f"\nBackup:")
    for key, value in status['backup'].items():
        print(f"  {key}: {value}")

    print(f"\nProviders:")
    for key, value in status['providers'].items():
        print(f"  {key}: {value}")

    print(f"\nErrors:")
    for key, value in status['errors'].items():
        print(f"  {key}: {value}")
    print()


def _parse_month(value: str):
    try:
        year, month = (int(part) for part in value.split("-"))
    except ValueError:
        raise ValueError(f"Invalid month {value!r}, expected YYYY-MM")
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month {value!r}, expected YYYY-MM")
    return year, month


async def cmd_report(orchestrator: BarbershopOrchestrator, args):
    """Print the daily summary and the month figures."""
    year = month = None
    if args.month:
        try:
            year, month = _parse_month(args.month)
        except ValueError as e:
            print(f"❌ {e}")
            return
    if args.barber:
        orchestrator.select_barber(args.barber)

    daily = orchestrator.daily_report(args.date)
    monthly = orchestrator.monthly_report(year, month)

    print("\n" + "="*60)
    print(f"Dia {daily['date']}")
    print("="*60 + "\n")
    print(f"Faturamento: R$ {daily['earnings']:.2f}")
    print(f"Cortes: {daily['cuts']} ({daily['named_clients']} com nome)")
    print(f"Horários livres ({daily['barber_id']}): {len(daily['free_slots'])}")
    if daily["free_slots"]:
        print("  " + " ".join(daily["free_slots"]))

    print("\n" + "="*60)
    print(f"Mês {monthly['year']}-{monthly['month']:02d}")
    print("="*60 + "\n")
    print(f"Faturamento: R$ {monthly['revenue']:.2f} em {monthly['cuts']} cortes")
    print(f"Entradas: R$ {monthly['income']:.2f}")
    print(f"Saídas: R$ {monthly['expenses']:.2f}")
    print(f"Lucro: R$ {monthly['net_profit']:.2f}")
    print(f"Fiado em aberto: R$ {monthly['fiados_pending']:.2f}")
    print(f"Contas a pagar: R$ {monthly['bills_pending']:.2f} ({len(monthly['overdue_bills'])} vencidas)")
    if monthly["plans"]:
        print("\nMensalistas:")
        for client, total in monthly["plans"].items():
            print(f"  {client}: R$ {total:.2f}")
    print()


def cmd_config():
    """Show configuration."""
    print("\n" + "="*60)
    print("Configuration")
    print("="*60 + "\n")
    print_config_summary()


async def async_main():
    """Async main function."""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    # Handle config command (doesn't need orchestrator)
    if args.command == 'config':
        cmd_config()
        return

    config = get_framework_config()
    if args.owner:
        config["owner_id"] = args.owner

    orchestrator = BarbershopOrchestrator(config)

    # Only the long-running command needs the timers
    start_background = args.command == 'run'
    if not await orchestrator.initialize(start_background=start_background):
        print("❌ Failed to initialize orchestrator")
        return

    try:
        if args.command == 'run':
            await cmd_run(orchestrator, args)
        elif args.command == 'sync':
            await cmd_sync(orchestrator)
        elif args.command == 'pull':
            await cmd_pull(orchestrator)
        elif args.command == 'reset':
            await cmd_reset(orchestrator, args)
        elif args.command == 'report':
            await cmd_report(orchestrator, args)
        elif args.command == 'status':
            await cmd_status(orchestrator)
        else:
            print(f"Unknown command: {args.command}")
            parser.print_help()
    finally:
        await orchestrator.shutdown()


def main():
    """Synchronous entry point."""
    logging_config = get_framework_config()["logging"]
    try:
        setup_logging(
            level=logging_config["level"],
            log_file=Path(logging_config["log_file"]) if logging_config["log_file"] else None,
            use_colors=logging_config["use_colors"],
            use_emojis=logging_config["use_emojis"],
        )
    except Exception as e:
        print(f"⚠️  Failed to setup logging: {e}")

    try:
        asyncio.run(async_main())
    except KeyboardInterrupt:
        print("\n⚠️  Interrupted by user")
    except Exception as e:
        print(f"\n❌ Fatal error: {e}")
        import traceback
        traceback.print_exc()


if __name__ == '__main__':
    main()
