"""One Line A Day CLI."""

import asyncio
import json
import logging
import sys

import click
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from .adapters.apscheduler_reminder import APSchedulerReminder
from .adapters.file_kv import FileKeyValueStore
from .config import Config, load_config
from .core.dates import format_entry_date
from .core.heatmap import Heatmap
from .service import JournalService, LoadState
from .storage import EntryStore, PersistenceError, SettingsStore

logger = logging.getLogger(__name__)


def create_service(config: Config, scheduler: AsyncIOScheduler | None = None, notify=None) -> JournalService:
    """Wire the service to file storage and an APScheduler reminder."""
    kv = FileKeyValueStore(config.resolve_data_dir())
    if scheduler is None:
        scheduler = _make_scheduler(config)

    async def noop():
        pass

    return JournalService(
        entry_store=EntryStore(kv),
        settings_store=SettingsStore(kv),
        reminders=APSchedulerReminder(scheduler, notify or noop),
    )


def _make_scheduler(config: Config) -> AsyncIOScheduler:
    if config.timezone:
        return AsyncIOScheduler(timezone=config.timezone)
    return AsyncIOScheduler()


async def _started(config: Config) -> JournalService:
    service = create_service(config)
    if await service.start(as_of=config.now().date()) is LoadState.FAILED:
        click.echo(f"Error: {service.error}", err=True)
        sys.exit(1)
    return service


def _run(coro):
    """Run a coroutine, turning storage failures into a clean exit."""
    try:
        return asyncio.run(coro)
    except (PersistenceError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def render_heatmap(heatmap: Heatmap) -> str:
    """Render the heatmap as seven text rows under a month label row."""
    width = len(heatmap.weeks) * 2
    header = [" "] * width
    for label in heatmap.month_labels:
        col = label.week_index * 2
        for i, ch in enumerate(label.label):
            if col + i < width:
                header[col + i] = ch
    lines = ["".join(header).rstrip()]

    for row in range(7):
        cells = []
        for week in heatmap.weeks:
            if row < len(week):
                cells.append("■" if week[row].has_entry else "·")
            else:
                cells.append(" ")
        lines.append(" ".join(cells).rstrip())
    return "\n".join(lines)


@click.group()
@click.version_option()
def main():
    """One Line A Day - one sentence per day, and the streaks that follow."""
    pass


@main.command()
@click.argument("text", nargs=-1)
def write(text: tuple[str, ...]):
    """Write (or rewrite) today's line."""

    async def run():
        config = load_config()
        service = await _started(config)
        entry = await service.save_today_entry(" ".join(text), now=config.now())
        stats = service.stats
        click.echo(f"Saved {format_entry_date(entry.date)}: {entry.text}")
        click.echo(f"Current streak: {stats.current_streak} days")

    _run(run())


@main.command()
def today():
    """Show today's line."""

    async def run():
        config = load_config()
        service = await _started(config)
        entry = service.today_entry(config.now().date())
        if entry is None:
            click.echo("Nothing written today yet.")
            return
        click.echo(entry.text)

    _run(run())


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def history(as_json: bool):
    """List entries, newest first."""

    async def run():
        service = await _started(load_config())
        entries = service.history()

        if as_json:
            click.echo(json.dumps([e.to_dict() for e in entries], indent=2))
            return

        if not entries:
            click.echo("No entries yet.")
            return

        for entry in entries:
            click.echo(f"{format_entry_date(entry.date):18} {entry.text}")

    _run(run())


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def stats(as_json: bool):
    """Show streaks and counts."""

    async def run():
        service = await _started(load_config())
        s = service.stats

        if as_json:
            click.echo(
                json.dumps(
                    {
                        "current_streak": s.current_streak,
                        "best_streak": s.best_streak,
                        "total_entries": s.total_entries,
                        "entries_this_month": s.entries_this_month,
                    },
                    indent=2,
                )
            )
            return

        click.echo(f"Current streak: {s.current_streak} days")
        click.echo(f"Best streak:    {s.best_streak} days")
        click.echo(f"Total entries:  {s.total_entries}")
        click.echo(f"This month:     {s.entries_this_month}")

    _run(run())


@main.command()
def heatmap():
    """Show the last 365 days of activity."""

    async def run():
        config = load_config()
        service = await _started(config)
        grid = service.heatmap(config.now().date())
        click.echo(render_heatmap(grid))
        click.echo(f"\n{grid.active_days()} of {len(grid.cells)} days written")

    _run(run())


@main.command()
@click.option("--yes", is_flag=True, help="Skip confirmation")
def clear(yes: bool):
    """Delete every entry."""
    if not yes:
        click.confirm("Delete all entries? This cannot be undone", abort=True)

    async def run():
        service = await _started(load_config())
        await service.clear_entries()
        click.echo("All entries deleted.")

    _run(run())


@main.group()
def reminder():
    """Configure the daily reminder."""
    pass


@reminder.command("on")
def reminder_on():
    """Enable the daily reminder."""

    async def run():
        service = await _started(load_config())
        if await service.set_reminder_enabled(True):
            click.echo(f"Reminder on at {service.settings.reminder_time}. Run `onelineaday remind` to deliver it.")
        else:
            click.echo("Reminder could not be enabled.", err=True)

    _run(run())


@reminder.command("off")
def reminder_off():
    """Disable the daily reminder."""

    async def run():
        service = await _started(load_config())
        await service.set_reminder_enabled(False)
        click.echo("Reminder off.")

    _run(run())


@reminder.command("time")
@click.argument("time_str", metavar="HH:MM")
def reminder_time(time_str: str):
    """Set the reminder time (24h)."""

    async def run():
        service = await _started(load_config())
        await service.set_reminder_time(time_str)
        click.echo(f"Reminder time set to {service.settings.reminder_time}.")

    _run(run())


@main.command()
def remind():
    """Run in the foreground and deliver the daily reminder."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )
    config = load_config()
    try:
        _run(_serve_reminders(config))
    except KeyboardInterrupt:
        logger.info("Reminder loop stopped")


async def _serve_reminders(config: Config) -> None:
    scheduler = _make_scheduler(config)
    service: JournalService | None = None

    async def notify():
        await remind_if_missing(service, config)

    service = create_service(config, scheduler=scheduler, notify=notify)
    if await service.start(as_of=config.now().date()) is LoadState.FAILED:
        click.echo(f"Error: {service.error}", err=True)
        sys.exit(1)

    if not await service.restore_reminder():
        click.echo("Reminder is off. Run `onelineaday reminder on` first.")
        return

    scheduler.start()
    next_run = service.reminders.next_run_time()
    logger.info("Scheduler started")
    if next_run is not None:
        click.echo(f"Next reminder: {next_run:%Y-%m-%d %H:%M %Z}")
    try:
        await asyncio.Event().wait()
    finally:
        scheduler.shutdown(wait=False)


async def remind_if_missing(service: JournalService, config: Config) -> bool:
    """Deliver the reminder unless today's line exists. Returns True if sent."""
    today = config.now().date()
    await service.reload_entries(as_of=today)
    if service.today_entry(today) is not None:
        logger.info("Already wrote today, skipping reminder")
        return False
    click.echo(f"{config.reminder_title}: {config.reminder_body}")
    return True
