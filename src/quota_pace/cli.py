"""Click CLI command definitions for quota-pace."""

from __future__ import annotations

import logging
from datetime import date, datetime

import click

from quota_pace import __version__, config as cfg, constants

logger = logging.getLogger("quota-pace")


def _setup_logging(verbose: bool) -> None:
    log_file = cfg.data_dir() / constants.LOG_FILE_NAME
    handlers: list[logging.Handler] = [logging.FileHandler(str(log_file))]
    if verbose:
        handlers.append(logging.StreamHandler())
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
    )


@click.group()
@click.version_option(version=__version__, prog_name="quota-pace")
@click.option("--verbose", "-v", is_flag=True, help="Also log to stderr")
def main(verbose: bool) -> None:
    """quota-pace: See whether you are using your quota faster than time passes."""
    _setup_logging(verbose)


# --- Dashboard ---

def _parse_now(ctx: click.Context, param: click.Parameter, value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Expected an ISO date-time like 2026-10-16T14:30, got: {value!r}")


@main.command()
@click.option(
    "--now", "fixed_now", callback=_parse_now, default=None,
    help="Evaluate at this ISO date-time instead of the clock",
)
@click.option("--watch", is_flag=True, help="Redraw continuously until Ctrl-C")
@click.option(
    "--interval", type=click.FloatRange(min=0.1), default=None,
    help="Seconds between redraws with --watch (default: [display] refresh_seconds)",
)
def show(fixed_now: datetime | None, watch: bool, interval: float | None) -> None:
    """Show the session, weekly and billing dashboard."""
    import time

    from quota_pace.clock import clock_settings, effective_now
    from quota_pace.dashboard import show_dashboard
    from quota_pace.state import load_state

    time_mode, hour_offset = clock_settings()
    width = int(cfg.get("display", "bar_width", constants.BAR_WIDTH))

    def tick() -> None:
        now = fixed_now or effective_now(None, time_mode, hour_offset)
        show_dashboard(now, load_state(now), time_mode, hour_offset, width)

    if not watch:
        tick()
        return

    if interval is None:
        interval = float(cfg.get("display", "refresh_seconds", constants.REFRESH_SECONDS))
    try:
        while True:
            click.clear()
            tick()
            time.sleep(interval)
    except KeyboardInterrupt:
        click.echo()


# --- Inputs ---

def _validate_reset_time(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    if value is None:
        return None
    from quota_pace.quota.inputs import parse_reset_time
    if parse_reset_time(value, datetime.now()) is None:
        raise click.BadParameter(f"Expected a 24h time like 15:00, got: {value!r}")
    return value.strip()


def _validate_datetime(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        raise click.BadParameter(f"Expected an ISO date-time like 2026-10-20T15:00, got: {value!r}")
    return parsed.strftime("%Y-%m-%dT%H:%M")


def _validate_date(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value.strip()).isoformat()
    except ValueError:
        raise click.BadParameter(f"Expected a date like 2026-10-01, got: {value!r}")


_SET_OPTIONS = {
    "reset_time": "reset_time",
    "used": "percent_used",
    "window": "window_length_hours",
    "week_all": "weekly_percent_used",
    "week_sonnet": "weekly_sonnet_percent_used",
    "weekly_reset": "weekly_reset_date",
    "sonnet_reset": "weekly_sonnet_reset_date",
    "work_days": "weekly_work_days",
    "last_payment": "last_payment_date",
}


@main.command("set")
@click.option("--reset-time", callback=_validate_reset_time, help="Time (HH:MM) the session window resets")
@click.option("--used", type=float, help="Session usage %")
@click.option("--window", type=float, help=f"Session window length in hours (max {constants.MAX_WINDOW_HOURS})")
@click.option("--week-all", "week_all", type=float, help="Weekly usage % (all models)")
@click.option("--week-sonnet", "week_sonnet", type=float, help="Weekly usage % (Sonnet only)")
@click.option("--weekly-reset", callback=_validate_datetime, help="Weekly reset date-time (2026-10-20T15:00)")
@click.option("--sonnet-reset", callback=_validate_datetime, help="Sonnet weekly reset, if different")
@click.option("--work-days", type=int, help="Days per week you work (1-7)")
@click.option("--last-payment", callback=_validate_date, help="Date of the last subscription payment")
def set_inputs(**options: object) -> None:
    """Update the numbers shown by your provider's usage page.

    \b
    Examples:
      quota-pace set --reset-time 15:00 --used 40
      quota-pace set --week-all 28 --week-sonnet 4 --weekly-reset 2026-10-20T15:00
      quota-pace set --last-payment 2026-10-01
    """
    from quota_pace.clock import clock_settings, effective_now
    from quota_pace.state import update_state

    changes = {
        _SET_OPTIONS[name]: value for name, value in options.items() if value is not None
    }
    if not changes:
        raise click.UsageError("Provide at least one option; see 'quota-pace set --help'.")

    time_mode, hour_offset = clock_settings()
    state = update_state(changes, effective_now(None, time_mode, hour_offset))
    for key in changes:
        click.echo(f"{key} = {getattr(state, key)}")


@main.command()
def reset() -> None:
    """Forget all stored inputs."""
    from quota_pace.state import reset_state
    if reset_state():
        click.echo("Stored inputs cleared.")
    else:
        click.echo("Nothing stored.")


# --- Config commands ---

@main.group()
def config() -> None:
    """Manage configuration."""


def _require_config_file() -> None:
    if not cfg.CONFIG_FILE.exists():
        click.echo(f"No config file at {cfg.CONFIG_FILE}; run 'quota-pace config init'.", err=True)
        raise SystemExit(1)


@config.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
def config_init(force: bool) -> None:
    """Write the default config file."""
    try:
        path = cfg.init_config(force=force)
    except FileExistsError as e:
        click.echo(str(e), err=True)
        raise SystemExit(1)
    click.echo(f"Config created: {path}")


@config.command("show")
@click.option("--raw", is_flag=True, help="Print the file as written instead of the merged values")
def config_show(raw: bool) -> None:
    """Print the effective settings (file values over built-in defaults)."""
    _require_config_file()
    if raw:
        click.echo(cfg.CONFIG_FILE.read_text())
        return
    click.echo(f"# {cfg.CONFIG_FILE}")
    for section, values in cfg.load_config().items():
        if not isinstance(values, dict):
            click.echo(f"{section} = {values}")
            continue
        click.echo(f"\n[{section}]")
        for key, value in values.items():
            click.echo(f"{key} = {value}")


@config.command("edit")
def config_edit() -> None:
    """Open the config file in $EDITOR."""
    _require_config_file()
    click.edit(filename=str(cfg.CONFIG_FILE))


# --- Clock commands ---

@main.group()
def clock() -> None:
    """Clock mode and manual hour offset used for all calculations."""


@clock.command("show")
def clock_show() -> None:
    """Show the clock settings and the resulting time."""
    from quota_pace.clock import clock_settings, effective_now
    time_mode, hour_offset = clock_settings()
    now = effective_now(None, time_mode, hour_offset)
    click.echo(f"Mode:   {time_mode}")
    click.echo(f"Offset: {hour_offset:+g}h")
    click.echo(f"Now:    {now.strftime('%Y-%m-%d %H:%M:%S')}")


@clock.command("mode")
@click.argument("mode", type=click.Choice(constants.TIME_MODES))
def clock_mode(mode: str) -> None:
    """Compute in local or UTC wall-clock time."""
    cfg.set_value("clock", "time_mode", mode)
    logger.info("Clock mode set to %s", mode)
    click.echo(f"Clock mode set to {mode}")


@clock.command("offset", context_settings={"ignore_unknown_options": True})
@click.argument("hours", type=click.IntRange(-24, 24))
def clock_offset(hours: int) -> None:
    """Shift the clock by HOURS (may be negative)."""
    cfg.set_value("clock", "hour_offset", hours)
    logger.info("Clock offset set to %+dh", hours)
    click.echo(f"Clock offset set to {hours:+d}h")


@clock.command("reset")
def clock_reset() -> None:
    """Back to local time with no offset."""
    cfg.set_value("clock", "time_mode", constants.DEFAULT_TIME_MODE)
    cfg.set_value("clock", "hour_offset", 0)
    click.echo("Clock reset to local time, no offset")
