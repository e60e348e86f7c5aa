"""CLI entry point for eggtimer.

Uses Click to expose the ``eggtimer`` command group with subcommands
that delegate to the Session manager.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

import click

import eggtimer
from eggtimer.core.estimator import format_clock
from eggtimer.core.parameters import Doneness, EggClass, StartTemperatureMode, WaterStartMode
from eggtimer.core.ports import ClockNotifier, SchedulerClock
from eggtimer.core.session import CONFIG_DIR_ENV, Session
from eggtimer.core.timer import InvalidStateError, TimerPhase, TimerSnapshot
from eggtimer.services.breeds import BreedCatalog

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])


def _run(action: Callable[[], T]) -> T:
    """Execute *action*, converting ``InvalidStateError`` to a CLI error.

    On ``InvalidStateError`` the message is printed to stderr and the
    process exits with code 1.
    """
    try:
        return action()
    except InvalidStateError as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)


def _choice(enum_cls: type) -> click.Choice:
    return click.Choice([member.value for member in enum_cls])


def _parameter_options(func: F) -> F:
    """Attach the cook parameter options shared by ``estimate`` and ``start``."""
    options = [
        click.option("--size", type=_choice(EggClass), help="Egg size class."),
        click.option("--weight", type=float, help="Egg mass in grams."),
        click.option("--start", "start_mode", type=_choice(StartTemperatureMode),
                     help="Where the egg comes from."),
        click.option("--start-temp", type=float, help="Explicit starting temperature in °C."),
        click.option("--doneness", type=_choice(Doneness), help="Target yolk firmness."),
        click.option("--water", type=_choice(WaterStartMode), help="Cold or boiling water start."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _apply_parameters(
    session: Session,
    size: Optional[str],
    weight: Optional[float],
    start_mode: Optional[str],
    start_temp: Optional[float],
    doneness: Optional[str],
    water: Optional[str],
) -> None:
    """Apply the given options one field at a time; the size goes first."""
    params = session.parameters
    if size is not None:
        params = params.with_egg_class(EggClass(size))
    if weight is not None:
        params = params.with_mass(weight)
    if start_mode is not None:
        params = params.with_start_mode(StartTemperatureMode(start_mode))
    if start_temp is not None:
        params = params.with_start_temperature(start_temp)
    if doneness is not None:
        params = params.with_doneness(Doneness(doneness))
    if water is not None:
        params = params.with_water_start(WaterStartMode(water))
    if params != session.parameters:
        session.set_parameters(params)


def _session(ctx: click.Context, **kwargs: Any) -> Session:
    return Session(config_dir=ctx.obj["config_dir"], **kwargs)


@click.group()
@click.version_option(version=eggtimer.__version__, prog_name="eggtimer")
@click.option("--config-dir", type=click.Path(file_okay=False, path_type=Path),
              envvar=CONFIG_DIR_ENV, help="Directory for session and parameter files.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, config_dir: Optional[Path], verbose: bool) -> None:
    """eggtimer: boiling time estimates and a countdown for your egg."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_dir"] = config_dir


@cli.command()
@_parameter_options
@click.pass_context
def estimate(ctx: click.Context, **options: Any) -> None:
    """Show the estimated cooking time for the given parameters."""
    session = _session(ctx)
    _apply_parameters(session, **options)
    click.echo(session.parameters.describe())
    message, exit_code = session.preview()
    click.echo(message)
    sys.exit(exit_code)


@cli.command()
@_parameter_options
@click.option("--favorite", is_flag=True, help="Start from the saved favorite parameters.")
@click.pass_context
def start(ctx: click.Context, favorite: bool, **options: Any) -> None:
    """Validate the parameters and start the countdown."""
    session = _session(ctx)
    if favorite and session.load_favorite() is None:
        click.echo("No favorite saved", err=True)
        sys.exit(1)
    _apply_parameters(session, **options)
    message, exit_code = _run(session.calculate_and_start)
    click.echo(message)
    sys.exit(exit_code)


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the current countdown status."""
    session = _session(ctx)
    message, exit_code = session.foreground()
    click.echo(message)
    sys.exit(exit_code)


@cli.command()
@click.pass_context
def pause(ctx: click.Context) -> None:
    """Pause the running countdown."""
    session = _session(ctx)
    message = _run(session.pause)
    click.echo(message)


@cli.command()
@click.pass_context
def resume(ctx: click.Context) -> None:
    """Resume a paused countdown."""
    session = _session(ctx)
    message = _run(session.resume)
    click.echo(message)


@cli.command()
@click.pass_context
def reset(ctx: click.Context) -> None:
    """Reset the countdown to the committed duration."""
    session = _session(ctx)
    message = _run(session.reset)
    click.echo(message)


@cli.command()
@click.pass_context
def stop(ctx: click.Context) -> None:
    """Stop the countdown and clear the alert."""
    session = _session(ctx)
    message = _run(session.stop)
    click.echo(message)


@cli.command()
@click.pass_context
def watch(ctx: click.Context) -> None:
    """Follow the running countdown until the egg is ready.

    A pause or reset from another terminal is picked up on the next tick
    and ends watching without overwriting it; a restart is followed.
    """
    clock = SchedulerClock()
    notifier = ClockNotifier(clock, click.echo)
    completed: list[TimerSnapshot] = []

    def render(snapshot: TimerSnapshot) -> None:
        click.echo(f"\r{format_clock(snapshot.remaining)} remaining", nl=False)

    session = _session(
        ctx, clock=clock, notifier=notifier, on_tick=render, on_complete=completed.append
    )
    if session.timer.get_phase() != TimerPhase.RUNNING:
        message, exit_code = session.status()
        click.echo(message)
        sys.exit(exit_code)

    try:
        clock.run()
    except KeyboardInterrupt:
        click.echo("\nStopped watching; the timer keeps running")
        sys.exit(130)
    click.echo()
    if completed and session.timer.get_phase() == TimerPhase.COMPLETED:
        click.echo(session.stop())
        return
    message, exit_code = session.status()
    click.echo(message)
    sys.exit(exit_code)


@cli.group()
def favorite() -> None:
    """Manage the favorite parameter set."""


@favorite.command("save")
@_parameter_options
@click.pass_context
def favorite_save(ctx: click.Context, **options: Any) -> None:
    """Save the current parameters (with any overrides) as favorite."""
    session = _session(ctx)
    _apply_parameters(session, **options)
    click.echo(session.save_favorite())


@favorite.command("load")
@click.pass_context
def favorite_load(ctx: click.Context) -> None:
    """Make the favorite parameters current."""
    session = _session(ctx)
    if session.load_favorite() is None:
        click.echo("No favorite saved", err=True)
        sys.exit(1)
    click.echo(session.parameters.describe())
    message, exit_code = session.preview()
    click.echo(message)
    sys.exit(exit_code)


@cli.command()
@click.option("--url", envvar="EGGTIMER_BREEDS_URL", help="Remote breed catalog endpoint.")
@click.option("--timeout", type=float, default=10.0, show_default=True,
              help="Seconds to wait for the catalog.")
def fact(url: Optional[str], timeout: float) -> None:
    """Show a random chicken breed."""
    breed = BreedCatalog(url=url, timeout=timeout).random_breed()
    click.echo(f"{breed.name} ({breed.origin})")
    if breed.description:
        click.echo(breed.description)
