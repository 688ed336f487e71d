"""Command-line entry point.

Gathers duration tokens and options, runs the parse -> compensate -> wait
pipeline, and optionally hands off to a follow-up shell command.
"""

import subprocess
import sys

import typer
from loguru import logger
from rich.console import Console

from waitlimit import __version__
from waitlimit.config import UsageError, WaitConfig
from waitlimit.duration import OVERHEAD_NANOS, Duration, WaitTotal, compensate
from waitlimit.parser import ParseError, parse_tokens
from waitlimit.report import COMPLETION, describe, format_remaining
from waitlimit.scheduler import SignalFlag, SleepScheduler, SystemWaiter
from waitlimit.units import unit_table
from waitlimit.util import DEFAULT_CALENDAR

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130
# Status the command-line parser exits with on bad options
EXIT_USAGE = 2

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

app = typer.Typer(
    name="waitlimit",
    help=(
        "Wait for a total length of time, possibly centuries long.\n\n"
        "Suffixes: s m h d w f(ortnight) o(month) y x(decade) c(entury) "
        "k(millennium) ms us ns. No suffix means seconds."
    ),
    add_completion=False,
)


def _setup_logging(debug: bool = False) -> None:
    logger.remove()
    logger.enable("waitlimit")
    logger.add(
        sys.stderr,
        format="<level>{level: <8}</level> | <cyan>{name}</cyan> - {message}",
        level="DEBUG" if debug else "WARNING",
        colorize=None,
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"waitlimit {__version__}")
        raise typer.Exit()


def _report_progress(remaining: Duration, signum: int | None) -> None:
    console.print(format_remaining(remaining, signum))


def execute(config: WaitConfig) -> int:
    """Run one configured wait and return the process exit status."""
    table = unit_table(config.calendar)
    total = parse_tokens(config.tokens, table)
    duration = compensate(total.duration, config.overhead_nanos)
    logger.debug("compensated {} -> {}", total.duration, duration)
    total = WaitTotal(duration=duration, centuries=total.centuries)

    if config.verbose:
        for line in describe(total, table):
            console.print(line)

    flag = SignalFlag()
    with SystemWaiter(flag) as waiter:
        scheduler = SleepScheduler(
            waiter,
            flag,
            table,
            signal_wait=config.signal_wait,
            on_progress=_report_progress if config.verbose else None,
        )
        outcome = scheduler.run(total)
    logger.debug("finished: {}", outcome)

    if config.verbose:
        console.print(COMPLETION)

    if config.run is not None:
        logger.debug("running {!r}", config.run)
        return subprocess.run(["/bin/sh", "-c", config.run]).returncode
    return EXIT_SUCCESS


@app.command()
def wait(
    ctx: typer.Context,
    durations: list[str] | None = typer.Argument(
        None,
        metavar="LENGTH[SUFFIX]...",
        help="Lengths of time to add together, e.g. 1h 30m 2.5s",
        show_default=False,
    ),
    run: str | None = typer.Option(
        None, "--run", "-r", help="Run this shell command when the time runs out"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Describe the wait and announce completion"
    ),
    calendar: str = typer.Option(
        DEFAULT_CALENDAR,
        "--calendar",
        "-C",
        envvar="WAITLIMIT_CALENDAR",
        help="Year length: commercial (360 days), julian, gregorian or sidereal",
    ),
    signal_wait: bool = typer.Option(
        False,
        "--signal",
        "-s",
        help="Stop at the first SIGALRM/SIGUSR1/SIGUSR2; with no length, wait "
        "for one indefinitely",
    ),
    overhead: int = typer.Option(
        OVERHEAD_NANOS,
        "--overhead",
        envvar="WAITLIMIT_OVERHEAD",
        help="Nanoseconds of startup overhead to subtract",
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Wait for the sum of LENGTH arguments."""
    if isinstance(ctx.obj, dict):
        ctx.obj["invoked"] = True
    _setup_logging(debug)
    try:
        config = WaitConfig(
            tokens=tuple(durations or ()),
            calendar=calendar,
            verbose=verbose,
            signal_wait=signal_wait,
            run=run,
            overhead_nanos=overhead,
        )
    except UsageError as e:
        err_console.print(f"waitlimit: {e}")
        err_console.print("Try 'waitlimit --help' for more information.")
        raise typer.Exit(EXIT_FAILURE) from e

    try:
        code = execute(config)
    except ParseError as e:
        err_console.print(f"waitlimit: {e}")
        raise typer.Exit(EXIT_FAILURE) from e
    except KeyboardInterrupt:
        raise typer.Exit(EXIT_INTERRUPTED) from None
    raise typer.Exit(code)


def main(argv: list[str] | None = None) -> int:
    """Console-script entry point; returns the exit status.

    Option errors are reported by the parser and mapped to status 1. A
    status of 2 from a follow-up command is passed through untouched.
    """
    state: dict[str, bool] = {}
    try:
        app(args=argv, prog_name="waitlimit", obj=state)
    except SystemExit as e:
        if e.code is None:
            return EXIT_SUCCESS
        code = e.code if isinstance(e.code, int) else EXIT_FAILURE
        if code == EXIT_USAGE and not state.get("invoked"):
            return EXIT_FAILURE
        return code
    return EXIT_SUCCESS
