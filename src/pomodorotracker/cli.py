"""Command line interface for the Pomodoro tracker."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Optional, TextIO

from . import scheduler
from .clock import format_time
from .controller import ENTER, Controller, View
from .session import Session, SessionStatus

BANNER = r"""
 ____   ___  __  __  ___   ___   ___   ____   ____   __   ____   ____
(  _ \ / __)(  )(  )/ __) / __) / __) (_  _) (_  _) / _\ (  _ \ / ___)
 )   /( (__  )(__)( \__ \( (__ ( (__    )(     )(  /    \ )   / \___ \
(__\_) \___)(______)(___/ \___) \___)  (__)   (__) \_/\_/(__\_) (____/
"""

HELP = """Each line you enter is replayed as key presses, followed by Enter:
  <space>       start / pause / resume (text after it annotates the pause)
  c             finish the current stage now
  i             list the interruptions of the current stage
  q             quit
  (empty line)  refresh the timer"""


def parse_args(argv: Iterable[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Track Pomodoro stages and their interruptions in your terminal.")
    parser.add_argument("--pomodoros", type=int, default=scheduler.DEFAULTS["pomodoros"], help="work stages before the long break")
    parser.add_argument("--work-minutes", type=int, default=scheduler.DEFAULTS["work_minutes"], help="minutes per work stage")
    parser.add_argument("--short-break-minutes", type=int, default=scheduler.DEFAULTS["short_break_minutes"], help="minutes per short break")
    parser.add_argument("--long-break-minutes", type=int, default=scheduler.DEFAULTS["long_break_minutes"], help="minutes for the long break")
    parser.add_argument("--fast", action="store_true", help="treat one real second as one Pomodoro minute (handy for demos)")
    parser.add_argument("--dry-run", action="store_true", help="show the stage plan without running timers")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="log stage transitions (repeat for more detail)")
    parser.add_argument("--debug", action="store_true", help="log everything, including annotation edits")
    return parser.parse_args(list(argv))


def configure_logging(verbose: int = 0, debug: bool = False) -> None:
    if debug or verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def render_status(status: SessionStatus) -> str:
    line = f"{status.stage.label:<12} {status.remaining.display}"
    if status.remaining.is_due:
        line += "  (done)"
    if status.is_paused:
        line += f"  paused {status.pause_display}"
        if status.annotation:
            line += f"  [{status.annotation}]"
    return line


def render_interruptions(status: SessionStatus) -> str:
    if not status.interruptions:
        return "No interruptions yet."
    rows = [
        f"{index:>2}. {format_time(item.duration)}  {item.annotation or ''}".rstrip()
        for index, item in enumerate(status.interruptions, start=1)
    ]
    return "\n".join(["Interruptions:", *rows])


def run(session: Session, lines: Iterable[str], out: TextIO = sys.stdout) -> int:
    """Drive ``session`` from ``lines`` until they run out or the user quits.

    Returns the number of finished stages.
    """
    controller = Controller(session)
    print(render_status(session.status(session.now())), file=out)
    for line in lines:
        controller.tick()
        for key in [*line.rstrip("\r\n"), ENTER]:
            if not controller.handle_key(key):
                print("Bye!", file=out)
                return len(session.history)
            if controller.view is View.INTERRUPTIONS:
                print(render_interruptions(session.status(session.now())), file=out)
        controller.tick()
        print(render_status(session.status(session.now())), file=out)
    return len(session.history)


def main(argv: Optional[Iterable[str]] = None) -> None:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.verbose, args.debug)
    configuration = scheduler.build_configuration(
        pomodoros=args.pomodoros,
        work_minutes=args.work_minutes,
        short_break_minutes=args.short_break_minutes,
        long_break_minutes=args.long_break_minutes,
        second_length=1 if args.fast else 60,
    )

    print(BANNER)
    print("Pomodoros :", args.pomodoros)
    print("Work      :", args.work_minutes, "minute(s)")
    print("Short br. :", args.short_break_minutes, "minute(s)")
    print("Long br.  :", args.long_break_minutes, "minute(s)")
    print()

    if args.dry_run:
        print("Planned stages:")
        for item in configuration.plan():
            print(f"- {item.label}: {format_time(item.duration_seconds)}")
        return

    print(HELP)
    print()
    try:
        finished = run(Session(configuration), sys.stdin)
    except KeyboardInterrupt:
        print("\nSession interrupted. See you next time!")
        return
    print(f"{finished} stage(s) finished.")


if __name__ == "__main__":  # pragma: no cover
    main()
