"""Entry point for scrimmage package."""

import argparse
import logging

from rich.console import Console
from rich.table import Table
from rich.text import Text

from scrimmage.config import get_config
from scrimmage.drive import DriveContext, PlayOutcome, ResultCategory


def _result_text(outcome: PlayOutcome) -> Text:
    """Result column with markers for scores and turnovers."""
    text = Text()
    if outcome.result == ResultCategory.TOUCHDOWN:
        text.append("TD ", style="bold #f57c00")
    elif outcome.turnover or outcome.turnover_on_downs:
        text.append("TO ", style="bold #c62828")
    text.append(outcome.result.value)
    return text


def build_play_table(outcomes: list[PlayOutcome]) -> Table:
    """Play log as a rich table, in snap order."""
    table = Table(title="Drive", show_lines=False)
    table.add_column("#", justify="right", style="#666666")
    table.add_column("Situation", style="bold")
    table.add_column("Play")
    table.add_column("Result")
    table.add_column("Yds", justify="right")
    table.add_column("Next", style="#666666")

    for number, outcome in enumerate(outcomes, start=1):
        next_text = outcome.next_drive.format()
        if outcome.first_down:
            next_text = f"{next_text} (1st down)"
        table.add_row(
            str(number),
            outcome.start.format(),
            outcome.play_name,
            _result_text(outcome),
            f"{outcome.yards:+d}",
            next_text,
        )
    return table


def main() -> None:
    """Main entry point for the Scrimmage engine."""
    config = get_config()

    parser = argparse.ArgumentParser(
        description="Scrimmage - American football live-play engine",
        prog="scrimmage",
    )
    parser.add_argument(
        "--plays",
        type=int,
        default=8,
        help="Number of plays to run (default: 8)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=config.seed,
        help="Seed for the roster and every roll (default: SCRIMMAGE_SEED)",
    )
    parser.add_argument(
        "--play",
        type=str,
        default=None,
        help="Call this play on every snap (e.g. four_verts)",
    )
    parser.add_argument(
        "--los",
        type=float,
        default=25,
        help="Starting line of scrimmage, yards from own goal line (default: 25)",
    )
    parser.add_argument(
        "--events",
        action="store_true",
        help="Print each play's event stream",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the HTTP API instead of a drive",
    )
    parser.add_argument("--host", type=str, default="127.0.0.1", help="API host")
    parser.add_argument("--port", type=int, default=8000, help="API port")

    args = parser.parse_args()

    errors = config.validate()
    if errors:
        parser.error("; ".join(errors))

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.serve:
        from scrimmage.api.main import run_api

        run_api(host=args.host, port=args.port)
        return

    from scrimmage.core.variance import PlayRandom
    from scrimmage.orchestrator import Orchestrator
    from scrimmage.plays.playbook import get_play, list_plays
    from scrimmage.roster import generate_formation

    play_caller = None
    if args.play is not None:
        call = get_play(args.play)
        if call is None:
            parser.error(f"unknown play {args.play!r}; choose from {', '.join(list_plays())}")

        def fixed_call(context, rng):
            return call

        play_caller = fixed_call

    try:
        start = DriveContext(los_yards=args.los)
    except ValueError as exc:
        parser.error(str(exc))

    rng = PlayRandom(args.seed)
    orchestrator = Orchestrator(
        generate_formation(rng),
        drive=start,
        config=config,
        rng=rng,
        play_caller=play_caller,
    )
    outcomes = orchestrator.run_plays(args.plays)

    console = Console()
    console.print(build_play_table(outcomes))
    if args.events:
        for number, outcome in enumerate(outcomes, start=1):
            console.rule(f"Play {number}: {outcome.play_name}")
            for event in outcome.events:
                console.print(str(event), highlight=False)


if __name__ == "__main__":
    main()
