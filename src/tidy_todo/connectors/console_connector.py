# src/tidy_todo/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_listing
from ..core.feedback import FeedbackCue
from ..core.state import AppState
from ..tasks.task_models import TaskCompleted

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def console_celebrate(event: TaskCompleted) -> None:
    _print_ts("*** Task completed! Well done! ***")


def console_cue(cue: FeedbackCue) -> None:
    # No audio/haptics in a terminal; keep a trace for debugging.
    logger.debug("Feedback cue %s %s (%s)", cue.channel.value, cue.name, cue.event.value)


def run_console_loop(state: AppState) -> None:
    logger.info("Console front-end started (%d task(s)).", len(state.tasks))
    _print_ts("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.\n")
    print(render_listing(state))

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        # Plain text is a shortcut for /add.
        line = user_input if user_input.startswith("/") else f"/add {user_input}"

        try:
            reply = command_registry.handle(state, line)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            print(reply)

    logger.info("Console front-end finished.")
