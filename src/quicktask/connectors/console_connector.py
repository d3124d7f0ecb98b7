# src/quicktask/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_api import render_listing
from ..tasks.task_store import StoreChange

logger = logging.getLogger(__name__)

PASTE_END = "."


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _read_block(read: Callable[[str], str]) -> str:
    """Collect lines until a line with a single '.' (or EOF)."""
    lines: list[str] = []
    while True:
        try:
            line = read("... ")
        except EOFError:
            break
        if line.strip() == PASTE_END:
            break
        lines.append(line)
    return "\n".join(lines)


def _inputs(read: Callable[[str], str]) -> Iterator[str]:
    while True:
        try:
            yield read(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            return
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            return


def run_console_loop(state: AppState, read: Callable[[str], str] = input) -> None:
    """
    Notes-style capture loop.

    Plain lines become tasks, /paste takes a multi-line block, /commands go to the
    registry. Everything runs on this thread.
    """
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type a task per line. Use /help for commands, /paste for a block, /exit to quit.\n")

    store = state.task_store

    def _on_change(change: StoreChange) -> None:
        error = getattr(store, "last_save_error", None)
        if error:
            _print_ts(f"[WARN] Change '{change.kind}' not saved to disk: {error}")

    unsubscribe = store.subscribe(_on_change)

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    try:
        for user_input in _inputs(read):
            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                if user_input.lower() == "/paste":
                    block = _read_block(read)
                    created = store.import_from_text(block)
                    reply: str | None = render_listing(state, created, "Nothing to import.")
                else:
                    reply = command_registry.handle(state, user_input, emit=emit)
                    if reply is None:
                        created = store.import_from_text(user_input)
                        reply = render_listing(state, created, "Nothing to import.")
            except Exception:
                logger.exception("Console handler crashed.")
                reply = "Internal error while handling the input."

            print(f"[{_ts_local()}] {reply}")
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
