"""The interactive ``browse`` command.

A single loop drives the session: read one line of input, apply the keys it
contains, perform a requested reload, render. Every line is split into key
names understood by :func:`~openapi_explorer.navigation.events.decode_key`:

* an empty line is ``enter``;
* ``/text`` searches for *text* (``/`` + the characters + ``enter``);
* otherwise whitespace-separated tokens are key names (``down``, ``tab``,
  ``esc``, ``shift+tab`` ...) and any other token is typed character by
  character, so ``2`` switches to the schemas view and ``dd`` presses ``d``
  twice.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

import typer

from openapi_explorer.output import get_output

if TYPE_CHECKING:
    from openapi_explorer.session import Session

NAMED_KEYS = frozenset({
    "enter",
    "esc",
    "escape",
    "tab",
    "shift+tab",
    "backtab",
    "backspace",
    "up",
    "down",
    "left",
    "right",
    "ctrl+c",
})


def split_keys(line: str) -> list[str]:
    """Turn one line of input into a list of key names.

    Example::

        >>> split_keys("/user")
        ['/', 'u', 's', 'e', 'r', 'enter']
        >>> split_keys("down down enter")
        ['down', 'down', 'enter']
    """
    stripped = line.strip()
    if not stripped:
        return ["enter"]
    if stripped.startswith("/"):
        return ["/", *stripped[1:], "enter"]

    keys: list[str] = []
    for token in stripped.split():
        if token.lower() in NAMED_KEYS:
            keys.append(token.lower())
        else:
            keys.extend(token)
    return keys


def run_loop(
    session: Session,
    read_line: Callable[[], str],
    render: Callable[[Session], None],
) -> None:
    """Drive *session* until it quits or input runs out.

    Args:
        session: The :class:`~openapi_explorer.session.Session` to drive.
        read_line: Callable returning the next input line; raises
            ``EOFError`` when there is no more input.
        render: Callable receiving the session after every step.
    """
    from openapi_explorer.navigation import decode_key

    render(session)
    while not session.should_quit:
        try:
            line = read_line()
        except (EOFError, KeyboardInterrupt):
            break

        for key in split_keys(line):
            action = decode_key(key, searching=session.nav.searching)
            if action is None:
                continue
            session.apply(action)
            if session.should_quit:
                break

        if session.should_quit:
            break
        session.run_pending_reload()
        render(session)


def browse_command(
    ctx: typer.Context,
    clear: bool = typer.Option(
        True, "--clear/--no-clear", help="Clear the terminal before each screen."
    ),
) -> None:
    """Browse fields, schemas and endpoints interactively.

    Type key names and press Enter, e.g. ``down``, ``tab``, ``2`` or
    ``/user`` to search. ``h`` shows all keys, ``q`` quits.
    """
    from openapi_explorer.commands.inspect import load_context_snapshot
    from openapi_explorer.screen import render_screen
    from openapi_explorer.session import Session

    snapshot = load_context_snapshot(ctx)
    obj = ctx.obj or {}
    config = obj.get("config")
    session = Session(snapshot, config.validation if config is not None else None)

    output = get_output()
    console = output.console

    def _render(current: Session) -> None:
        if clear and console.is_terminal:
            console.clear()
        output.print_renderable(render_screen(current))

    run_loop(session, lambda: console.input("> "), _render)
