"""Interactive prompts built on click.

Numbered-list pickers that work in any terminal:
- search_select: type text to filter, a number to pick, n/p to page
- checkbox: toggle numbers ("1,3-5"), Enter to accept
- select: pick one by number, paged
- text / confirm: thin wrappers over click.prompt / click.confirm
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import NamedTuple

import click


class Choice(NamedTuple):
    """One entry in a picker: what is shown and what is returned."""

    name: str
    value: str
    checked: bool = False


def parse_selection(answer: str, count: int) -> list[int]:
    """Parse "1,3-5" into zero-based indices, in the order given.

    Raises:
        click.BadParameter: On anything that is not a number or range
            within 1..count.
    """
    indices: list[int] = []
    for part in answer.replace(" ", "").split(","):
        if not part:
            continue
        start, _, end = part.partition("-")
        if not start.isdigit() or (end and not end.isdigit()):
            raise click.BadParameter(f"{part!r} is not a number or range")
        first, last = int(start), int(end or start)
        if not 1 <= first <= last <= count:
            raise click.BadParameter(f"{part!r} is out of range 1-{count}")
        indices.extend(i - 1 for i in range(first, last + 1) if i - 1 not in indices)
    return indices


def _show_page(choices: Sequence[Choice], offset: int, page_size: int) -> None:
    for i, choice in enumerate(choices[offset : offset + page_size], start=offset + 1):
        click.echo(f"  {click.style(f'{i:>3}', fg='cyan')}  {choice.name}")
    remaining = len(choices) - offset - page_size
    if remaining > 0:
        click.secho(f"       … {remaining} more (n: next page)", dim=True)


def select(message: str, choices: Sequence[Choice], page_size: int = 10) -> str:
    """Pick exactly one choice; returns its value."""
    if not choices:
        raise click.UsageError(f"{message} (no choices available)")
    offset = 0
    while True:
        click.echo(click.style(f"? {message}", bold=True))
        _show_page(choices, offset, page_size)
        answer = click.prompt("  Choice", default="1").strip()
        if answer == "n" and offset + page_size < len(choices):
            offset += page_size
            continue
        if answer == "p":
            offset = max(0, offset - page_size)
            continue
        if answer.isdigit() and 1 <= int(answer) <= len(choices):
            return choices[int(answer) - 1].value
        click.secho(f"  Enter a number between 1 and {len(choices)}", fg="yellow")


def search_select(
    message: str,
    source: Callable[[str], list[Choice]],
    page_size: int = 15,
) -> str:
    """Pick one choice from a list that the operator can filter by typing.

    A number picks any match, not only those on the visible page; "n" and
    "p" page through the matches. Any other text becomes the new filter.

    Args:
        message: Question shown above the list.
        source: Called with the current filter text, returns matching choices.
        page_size: How many matches to show at once.
    """
    query = ""
    choices = source(query)
    offset = 0
    while True:
        header = click.style(f"? {message}", bold=True)
        click.echo(f"{header} [filter: {query}]" if query else header)
        if choices:
            _show_page(choices, offset, page_size)
        else:
            click.secho("  No matches", fg="yellow")
        answer = click.prompt(
            "  Number to pick, n/p to page, or text to filter", default="", show_default=False
        ).strip()
        if answer == "n" and offset + page_size < len(choices):
            offset += page_size
            continue
        if answer == "p" and offset > 0:
            offset = max(0, offset - page_size)
            continue
        if answer.isdigit() and 1 <= int(answer) <= len(choices):
            return choices[int(answer) - 1].value
        query = answer
        choices = source(query)
        offset = 0


def checkbox(message: str, choices: Sequence[Choice]) -> list[str]:
    """Toggle any number of choices; returns checked values in list order."""
    checked = [choice.checked for choice in choices]
    while True:
        click.echo(click.style(f"? {message}", bold=True))
        for i, (choice, on) in enumerate(zip(choices, checked), start=1):
            mark = click.style("◉", fg="green") if on else "◯"
            click.echo(f"  {click.style(f'{i:>3}', fg='cyan')}  {mark} {choice.name}")
        answer = click.prompt(
            "  Numbers to toggle (e.g. 1,3-5), Enter to accept",
            default="",
            show_default=False,
        )
        if not answer.strip():
            return [choice.value for choice, on in zip(choices, checked) if on]
        try:
            for index in parse_selection(answer, len(choices)):
                checked[index] = not checked[index]
        except click.BadParameter as exc:
            click.secho(f"  {exc.message}", fg="yellow")


def text(message: str, default: str | None = None) -> str:
    return click.prompt(f"? {message}", default=default)


def confirm(message: str, default: bool = True) -> bool:
    return click.confirm(f"? {message}", default=default)
