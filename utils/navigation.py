"""
utils/navigation.py
────────────────────────────────────────────
Navigator: abstrakte Navigationsfläche des Scanners.
Die Engine entscheidet, perform() führt das Ergebnis aus.
Die HTTP-Variante (Starlette-Responses) liegt in routes/utils.py.
────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Protocol

from utils.outcomes import (
    ActionMenu,
    ContentDelivery,
    Failure,
    ImmediateAction,
    Redirect,
    ResolutionOutcome,
)


class Navigator(Protocol):
    def redirect(self, url: str) -> None:
        ...

    def open_protocol(self, uri: str) -> None:
        ...

    def open_new_context(self, url: str) -> None:
        ...

    def download(self, filename: str, content: str, media_type: str) -> None:
        ...

    def show_text(self, content: str) -> None:
        ...

    def show_menu(self, menu: ActionMenu) -> None:
        ...

    def fail(self, failure: Failure) -> None:
        ...


def perform(outcome: ResolutionOutcome, navigator: Navigator) -> None:
    """Wendet ein Ergebnis auf den Navigator an. Failure → keine Navigation."""
    if isinstance(outcome, Redirect):
        navigator.redirect(outcome.url)
    elif isinstance(outcome, ImmediateAction):
        if outcome.new_context:
            navigator.open_new_context(outcome.uri)
        else:
            navigator.open_protocol(outcome.uri)
    elif isinstance(outcome, ContentDelivery):
        if outcome.filename:
            navigator.download(outcome.filename, outcome.content, outcome.media_type)
        else:
            navigator.show_text(outcome.content)
    elif isinstance(outcome, ActionMenu):
        navigator.show_menu(outcome)
    elif isinstance(outcome, Failure):
        navigator.fail(outcome)
    else:
        raise TypeError(f"Unbekanntes Ergebnis: {outcome!r}")
