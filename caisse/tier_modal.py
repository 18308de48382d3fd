"""Wine tier picker modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from caisse.catalog import tier_label
from caisse.models import Tier, WineItem
from caisse.rendering import format_money


class TierModal(ModalScreen[Tier | None]):
    """Centered modal to choose glass, double glass or bottle for one wine."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("ctrl+c", "close", "Close"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("enter", "choose_current", "Choose"),
        ("1", "choose_index(0)", "Glass"),
        ("2", "choose_index(1)", "Double"),
        ("3", "choose_index(2)", "Bottle"),
    ]

    CSS = """
    TierModal {
        align: center middle;
        background: $background 60%;
    }

    #tier-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #tier-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #tier-body {
        margin-bottom: 1;
        color: white;
    }

    #tier-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    cursor_index = reactive(0)

    def __init__(self, wine: WineItem) -> None:
        super().__init__()
        self.wine = wine
        self.tiers = list(Tier)

    def compose(self) -> ComposeResult:
        with Container(id="tier-dialog"):
            yield Static(self.wine.name, id="tier-title")
            yield Static(id="tier-body")
            yield Static("J/K/↑/↓ move, Enter or 1/2/3 choose, Esc/q/Ctrl+C close", id="tier-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def action_close(self) -> None:
        self.dismiss(None)

    def action_move_cursor(self, delta: int) -> None:
        self.cursor_index = (self.cursor_index + delta) % len(self.tiers)
        self._refresh_content()

    def action_choose_current(self) -> None:
        self.dismiss(self.tiers[self.cursor_index])

    def action_choose_index(self, index: int) -> None:
        if 0 <= index < len(self.tiers):
            self.dismiss(self.tiers[index])

    def _refresh_content(self) -> None:
        body = self.query_one("#tier-body", Static)
        content = Text(style="white")
        for idx, tier in enumerate(self.tiers):
            if idx > 0:
                content.append("\n")
            pointer = "➤ " if idx == self.cursor_index else "  "
            style = "bold white" if idx == self.cursor_index else "white"
            content.append(f"{pointer}{idx + 1}. {tier_label(tier)}", style=style)
            content.append(f"  {format_money(self.wine.prices.for_tier(tier))}", style="bold")
        body.update(content)
