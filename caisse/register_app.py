"""Main Textual app class."""

from __future__ import annotations

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from caisse import config
from caisse.catalog import (
    HEADER_ROW,
    ITEM_ROW,
    SUBHEADER_ROW,
    WINE_ROW,
    CatalogRow,
    catalog_rows,
    filter_catalog,
    load_catalog,
    resolve_selection,
)
from caisse.confirm_modal import ConfirmModal
from caisse.debug_log import log_debug
from caisse.models import Catalog, PaymentMethod, RemovalPolicy, Tier, Transaction, WineItem
from caisse.printer import check_printer_dependencies, print_transaction
from caisse.register import Register
from caisse.rendering import format_money, format_order_line, format_transaction_row, payment_label
from caisse.stats import summarize
from caisse.tier_modal import TierModal

TABS = ("menu", "history", "data")
TAB_TITLES = {"menu": "Menu", "history": "History", "data": "Data"}
REMOVAL_VERBS = {RemovalPolicy.DELETE: "deleted", RemovalPolicy.CANCEL: "cancelled"}


class RegisterApp(App):
    """A Textual cash register for the café: menu, running order, history and totals."""

    TITLE = config.SHOP_NAME
    SUB_TITLE = "Caisse"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #left-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #order-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #tab-bar {
        height: 1;
        margin-bottom: 1;
    }

    #search-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 4;
    }

    #content {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #order-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #order-total {
        height: 3;
        border: heavy $primary;
        padding: 0 1;
        text-style: bold;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    input_state = reactive("normal")
    tab = reactive("menu")
    search_query = reactive("")
    selected_index = reactive(0)
    history_selected_index = reactive(None)

    BINDINGS = [
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("enter", "add_selected", "Add item"),
        ("backspace", "backspace_query", "Delete query char"),
        ("escape", "cancel_search", "Exit search"),
        ("ctrl+c", "cancel_search", "Exit search"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, cash_register: Register | None = None, catalog: Catalog | None = None) -> None:
        super().__init__()
        self.cash_register = cash_register if cash_register is not None else Register(removal_policy=config.removal_policy())
        self.catalog = catalog if catalog is not None else load_catalog()
        self.system_status = ""
        log_debug(f"app_init policy={self.cash_register.removal_policy.value}")

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="left-pane"):
                yield Static(id="tab-bar")
                yield Static(id="search-bar")
                yield Static(id="content")
            with Vertical(id="order-pane"):
                yield Static("Current Order", classes="pane-title")
                yield Static("(no items yet)", id="order-list")
                yield Static(id="order-total")

    def on_mount(self) -> None:
        _, msg = check_printer_dependencies()
        self.system_status = msg
        log_debug(f"on_mount printer_status={msg!r}")
        self._refresh_all()

    def on_key(self, event: Key) -> None:
        # While a modal is active, let the modal own keyboard handling.
        if isinstance(self.screen, ModalScreen):
            return

        if not event.is_printable or not event.character or len(event.character) != 1:
            return

        if self.input_state == "search":
            self.search_query += event.character
            self.selected_index = 0
            self._refresh_left()
            event.stop()
            return

        key = event.character.lower()
        handlers = {
            "1": lambda: self._switch_tab("menu"),
            "2": lambda: self._switch_tab("history"),
            "3": lambda: self._switch_tab("data"),
            "/": self._enter_search,
            "j": lambda: self.action_move_cursor(1),
            "k": lambda: self.action_move_cursor(-1),
            "c": lambda: self._pay(PaymentMethod.CARD),
            "e": lambda: self._pay(PaymentMethod.CASH),
            "u": self._remove_last_item,
            "x": self._clear_order,
            "d": self._request_remove_selected_transaction,
            "p": self._print_selected_transaction,
        }
        handler = handlers.get(key)
        if handler is None:
            return
        log_debug(f"on_key key={event.key!r} tab={self.tab!r}")
        handler()
        event.stop()

    def action_cancel_search(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state == "normal":
            return

        self.input_state = "normal"
        self.search_query = ""
        self.selected_index = 0
        self._refresh_left()

    def action_backspace_query(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "search" or not self.search_query:
            return
        self.search_query = self.search_query[:-1]
        self.selected_index = 0
        self._refresh_left()

    def action_move_cursor(self, delta: int) -> None:
        if isinstance(self.screen, ModalScreen):
            return

        if self.tab == "menu":
            selectable = self._selectable_rows()
            if not selectable:
                self.selected_index = 0
            else:
                self.selected_index = (self.selected_index + delta) % len(selectable)
            self._refresh_left()
            return

        if self.tab == "history":
            ledger = self.cash_register.ledger
            if not ledger:
                return
            if self.history_selected_index is None:
                self.history_selected_index = 0 if delta > 0 else len(ledger) - 1
            else:
                self.history_selected_index = (self.history_selected_index + delta) % len(ledger)
            self._refresh_left()

    def action_add_selected(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.tab != "menu":
            return

        row = self._selected_row()
        if row is None:
            return

        if row.kind == WINE_ROW:
            wine = row.entry
            self.push_screen(TierModal(wine), lambda tier: self._on_tier_chosen(wine, tier))
            return

        line = self.cash_register.add_item(row.entry)
        log_debug(f"add_item name={line.name!r} price={line.price}")
        self.system_status = f"Added {line.name}"
        self._refresh_all()

    def _on_tier_chosen(self, wine: WineItem, tier: Tier | None) -> None:
        if tier is None:
            return
        line = self.cash_register.add_item(resolve_selection(wine, tier))
        log_debug(f"add_item name={line.name!r} price={line.price}")
        self.system_status = f"Added {line.name}"
        self._refresh_all()

    def _switch_tab(self, tab: str) -> None:
        self.tab = tab
        if tab != "menu":
            self.input_state = "normal"
            self.search_query = ""
        self._refresh_left()

    def _enter_search(self) -> None:
        if self.tab != "menu":
            self._switch_tab("menu")
        self.input_state = "search"
        self.search_query = ""
        self.selected_index = 0
        self._refresh_left()

    def _pay(self, method: PaymentMethod) -> None:
        transaction = self.cash_register.pay(method)
        if transaction is None:
            self.system_status = "Nothing to pay"
            log_debug(f"pay_blocked method={method.value} reason=empty_order")
            self._refresh_left()
            return

        self.history_selected_index = 0
        self.system_status = f"Paid {format_money(transaction.total)} by {payment_label(method)}"
        log_debug(
            f"pay id={transaction.id} method={method.value} total={transaction.total} lines={len(transaction.items)}"
        )
        self._refresh_all()

    def _remove_last_item(self) -> None:
        if self.cash_register.remove_last_item():
            self.system_status = "Removed last item"
            log_debug("remove_last_item")
            self._refresh_all()

    def _clear_order(self) -> None:
        if self.cash_register.clear_order():
            self.system_status = "Order cancelled"
            log_debug("clear_order")
            self._refresh_all()

    def _selected_transaction(self) -> Transaction | None:
        ledger = self.cash_register.ledger
        if self.history_selected_index is None:
            return None
        if not (0 <= self.history_selected_index < len(ledger)):
            return None
        return ledger[self.history_selected_index]

    def _request_remove_selected_transaction(self) -> None:
        if self.tab != "history":
            return
        transaction = self._selected_transaction()
        if transaction is None:
            return

        if self.cash_register.removal_policy is RemovalPolicy.DELETE:
            title = "Delete transaction?"
        else:
            if transaction.cancelled:
                self.system_status = "Transaction already cancelled"
                self._refresh_left()
                return
            title = "Cancel transaction?"

        self.push_screen(
            ConfirmModal(title, format_transaction_row(transaction)),
            lambda confirmed: self._on_remove_confirmed(transaction.id, confirmed),
        )

    def _on_remove_confirmed(self, transaction_id: str, confirmed: bool | None) -> None:
        if not confirmed:
            return
        removed = self.cash_register.remove_transaction(transaction_id)
        log_debug(
            f"remove_transaction id={transaction_id} policy={self.cash_register.removal_policy.value} removed={removed}"
        )
        if removed:
            self.system_status = f"Transaction {transaction_id[:8]} {REMOVAL_VERBS[self.cash_register.removal_policy]}"
        self._refresh_left()

    def _print_selected_transaction(self) -> None:
        if self.tab != "history":
            return
        transaction = self._selected_transaction()
        if transaction is None:
            return

        try:
            print_transaction(transaction)
        except Exception as exc:
            self.system_status = f"Print failed: {exc}"
            log_debug(f"print_failed id={transaction.id} error={exc!r}")
            self._refresh_left()
            return

        self.system_status = f"Printed {transaction.id[:8]}"
        log_debug(f"printed id={transaction.id}")
        self._refresh_left()

    def _filtered_catalog(self) -> Catalog:
        return filter_catalog(self.catalog, self.search_query)

    def _rows(self) -> list[CatalogRow]:
        return catalog_rows(self._filtered_catalog())

    def _selectable_rows(self) -> list[CatalogRow]:
        return [row for row in self._rows() if row.selectable]

    def _selected_row(self) -> CatalogRow | None:
        selectable = self._selectable_rows()
        if not selectable:
            return None
        if self.selected_index >= len(selectable):
            self.selected_index = 0
        return selectable[self.selected_index]

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)

        rows = max(1, rows)
        if total <= rows:
            return (0, total)

        if selected is None:
            start = 0
        else:
            half = rows // 2
            start = selected - half
            start = max(0, start)
            start = min(start, total - rows)

        return (start, start + rows)

    def _refresh_all(self) -> None:
        self._refresh_order()
        self._refresh_left()

    def _refresh_left(self) -> None:
        try:
            self._refresh_tab_bar()
            self._refresh_search_bar()
            content = self.query_one("#content", Static)
        except NoMatches:
            return

        if self.tab == "menu":
            self._refresh_menu(content)
        elif self.tab == "history":
            self._refresh_history(content)
        else:
            self._refresh_data(content)

    def _refresh_tab_bar(self) -> None:
        bar = self.query_one("#tab-bar", Static)
        text = Text()
        for idx, tab in enumerate(TABS):
            if idx > 0:
                text.append("  ")
            label = f" {idx + 1} {TAB_TITLES[tab]} "
            if tab == self.tab:
                text.append(label, style="bold #fdfcf7 on #7d1f1f")
            else:
                text.append(label, style="#7d1f1f")
        bar.update(text)

    def _refresh_search_bar(self) -> None:
        bar = self.query_one("#search-bar", Static)
        status = self.system_status or "Ready"
        if self.input_state == "search":
            text = Text()
            text.append(" / ", style="bold #ffffff on #2f6db5")
            text.append(f" {self.search_query}")
            text.append(f"\n{status}", style="dim")
            bar.update(text)
            return

        if self.tab == "menu":
            help_text = "/ search, Enter add. C card, E cash, U undo, X clear. Ctrl+Q quit."
        elif self.tab == "history":
            help_text = "J/K move, D remove, P print ticket."
        else:
            help_text = "1/2/3 switch tab."
        bar.update(f"{help_text}\n{status}")

    def _refresh_menu(self, content: Static) -> None:
        rows = self._rows()
        selectable = [row for row in rows if row.selectable]
        if not selectable:
            content.update("No results")
            return

        selected = self._selected_row()
        selected_row_idx = rows.index(selected) if selected is not None else None
        start, end = self._window_bounds(len(rows), self._visible_rows(content), selected_row_idx)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            row = rows[idx]
            if row.kind == HEADER_ROW:
                lines.append(row.label, style="bold #7d1f1f")
                continue
            if row.kind == SUBHEADER_ROW:
                lines.append(f"  {row.label}", style="italic #8b2e2e")
                continue

            pointer = "➤ " if idx == selected_row_idx else "  "
            style = "bold" if idx == selected_row_idx else ""
            lines.append(f"{pointer}{row.label}", style=style)
            if row.kind == ITEM_ROW:
                lines.append(f"  {format_money(row.entry.price)}", style="dim")
            elif row.kind == WINE_ROW:
                prices = row.entry.prices
                lines.append(
                    f"  {format_money(prices.glass)} / {format_money(prices.double_glass)} / {format_money(prices.bottle)}",
                    style="dim",
                )

        if end < len(rows):
            lines.append("\n⋮", style="dim")

        content.update(lines)

    def _refresh_history(self, content: Static) -> None:
        ledger = self.cash_register.ledger
        if not ledger:
            self.history_selected_index = None
            content.update("No transactions")
            return

        if self.history_selected_index is None:
            self.history_selected_index = 0
        elif self.history_selected_index >= len(ledger):
            self.history_selected_index = len(ledger) - 1

        start, end = self._window_bounds(len(ledger), self._visible_rows(content), self.history_selected_index)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            pointer = "➤ " if idx == self.history_selected_index else "  "
            lines.append(pointer)
            lines.append_text(format_transaction_row(ledger[idx]))

        if end < len(ledger):
            lines.append("\n⋮", style="dim")

        content.update(lines)

    def _refresh_data(self, content: Static) -> None:
        summary = summarize(self.cash_register.ledger)

        lines = Text()
        lines.append("Revenue      ", style="bold")
        lines.append(format_money(summary.revenue))
        lines.append(f"\n{payment_label(PaymentMethod.CARD):<13}")
        lines.append(format_money(summary.card_total))
        lines.append(f"\n{payment_label(PaymentMethod.CASH):<13}")
        lines.append(format_money(summary.cash_total))
        lines.append("\nTransactions ")
        lines.append(str(summary.transaction_count))

        lines.append("\n\nSales by product", style="bold #7d1f1f")
        if not summary.sales_by_product:
            lines.append("\nNo sales", style="dim")
        for sales in summary.sales_by_product.values():
            lines.append(f"\n{sales.quantity:>3} × {sales.name}")
            lines.append(f"  {format_money(sales.total)}", style="bold")

        content.update(lines)

    def _refresh_order(self) -> None:
        try:
            order_widget = self.query_one("#order-list", Static)
            total_widget = self.query_one("#order-total", Static)
        except NoMatches:
            return

        total_widget.update(f"Total  {format_money(self.cash_register.order_total)}")

        order = self.cash_register.order
        if not order:
            order_widget.update("(no items yet)")
            return

        start, end = self._window_bounds(len(order), self._visible_rows(order_widget), len(order) - 1)
        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")
        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            lines.append(f"{idx + 1}. ")
            lines.append_text(format_order_line(order[idx]))
        order_widget.update(lines)
