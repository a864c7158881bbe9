"""Dynasty bracket viewer TUI application."""

import traceback
from datetime import datetime
from typing import ClassVar

from textual import work
from textual.app import App, ComposeResult
from textual.binding import BindingType
from textual.containers import Vertical
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import DataTable, Footer, Header, Static

from ..engine.orchestrator import TournamentOrchestrator
from ..exceptions import DynastyBracketException
from ..models.bracket import BracketView, MatchRow
from ..models.match import MatchStatus
from ..utils.logging import log, set_console_logging
from ..utils.messages import user_message


class ConfirmReviewScreen(ModalScreen[bool]):
    """Ask before marking a match as reviewed, which cannot be undone"""

    BINDINGS: ClassVar[list[BindingType]] = [
        ("y", "confirm", "Mark as Reviewed"),
        ("n,escape", "cancel", "Cancel"),
    ]

    def __init__(self, match_name: str):
        super().__init__()
        self.match_name = match_name

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static("Mark Match as Reviewed", classes="dialog-title"),
            Static(self.match_name),
            Static(
                "Once you mark a match as reviewed, it confirms that all match "
                "details have been verified by you. This action cannot be undone."
            ),
            Static("[b]y[/b] confirm   [b]n[/b] cancel"),
            id="confirm-dialog",
        )

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


class BracketDisplay(App[None]):
    """Round-one bracket of one dynasty with admin match actions"""

    CSS: ClassVar[
        str
    ] = """
    Screen {
        layout: vertical;
    }

    Header {
        dock: top;
        height: 1;
        background: $primary;
        color: $text;
    }

    Footer {
        dock: bottom;
        height: 1;
        background: $primary-darken-1;
    }

    #main-container {
        height: 1fr;
        padding: 0 1;
    }

    #summary {
        background: $primary;
        color: $text;
        padding: 0 1;
        height: 1;
    }

    #notice {
        height: auto;
        color: $warning;
    }

    #error-message {
        height: auto;
        color: $error;
    }

    #bracket-table {
        height: 1fr;
    }

    ConfirmReviewScreen {
        align: center middle;
    }

    #confirm-dialog {
        width: 60;
        height: auto;
        border: solid $warning;
        padding: 1 2;
        background: $surface;
    }

    .dialog-title {
        text-style: bold;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        ("r", "refresh", "Refresh"),
        ("a", "approve_match", "Approve"),
        ("x", "reject_match", "Reject"),
        ("v", "review_match", "Mark Reviewed"),
        ("q", "quit", "Quit"),
    ]

    # Reactive variables
    group_name: reactive[str] = reactive("Loading...")
    total_matches: reactive[int] = reactive(0)
    pending_matches: reactive[int] = reactive(0)
    reviewed_matches: reactive[int] = reactive(0)
    last_update: reactive[str] = reactive("")
    error_text: reactive[str] = reactive("")
    notice_text: reactive[str] = reactive("")

    def __init__(
        self,
        orchestrator: TournamentOrchestrator,
        group_id: str,
        poll_interval: float = 30.0,
    ):
        super().__init__()
        self.orchestrator: TournamentOrchestrator = orchestrator
        self.group_id: str = group_id
        self.poll_interval: float = poll_interval
        self.bracket: BracketView | None = None
        self.rows: list[MatchRow] = []
        self.title = "Loading Dynasty..."
        log(f"🎯 BracketDisplay initialized for group: {group_id}, poll_interval: {poll_interval}")

    def compose(self) -> ComposeResult:
        """Create the UI layout"""
        yield Header()
        yield Vertical(
            Static("", id="summary"),
            Static("", id="error-message"),
            Static("", id="notice"),
            DataTable(id="bracket-table", cursor_type="row"),
            id="main-container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Initialize the app"""
        set_console_logging(False)

        table = self.query_one("#bracket-table", DataTable)
        table.add_column("Match", width=40)
        table.add_column("Prediction", width=22)
        table.add_column("Status", width=28)
        table.add_column("Scheduled", width=18)

        self.set_interval(self.poll_interval, self.fetch_bracket)
        self.fetch_bracket()

    @work(exclusive=True, group="fetch")
    async def fetch_bracket(self) -> None:
        """Load or generate the bracket (async worker)"""
        log(f"🔄 fetch_bracket() for {self.group_id}")
        try:
            bracket = await self.orchestrator.get_or_create_bracket(self.group_id)
            summary = await self.orchestrator.get_group_summary(self.group_id)
        except DynastyBracketException as e:
            log(f"❌ {type(e).__name__}: {e}")
            self.show_error(user_message(e))
            return
        except Exception as e:
            log(f"❌ Exception in fetch_bracket: {type(e).__name__}: {e}")
            log(f"❌ Full traceback: {traceback.format_exc()}")
            self.show_error(user_message(e))
            return

        group = summary.group
        self.group_name = group.name
        self.title = f"{group.flag} {group.name} Dynasty".strip()
        self.bracket = bracket
        self.rows = [MatchRow(entry) for entry in bracket.matches]
        self.total_matches = len(self.rows)
        self.pending_matches = sum(
            1 for row in self.rows if row.status == MatchStatus.PENDING_SCHEDULE
        )
        self.reviewed_matches = sum(1 for row in self.rows if row.is_reviewed)
        self.last_update = datetime.now().strftime("%H:%M:%S")
        self.error_text = ""

        self.query_one("#summary", Static).update(
            f"{summary.approved_competitors} approved / {summary.total_competitors} players"
            f" • {self.total_matches} matches • {summary.active_matches} scheduled"
            f" • {summary.completed_matches} completed • updated {self.last_update}"
        )
        self.query_one("#error-message", Static).update("")
        self.update_notice(bracket)
        self.update_table()
        log(f"✅ Bracket shown: {self.total_matches} matches for {self.group_id}")

    def show_error(self, message: str) -> None:
        self.error_text = message
        self.last_update = f"Error at {datetime.now().strftime('%H:%M:%S')}"
        self.query_one("#error-message", Static).update(f"⚠️  {message}")

    def update_notice(self, bracket: BracketView) -> None:
        """Bye, unresolved players and unsaved pairings"""
        lines: list[str] = []
        if bracket.bye:
            lines.append(f"🎟️  {bracket.bye.name} has a bye to round 2")
        for missing in bracket.missing_references:
            lines.append(
                f"❓ Match {missing.match_id}: player {missing.competitor_id} (side {missing.side}) not found"
            )
        for failed in bracket.failed_pairings:
            lines.append(f"❌ Could not save {failed.side_a} vs {failed.side_b}")
        self.notice_text = "\n".join(lines)
        self.query_one("#notice", Static).update(self.notice_text)

    def update_table(self) -> None:
        table = self.query_one("#bracket-table", DataTable)
        table.clear()
        for row in self.rows:
            table.add_row(
                row.match_name,
                row.prediction_text,
                f"{row.status_icon} {row.status_text}",
                row.schedule_text,
                key=str(row.id),
            )

    def selected_row(self) -> MatchRow | None:
        table = self.query_one("#bracket-table", DataTable)
        if not self.rows or table.cursor_row is None:
            return None
        if 0 <= table.cursor_row < len(self.rows):
            return self.rows[table.cursor_row]
        return None

    @work(group="actions")
    async def run_match_action(self, match_id: str, action: str, **kwargs) -> None:
        """Apply a lifecycle action and reload the bracket"""
        try:
            await self.orchestrator.apply_action(match_id, action, **kwargs)
        except DynastyBracketException as e:
            log(f"❌ {action} on {match_id}: {e}")
            self.notify(user_message(e), severity="error")
            return
        self.notify(f"Match {match_id}: {action.replace('_', ' ')} done")
        self.fetch_bracket()

    def _start_action(self, action: str, **kwargs) -> None:
        row = self.selected_row()
        if row is None or row.id is None:
            self.notify("Select a match first", severity="warning")
            return
        self.run_match_action(row.id, action, **kwargs)

    def action_approve_match(self) -> None:
        self._start_action("approve")

    def action_reject_match(self) -> None:
        self._start_action("reject")

    def action_review_match(self) -> None:
        row = self.selected_row()
        if row is None or row.id is None:
            self.notify("Select a match first", severity="warning")
            return
        match_id = row.id

        def on_confirm(confirmed: bool | None) -> None:
            if confirmed:
                self.run_match_action(match_id, "mark_reviewed", confirmed=True)

        self.push_screen(ConfirmReviewScreen(row.match_name), on_confirm)

    def action_refresh(self) -> None:
        """Manually refresh data"""
        log("🔄 Manual refresh triggered")
        self.fetch_bracket()
        self.notify("Refreshing bracket...")
