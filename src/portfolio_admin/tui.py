from __future__ import annotations

import logging
import webbrowser
from collections.abc import Coroutine, Iterable, Mapping
from pathlib import Path
from typing import Any

import httpx
from textual import events, on
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen, Screen
from textual.widget import Widget
from textual.widgets import (
    Button,
    Checkbox,
    Footer,
    Header,
    Input,
    Label,
    Markdown,
    Static,
    TabbedContent,
    TabPane,
    TextArea,
)
from textual.worker import Worker, WorkerState

from portfolio_admin.config import AdminSettings, load_settings
from portfolio_admin.constants.resource_schemas import EDITABLE_SCHEMAS, PROFILE_FIELDS
from portfolio_admin.models.cards import Card
from portfolio_admin.models.schema import FieldSpec, InputKind
from portfolio_admin.services.bootstrap import build_services
from portfolio_admin.services.context import UIContext
from portfolio_admin.services.modal import ModalBody, ModalController
from portfolio_admin.tui_rendering import (
    render_card_markdown,
    render_counts_markdown,
    render_empty_state,
)
from portfolio_admin.utils.display import prompt_for_image_file, prompt_for_resume_file

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# WIDGETS
# ---------------------------------------------------------------------------


class RecordActionButton(Button):
    """A button that only carries data; the app routes presses by kind/action."""

    def __init__(
        self,
        label: str,
        *,
        kind: str,
        action: str,
        record_id: str | None = None,
        payload: Mapping[str, Any] | None = None,
        variant: str = "default",
    ) -> None:
        super().__init__(label, variant=variant, classes="record-action")
        self.record_kind = kind
        self.record_action = action
        self.record_id = record_id
        self.record_payload = dict(payload or {})


class RecordCard(Vertical):
    def __init__(self, card: Card) -> None:
        super().__init__(classes="item-card")
        self._card = card

    def compose(self) -> ComposeResult:
        yield Markdown(render_card_markdown(self._card))
        with Horizontal(classes="item-actions"):
            for action in self._card.actions:
                yield RecordActionButton(
                    action.label,
                    kind=self._card.kind,
                    action=action.action,
                    record_id=self._card.record_id,
                    payload=action.payload,
                    variant=action.variant,
                )


class ResourceList(VerticalScroll):
    """List region for one kind."""

    def show_cards(self, kind: str, cards: list[Card]) -> None:
        # A load that lands after the app started shutting down is ignored.
        if not self.is_attached:
            return
        self.remove_children()
        if not cards:
            self.mount(Static(render_empty_state(kind), classes="empty-state"))
            return
        self.mount_all(RecordCard(card) for card in cards)


class ResourcePanel(Vertical):
    def __init__(self, kind: str, add_label: str | None, *, refreshable: bool = False) -> None:
        super().__init__(classes="resource-panel")
        self._kind = kind
        self._add_label = add_label
        self._refreshable = refreshable

    def compose(self) -> ComposeResult:
        with Horizontal(classes="panel-toolbar"):
            if self._add_label:
                yield RecordActionButton(
                    self._add_label, kind=self._kind, action="add", variant="primary"
                )
            if self._refreshable:
                yield RecordActionButton("Refresh", kind=self._kind, action="refresh")
        yield ResourceList(id=f"{self._kind}-list")


class DashboardPanel(Markdown):
    def render_counts(self, counts: Mapping[str, int]) -> None:
        if self.is_attached:
            self.update(render_counts_markdown(counts))


def _field_widgets(spec: FieldSpec, value: Any, widget_id: str) -> Iterable[Widget]:
    """Label and input widget(s) for one form field."""
    if spec.input is InputKind.CHECKBOX:
        yield Checkbox(spec.label, value=bool(value), id=widget_id)
        return

    yield Label(f"{spec.label} *" if spec.required else spec.label, classes="field-label")
    text = "" if value is None else str(value)
    if spec.input is InputKind.TEXTAREA:
        yield TextArea(text, id=widget_id, classes="field-textarea")
    else:
        yield Input(value=text, placeholder=spec.placeholder, id=widget_id)


def _read_widget(widget: Widget) -> Any:
    if isinstance(widget, Checkbox):
        return widget.value
    if isinstance(widget, TextArea):
        return widget.text
    if isinstance(widget, Input):
        return widget.value
    return None


class ProfilePanel(VerticalScroll):
    """Profile form plus image and resume upload rows."""

    def compose(self) -> ComposeResult:
        for spec in PROFILE_FIELDS:
            yield from _field_widgets(spec, "", f"profile-{spec.name}")
        yield Button("Save Profile", id="profile-save", variant="primary")

        yield Label("Profile Image", classes="field-label")
        yield Static("(no image)", id="profile-image-preview")
        with Horizontal(classes="file-row"):
            yield Input(placeholder="Path to image", id="profile-image-path")
            yield Button("Browse…", id="profile-image-browse")
            yield Button("Upload Image", id="profile-image-upload", variant="success")

        yield Label("Resume", classes="field-label")
        yield Static("", id="profile-resume-link")
        with Horizontal(classes="file-row"):
            yield Input(placeholder="Path to resume", id="profile-resume-path")
            yield Button("Browse…", id="profile-resume-browse")
            yield Button("Upload Resume", id="profile-resume-upload", variant="success")

    def on_mount(self) -> None:
        self.query_one("#profile-resume-link", Static).display = False

    def populate(self, values: dict[str, Any]) -> None:
        if not self.is_attached:
            return
        for spec in PROFILE_FIELDS:
            widget = self.query_one(f"#profile-{spec.name}")
            text = str(values.get(spec.name) or "")
            if isinstance(widget, TextArea):
                widget.load_text(text)
            elif isinstance(widget, Input):
                widget.value = text

    def values(self) -> dict[str, Any]:
        return {
            spec.name: _read_widget(self.query_one(f"#profile-{spec.name}"))
            for spec in PROFILE_FIELDS
        }

    def set_image(self, url: str) -> None:
        if self.is_attached:
            self.query_one("#profile-image-preview", Static).update(url or "(no image)")

    def set_resume(self, url: str | None) -> None:
        if not self.is_attached:
            return
        link = self.query_one("#profile-resume-link", Static)
        link.update(url or "")
        link.display = url is not None


# ---------------------------------------------------------------------------
# SCREENS
# ---------------------------------------------------------------------------


class ResourceFormScreen(ModalScreen[None]):
    """The modal slot's content: title, optional detail, fields and actions."""

    BINDINGS = [("escape", "close_modal", "Close")]

    def __init__(self, modal: ModalController, title: str, body: ModalBody) -> None:
        super().__init__()
        self._modal = modal
        self._title = title
        self._body = body

    def compose(self) -> ComposeResult:
        with Vertical(id="modal-card"):
            with Horizontal(id="modal-header"):
                yield Label(self._title, id="modal-title")
                yield Button("✕", id="modal-close")
            with VerticalScroll(id="modal-form"):
                if self._body.markdown:
                    yield Markdown(self._body.markdown)
                for spec in self._body.fields:
                    value = self._body.values.get(spec.name)
                    if spec.input is InputKind.FILE:
                        yield Label(spec.label, classes="field-label")
                        with Horizontal(classes="file-row"):
                            yield Input(
                                value=str(value or ""),
                                placeholder=spec.placeholder,
                                id=f"field-{spec.name}",
                            )
                            yield Button("Browse…", id=f"browse-{spec.name}", classes="browse")
                    else:
                        yield from _field_widgets(spec, value, f"field-{spec.name}")
            with Horizontal(id="modal-actions"):
                for index, action in enumerate(self._body.actions):
                    yield Button(
                        action.label,
                        id=f"modal-action-{index}",
                        variant=action.variant,
                        classes="modal-action",
                    )

    def collect_values(self) -> dict[str, Any]:
        return {
            spec.name: _read_widget(self.query_one(f"#field-{spec.name}"))
            for spec in self._body.fields
        }

    @on(Input.Submitted)
    def suppress_native_submit(self, event: Input.Submitted) -> None:
        # Enter never saves; only the action buttons persist anything.
        event.stop()

    @on(Button.Pressed, ".modal-action")
    def handle_action(self, event: Button.Pressed) -> None:
        event.stop()
        index = int(str(event.button.id).rsplit("-", 1)[-1])
        self.app.run_worker(
            self._modal.submit(index, self.collect_values()),
            group="actions",
            exit_on_error=False,
        )

    @on(Button.Pressed, ".browse")
    def handle_browse(self, event: Button.Pressed) -> None:
        event.stop()
        name = str(event.button.id).removeprefix("browse-")
        selected = prompt_for_image_file()
        if selected is not None:
            self.query_one(f"#field-{name}", Input).value = str(selected)

    @on(Button.Pressed, "#modal-close")
    def handle_close(self, event: Button.Pressed) -> None:
        event.stop()
        self._modal.close()

    def action_close_modal(self) -> None:
        self._modal.close()

    def on_click(self, event: events.Click) -> None:
        widget, _ = self.get_widget_at(event.screen_x, event.screen_y)
        if widget is self:
            self._modal.close()


class ConfirmScreen(ModalScreen[bool]):
    BINDINGS = [("escape", "cancel", "Cancel")]

    def __init__(self, message: str) -> None:
        super().__init__()
        self._message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-card"):
            yield Label(self._message, id="confirm-message")
            with Horizontal(id="confirm-actions"):
                yield Button("Delete", id="confirm-yes", variant="error")
                yield Button("Cancel", id="confirm-no")

    @on(Button.Pressed, "#confirm-yes")
    def handle_yes(self, event: Button.Pressed) -> None:
        event.stop()
        self.dismiss(True)

    @on(Button.Pressed, "#confirm-no")
    def handle_no(self, event: Button.Pressed) -> None:
        event.stop()
        self.dismiss(False)

    def action_cancel(self) -> None:
        self.dismiss(False)


class LoginScreen(Screen[None]):
    """The login surface every expired or missing session lands on."""

    def compose(self) -> ComposeResult:
        with Container(id="auth-screen"):
            with Container(id="auth-card"):
                yield Static("Portfolio Admin", id="auth-title")
                yield Input(placeholder="Username", id="auth-username")
                yield Input(placeholder="Password", password=True, id="auth-password")
                yield Button("Log In", id="auth-btn-submit", variant="success")
                yield Label("", id="auth-status")

    def on_mount(self) -> None:
        self.query_one("#auth-username", Input).focus()

    @on(Button.Pressed, "#auth-btn-submit")
    @on(Input.Submitted, "#auth-password")
    def handle_submit(self, event: events.Event) -> None:
        event.stop()
        status = self.query_one("#auth-status", Label)
        username = self.query_one("#auth-username", Input).value.strip()
        password = self.query_one("#auth-password", Input).value

        if not username or not password:
            status.update("Username and password are required.")
            return

        status.update("Logging in...")
        app = self.app
        if isinstance(app, PortfolioAdminTUI):
            app.run_worker(
                app.attempt_login(username, password),
                group="auth",
                exclusive=True,
                exit_on_error=False,
            )

    def show_status(self, text: str) -> None:
        self.query_one("#auth-status", Label).update(text)


# ---------------------------------------------------------------------------
# VIEW ADAPTERS
# ---------------------------------------------------------------------------


class TuiNotificationView:
    """Draws the single notification slot as a Textual toast."""

    _SEVERITY = {"success": "information", "error": "error"}

    def __init__(self, app: App[Any], timeout: float) -> None:
        self._app = app
        # Dismissal is driven by NotificationCenter; the toast only outlives it.
        self._timeout = timeout + 1

    def show_notification(self, message: str, kind: str) -> None:
        self._app.clear_notifications()
        self._app.notify(
            message,
            severity=self._SEVERITY.get(kind, "information"),
            timeout=self._timeout,
        )

    def clear_notification(self) -> None:
        self._app.clear_notifications()


class TuiModalView:
    def __init__(self, app: App[Any]) -> None:
        self._app = app
        self._modal: ModalController | None = None
        self._screen: ResourceFormScreen | None = None

    def bind(self, modal: ModalController) -> None:
        self._modal = modal

    def show(self, title: str, body: ModalBody) -> None:
        if self._modal is None:
            raise RuntimeError("TuiModalView.show called before bind()")
        self._dismiss_current()
        self._screen = ResourceFormScreen(self._modal, title, body)
        self._app.push_screen(self._screen)

    def hide(self) -> None:
        self._dismiss_current()

    def _dismiss_current(self) -> None:
        screen, self._screen = self._screen, None
        if screen is not None and screen.is_current:
            screen.dismiss()


class TuiNavigator:
    def __init__(self, app: PortfolioAdminTUI) -> None:
        self._app = app

    def redirect_to_login(self) -> None:
        self._app.show_login()


# ---------------------------------------------------------------------------
# APP
# ---------------------------------------------------------------------------


class PortfolioAdminTUI(App[None]):
    """Terminal admin dashboard for the portfolio content platform."""

    TITLE = "Portfolio Admin"

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("r", "reload", "Reload"),
    ]

    CSS = """
Screen {
    layout: vertical;
    background: $background;
}

/* Login surface */
#auth-screen {
    height: 1fr;
    align-horizontal: center;
    align-vertical: middle;
}

#auth-card {
    padding: 2;
    border: heavy $primary;
    background: $panel;
    width: 44;
    height: auto;
}

#auth-card Static {
    text-align: center;
    margin-bottom: 1;
}

#auth-card Button,
#auth-card Input {
    width: 100%;
    margin-top: 1;
}

#middle {
    height: 1fr;
    layout: horizontal;
}

#sidebar {
    width: 26;
    padding: 1 2;
    border: heavy $primary;
    background: $panel;
}

#sidebar Button {
    margin-top: 1;
    width: 100%;
}

#title {
    text-align: center;
    margin-bottom: 1;
}

#sections {
    border: heavy $primary;
    background: $surface;
}

.panel-toolbar {
    height: auto;
    margin-bottom: 1;
}

.panel-toolbar Button {
    margin-right: 1;
}

.item-card {
    height: auto;
    border: round $primary-darken-2;
    padding: 0 1;
    margin-bottom: 1;
}

.item-actions {
    height: auto;
}

.item-actions Button {
    min-width: 10;
    margin-right: 1;
}

.empty-state {
    color: $text-muted;
    padding: 1;
}

.field-label {
    margin-top: 1;
}

.field-textarea {
    height: 6;
}

.file-row {
    height: auto;
}

.file-row Input {
    width: 1fr;
}

/* Modal slot */
ResourceFormScreen, ConfirmScreen {
    align: center middle;
}

#modal-card {
    width: 80;
    max-height: 90%;
    height: auto;
    border: heavy $primary;
    background: $panel;
    padding: 1 2;
}

#modal-header {
    height: auto;
}

#modal-title {
    width: 1fr;
    text-style: bold;
}

#modal-form {
    height: auto;
    max-height: 30;
}

#modal-actions, #confirm-actions {
    height: auto;
    margin-top: 1;
}

#confirm-card {
    width: 60;
    height: auto;
    border: heavy $error;
    background: $panel;
    padding: 1 2;
}
"""

    def __init__(
        self,
        settings: AdminSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__()
        self.settings = settings or load_settings()
        self._modal_view = TuiModalView(self)
        self.ui_context = UIContext.create(
            self.settings,
            TuiNavigator(self),
            self.confirm,
            notification_view=TuiNotificationView(self, self.settings.notification_seconds),
            modal_view=self._modal_view,
            transport=transport,
        )
        self._modal_view.bind(self.ui_context.modal)
        self.services = build_services(self.ui_context)

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="middle"):
            with Vertical(id="sidebar"):
                yield Static("Portfolio\nAdmin", id="title")
                yield Button("View Portfolio", id="btn-view-portfolio")
                yield Button("Log Out", id="btn-logout")
                yield Button("Exit", id="btn-exit", variant="error")
            with TabbedContent(initial="dashboard", id="sections"):
                with TabPane("Dashboard", id="dashboard"):
                    yield DashboardPanel(render_counts_markdown({}), id="dashboard-counts")
                with TabPane("Profile", id="profile"):
                    yield ProfilePanel(id="profile-panel")
                for schema in EDITABLE_SCHEMAS:
                    with TabPane(schema.kind.capitalize(), id=schema.kind):
                        yield ResourcePanel(schema.kind, f"Add {schema.title}")
                with TabPane("Messages", id="messages"):
                    yield ResourcePanel("messages", None, refreshable=True)
        yield Footer()

    def on_mount(self) -> None:
        for controller in self.services.controllers:
            controller.attach(self.query_one(f"#{controller.kind}-list", ResourceList))
        self.services.dashboard.attach(self.query_one(DashboardPanel))
        self.services.profile.attach(self.query_one(ProfilePanel))
        self._run(self.services.start(self._bind_ui), group="bootstrap")

    async def on_unmount(self) -> None:
        await self.services.aclose()

    def _bind_ui(self) -> None:
        self.query_one("#btn-view-portfolio", Button).display = bool(self.settings.frontend_url)

    def _run(self, work: Coroutine[Any, Any, Any], group: str = "actions") -> None:
        self.run_worker(work, group=group, exit_on_error=False)

    # ---------------------------------------------------------------------
    # SESSION
    # ---------------------------------------------------------------------

    def show_login(self) -> None:
        self.ui_context.modal.close()
        if not isinstance(self.screen, LoginScreen):
            self.push_screen(LoginScreen())

    async def attempt_login(self, username: str, password: str) -> None:
        if not await self.services.session.login(username, password):
            if isinstance(self.screen, LoginScreen):
                self.screen.show_status("Login failed.")
            return
        if isinstance(self.screen, LoginScreen):
            self.pop_screen()
        await self.services.start(self._bind_ui)

    async def confirm(self, message: str) -> bool:
        """Ask before a destructive action. Must run inside a worker."""
        return bool(await self.push_screen_wait(ConfirmScreen(message)))

    # ---------------------------------------------------------------------
    # EVENTS
    # ---------------------------------------------------------------------

    @on(Button.Pressed, ".record-action")
    def handle_record_action(self, event: Button.Pressed) -> None:
        button = event.button
        if not isinstance(button, RecordActionButton):
            return
        self._run(
            self.services.dispatcher.dispatch(
                button.record_kind,
                button.record_action,
                button.record_id,
                **button.record_payload,
            )
        )

    @on(Button.Pressed, "#profile-save")
    def handle_profile_save(self) -> None:
        values = self.query_one(ProfilePanel).values()
        self._run(self.services.profile.save(values))

    @on(Button.Pressed, "#profile-image-browse")
    def handle_image_browse(self) -> None:
        selected = prompt_for_image_file()
        if selected is not None:
            self.query_one("#profile-image-path", Input).value = str(selected)

    @on(Button.Pressed, "#profile-resume-browse")
    def handle_resume_browse(self) -> None:
        selected = prompt_for_resume_file()
        if selected is not None:
            self.query_one("#profile-resume-path", Input).value = str(selected)

    @on(Button.Pressed, "#profile-image-upload")
    def handle_image_upload(self) -> None:
        path = self.query_one("#profile-image-path", Input).value.strip()
        if not path:
            self.ui_context.notify("Choose an image first.", "error")
            return
        self._run(self.services.profile.upload_image(Path(path)))

    @on(Button.Pressed, "#profile-resume-upload")
    def handle_resume_upload(self) -> None:
        path = self.query_one("#profile-resume-path", Input).value.strip()
        if not path:
            self.ui_context.notify("Choose a resume file first.", "error")
            return
        self._run(self.services.profile.upload_resume(Path(path)))

    @on(Button.Pressed, "#btn-view-portfolio")
    def handle_view_portfolio(self) -> None:
        if self.settings.frontend_url:
            webbrowser.open(self.settings.frontend_url)

    @on(Button.Pressed, "#btn-logout")
    def handle_logout(self) -> None:
        self._run(self.services.logout(), group="auth")

    @on(Button.Pressed, "#btn-exit")
    def exit_app(self) -> None:
        self.exit()

    def action_reload(self) -> None:
        if self.services.ready:
            self._run(self.services.load_all(), group="bootstrap")

    @on(Worker.StateChanged)
    def worker_state(self, event: Worker.StateChanged) -> None:
        if event.state == WorkerState.ERROR:
            logger.error(
                "Worker %s failed", event.worker.name, exc_info=event.worker.error
            )


def main(settings: AdminSettings | None = None) -> None:
    app = PortfolioAdminTUI(settings)
    app.run()


if __name__ == "__main__":
    main()
