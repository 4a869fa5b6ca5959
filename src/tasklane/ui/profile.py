"""Profile screen: display name, email and password."""

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, Footer, Input, Label, Static

from tasklane.controllers import ChangePassword, EditProfile, MutationController


class ProfileScreen(Screen):
    """Two independent forms: profile details and password change."""

    CSS = """
    ProfileScreen {
        padding: 1 2;
    }
    ProfileScreen #forms {
        height: auto;
    }
    ProfileScreen .form {
        width: 1fr;
        height: auto;
        border: round $primary-darken-2;
        padding: 0 1;
        margin-right: 1;
    }
    ProfileScreen .form-title {
        text-style: bold;
    }
    ProfileScreen #account {
        color: $text-muted;
        margin-bottom: 1;
    }
    ProfileScreen Button {
        margin-top: 1;
    }
    """

    def _account(self) -> str:
        session = self.app.session
        user = session.current_user
        role = user.role.value if user and user.role else "member"
        return f"{session.display_name} ({role})"

    def compose(self) -> ComposeResult:
        session = self.app.session
        yield Static(self._account(), id="account", markup=False)
        with Horizontal(id="forms"):
            with Vertical(classes="form"):
                yield Static("Profile Information", classes="form-title")
                yield Label("Name")
                yield Input(session.display_name, id="name")
                yield Label("Email")
                yield Input(session.email, id="email")
                yield Button("Save Changes", id="save-profile", variant="primary")
            with Vertical(classes="form"):
                yield Static("Change Password", classes="form-title")
                yield Label("Current password")
                yield Input(password=True, id="current")
                yield Label("New password")
                yield Input(password=True, id="new")
                yield Label("Confirm new password")
                yield Input(password=True, id="confirm")
                yield Button("Update Password", id="change-password", variant="primary")
        yield Footer()

    def on_mount(self) -> None:
        app = self.app
        self.profile = EditProfile(app.session, app.gateway, self.notify, path=app.session_file, on_success=self._refresh)
        self.password = ChangePassword(app.gateway, self.notify, on_success=self._clear_passwords)

    def _refresh(self) -> None:
        self.query_one("#account", Static).update(self._account())

    def _clear_passwords(self) -> None:
        for field in ("#current", "#new", "#confirm"):
            self.query_one(field, Input).value = ""

    async def _run(self, controller: MutationController, button_id: str, **fields) -> None:
        button = self.query_one(button_id, Button)
        button.disabled = True
        try:
            await controller.submit(**fields)
        finally:
            button.disabled = False

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        match event.button.id:
            case "save-profile":
                await self._run(
                    self.profile,
                    "#save-profile",
                    name=self.query_one("#name", Input).value,
                    email=self.query_one("#email", Input).value,
                )
            case "change-password":
                await self._run(
                    self.password,
                    "#change-password",
                    current=self.query_one("#current", Input).value,
                    new=self.query_one("#new", Input).value,
                    confirm=self.query_one("#confirm", Input).value,
                )
