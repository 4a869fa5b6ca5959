"""Sign-in and registration screen."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, ContentSwitcher, Input, Label, Static

from tasklane.api import LoginResult
from tasklane.controllers import Login, MutationController, Register


class LoginScreen(Screen[LoginResult]):
    """Dismisses with the LoginResult once the user has signed in or registered."""

    BINDINGS = [Binding("ctrl+q", "app.quit", "Quit")]

    CSS = """
    LoginScreen {
        align: center middle;
    }
    LoginScreen #panel {
        width: 60;
        height: auto;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }
    LoginScreen #brand {
        text-style: bold;
        text-align: center;
        width: 100%;
    }
    LoginScreen ContentSwitcher {
        height: auto;
    }
    LoginScreen ContentSwitcher > Vertical {
        height: auto;
    }
    LoginScreen Label {
        margin-top: 1;
    }
    LoginScreen .actions {
        height: 3;
        margin-top: 1;
        align: right middle;
    }
    LoginScreen .actions Button {
        margin-left: 2;
    }
    """

    def compose(self) -> ComposeResult:
        with Vertical(id="panel"):
            yield Static("tasklane", id="brand")
            with ContentSwitcher(initial="login"):
                with Vertical(id="login"):
                    yield Label("Email")
                    yield Input(placeholder="you@example.com", id="login-email")
                    yield Label("Password")
                    yield Input(password=True, id="login-password")
                    with Horizontal(classes="actions"):
                        yield Button("Create account", id="show-register")
                        yield Button("Sign In", id="sign-in", variant="primary")
                with Vertical(id="register"):
                    yield Label("Username")
                    yield Input(id="register-username")
                    yield Label("Email")
                    yield Input(placeholder="you@example.com", id="register-email")
                    yield Label("Password")
                    yield Input(password=True, id="register-password")
                    yield Label("Confirm password")
                    yield Input(password=True, id="register-confirm")
                    with Horizontal(classes="actions"):
                        yield Button("Back to sign in", id="show-login")
                        yield Button("Create Account", id="sign-up", variant="primary")

    def on_mount(self) -> None:
        gateway = self.app.gateway
        self.login = Login(gateway, self.notify)
        self.register = Register(gateway, self.notify)
        self.query_one("#login-email", Input).focus()

    def _value(self, field_id: str) -> str:
        return self.query_one(f"#{field_id}", Input).value

    def show(self, form: str) -> None:
        self.query_one(ContentSwitcher).current = form
        self.query_one(f"#{form}-email" if form == "login" else "#register-username", Input).focus()

    async def _submit(self, controller: MutationController, button_id: str, **fields) -> None:
        button = self.query_one(button_id, Button)
        button.disabled = True
        try:
            ok = await controller.submit(**fields)
        finally:
            button.disabled = False
        if ok:
            self.dismiss(controller.result)

    async def sign_in(self) -> None:
        await self._submit(
            self.login, "#sign-in", email=self._value("login-email"), password=self._value("login-password")
        )

    async def sign_up(self) -> None:
        await self._submit(
            self.register,
            "#sign-up",
            username=self._value("register-username"),
            email=self._value("register-email"),
            password=self._value("register-password"),
            confirm=self._value("register-confirm"),
        )

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        match event.button.id:
            case "sign-in":
                await self.sign_in()
            case "sign-up":
                await self.sign_up()
            case "show-register":
                self.show("register")
            case "show-login":
                self.show("login")

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        if self.query_one(ContentSwitcher).current == "login":
            await self.sign_in()
        else:
            await self.sign_up()
