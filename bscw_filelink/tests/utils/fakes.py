"""
Scripted stand-ins for the host's popup window and vault prompt.
"""

from bscw_filelink.credentials.prompt import PasswordPromptBroker
from bscw_filelink.models.upload import Credentials


class ScriptedPopupLauncher:
    """
    Popup launcher answering each popup from a script.

    A string answer is submitted as the password, None closes the window.
    """

    def __init__(self, answers: list[str | None] | None = None) -> None:
        self.answers = list(answers or [])
        self.broker: PasswordPromptBroker | None = None
        self.opened: list[tuple[str, str, str]] = []
        self.closed: list[str] = []

    async def open(self, correlation_id: str, *, username: str, url: str) -> None:
        self.opened.append((correlation_id, username, url))
        if not self.answers:
            return
        answer = self.answers.pop(0)
        if answer is None:
            self.broker.window_closed(correlation_id)
        else:
            self.broker.submit_response(correlation_id, answer)

    async def close(self, correlation_id: str) -> None:
        self.closed.append(correlation_id)


class ScriptedVaultPrompter:
    """Vault prompter returning scripted credentials; None dismisses the prompt."""

    def __init__(self, answers: list[Credentials | None] | None = None) -> None:
        self.answers = list(answers or [])
        self.calls: list[tuple[str, str, str]] = []

    async def __call__(self, title: str, text: str, origin: str) -> Credentials | None:
        self.calls.append((title, text, origin))
        if not self.answers:
            return None
        return self.answers.pop(0)
