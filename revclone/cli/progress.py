"""Clone progress display using rich."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.status import Status

from revclone.git.progress import ProgressMessage


class ConsoleDispatcher:
    """Shows progress labels as a transient rich status line."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)
        self._status: Optional[Status] = None

    def start(self, description: str):
        self._status = self.console.status(f"[bold blue]{description}")
        self._status.start()

    def send(self, message: ProgressMessage) -> None:
        if self._status is not None:
            self._status.update(f"[bold blue]{escape(message.message)}")

    def finish(self):
        if self._status is not None:
            self._status.stop()
            self._status = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finish()
