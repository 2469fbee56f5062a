# sslmenu/ui.py
from rich.console import Console
from rich.markup import escape

BANNER = [
    "=================================================================",
    "This script will automatically Obtain, Revoke, Renew your SSL Certificate.",
    "Tested on: Ubuntu 20+, Debian 11+",
    "Root access is required.",
    "=================================================================",
]


class Reporter:
    """Operator-facing messages. Everything passed in is escaped, so domains print verbatim."""
    def __init__(self, console: Console | None = None):
        self.console = console or Console(highlight=False)

    def ok(self, msg: str):
        self.console.print(f"[green][*] ----- {escape(msg)}[/green]")

    def err(self, msg: str):
        self.console.print(f"[red][*] ----- {escape(msg)}[/red]")

    def warn(self, msg: str):
        self.console.print(f"[yellow][*] ----- {escape(msg)}[/yellow]")

    def info(self, msg: str = ""):
        self.console.print(escape(msg))

    def banner(self):
        self.info()
        for line in BANNER:
            self.ok(line)
        self.info()
