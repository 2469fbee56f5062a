# sslmenu/menu.py
import enum
import logging
from typing import Callable
from sslmenu.domain import validate_domain
from sslmenu.errors import EXIT_INTERRUPTED, OperationError, SetupError

logger = logging.getLogger(__name__)


class MenuState(enum.Enum):
    CHOOSE = "choose"
    DOMAIN = "domain"
    EXIT = "exit"


# choice -> (menu label, domain prompt, orchestrator method)
ACTIONS = {
    "1": ("Get SSL", "Enter your domain name (e.g., my.example.com): ", "request_certificate"),
    "2": ("Revoke SSL", "Enter the domain name of the SSL to revoke (e.g., my.example.com): ", "revoke_certificate"),
    "3": ("Force Renew SSL", "Enter the domain name for the SSL to force renew (e.g., my.example.com): ", "renew_certificate"),
}
EXIT_CHOICES = ("4", "q")


class MenuDriver:
    """
    CHOOSE --1/2/3--> DOMAIN --(dispatch)--> CHOOSE
    CHOOSE --4/q/EOF--> EXIT
    A SetupError also ends in EXIT, with its exit code.
    """
    def __init__(self, orchestrator, reporter, read_line: Callable[[str], str] = input):
        self.orc = orchestrator
        self.reporter = reporter
        self.read_line = read_line
        self.state = MenuState.CHOOSE
        self.choice: str | None = None
        self.exit_code = 0

    def show_menu(self):
        self.reporter.info()
        self.reporter.info("Choose an option:")
        for key, (label, _, _) in ACTIONS.items():
            self.reporter.info(f"{key}. {label}")
        self.reporter.info("4. Exit")

    def step(self):
        if self.state is MenuState.CHOOSE:
            self.show_menu()
            choice = self.read_line("Enter choice: ").strip().lower()
            if choice in EXIT_CHOICES:
                self.reporter.ok("Script Exited.")
                self.exit_code = 0
                self.state = MenuState.EXIT
            elif choice in ACTIONS:
                self.choice = choice
                self.state = MenuState.DOMAIN
            else:
                self.reporter.err("Invalid choice, please choose from the list.")
        elif self.state is MenuState.DOMAIN:
            _, prompt, method = ACTIONS[self.choice]
            domain = self.read_line(prompt).strip()
            self.state = MenuState.CHOOSE
            if not validate_domain(domain, self.reporter):
                self.reporter.err("Invalid domain name. Please enter a valid domain name.")
                return
            self._dispatch(method, domain)

    def _dispatch(self, method: str, domain: str):
        try:
            getattr(self.orc, method)(domain)
        except OperationError as e:
            logger.info("%s failed at step %s for %s", method, e.step, domain)
            self.reporter.err(str(e))
        except SetupError as e:
            self.reporter.err(str(e))
            self.exit_code = e.exit_code
            self.state = MenuState.EXIT

    def run(self) -> int:
        try:
            while self.state is not MenuState.EXIT:
                self.step()
        except EOFError:
            self.reporter.info()
            self.reporter.ok("Script Exited.")
            return 0
        except KeyboardInterrupt:
            self.reporter.info()
            self.reporter.err("Interrupted.")
            return EXIT_INTERRUPTED
        return self.exit_code
