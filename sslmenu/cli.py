# sslmenu/cli.py
import argparse
import logging
import sys
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from sslmenu.adapters.acme import AcmeClient
from sslmenu.adapters.host import HostSystem
from sslmenu.config import Settings
from sslmenu.errors import EXIT_BAD_CONFIG, EXIT_NOT_ROOT
from sslmenu.menu import MenuDriver
from sslmenu.orchestrator import Orchestrator
from sslmenu.ui import Reporter


def build_parser() -> argparse.ArgumentParser:
    return argparse.ArgumentParser(
        prog="ssl-menu",
        description="Interactively obtain, revoke and force-renew TLS certificates with acme.sh. "
                    "Must run as root. Configuration is read from SSLMENU_* environment variables.",
    )


def setup_logging(settings: Settings, console: Console):
    handlers: list[logging.Handler] = [RichHandler(console=console, show_path=False)]
    if settings.log_file:
        fh = logging.FileHandler(settings.log_file)
        fh.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s"))
        handlers.append(fh)
    logging.basicConfig(level=settings.log_level, format="%(message)s", handlers=handlers, force=True)


def run(argv=None, console: Console | None = None, host: HostSystem | None = None, read_line=input) -> int:
    build_parser().parse_args(argv)

    console = console or Console(highlight=False)
    reporter = Reporter(console)
    try:
        settings = Settings.from_env()
    except ValidationError as e:
        reporter.err(f"Invalid configuration: {e}")
        return EXIT_BAD_CONFIG
    try:
        setup_logging(settings, console)
    except OSError as e:
        reporter.err(f"Invalid configuration: cannot open log file {settings.log_file}: {e}")
        return EXIT_BAD_CONFIG

    reporter.banner()
    host = host or HostSystem()
    if not host.is_root():
        reporter.err("Error: This script must be run as root.")
        return EXIT_NOT_ROOT
    reporter.ok("Running as root, continuing...")

    orc = Orchestrator(settings, host, AcmeClient(settings), reporter)
    return MenuDriver(orc, reporter, read_line).run()


def main(argv=None):
    sys.exit(run(argv))
