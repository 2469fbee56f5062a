# sslmenu/adapters/process.py
import logging
import shlex
import subprocess
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class CommandResult(BaseModel):
    argv: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def cmd(self) -> str:
        return " ".join(shlex.quote(a) for a in self.argv)

    def describe(self) -> str:
        return f"{self.cmd}\nExit code: {self.returncode}\n--- stdout ---\n{self.stdout}\n--- stderr ---\n{self.stderr}"


def run(argv: list[str], input: str | None = None) -> CommandResult:
    """Run argv to completion. A non-zero exit is a result, not an exception."""
    cmd = " ".join(shlex.quote(a) for a in argv)
    logger.debug("exec: %s", cmd)
    try:
        p = subprocess.run(argv, capture_output=True, text=True, input=input, shell=False)
    except FileNotFoundError as e:
        logger.debug("command not found: %s", argv[0])
        return CommandResult(argv=argv, returncode=127, stderr=str(e))
    except PermissionError as e:
        logger.debug("permission denied: %s", argv[0])
        return CommandResult(argv=argv, returncode=126, stderr=str(e))
    res = CommandResult(argv=argv, returncode=p.returncode, stdout=p.stdout or "", stderr=p.stderr or "")
    if not res.ok:
        logger.debug("command failed (%s): %s", res.returncode, cmd)
    return res
