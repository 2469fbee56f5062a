# sslmenu/errors.py
from datetime import datetime
import re

# process exit codes for fatal setup steps
EXIT_NOT_ROOT = 1
EXIT_BAD_CONFIG = 2
EXIT_HELPER_INSTALL = 3
EXIT_FIREWALL = 4
EXIT_ACME_INSTALL = 5
EXIT_ACME_UPGRADE = 6
EXIT_ACME_SET_CA = 7
EXIT_INTERRUPTED = 130


class SslMenuError(RuntimeError):
    pass


class SetupError(SslMenuError):
    """A host or acme.sh preparation step failed. Fatal to the whole process."""
    def __init__(self, message: str, exit_code: int):
        super().__init__(message)
        self.exit_code = exit_code


class OperationError(SslMenuError):
    """An issue/install/revoke/renew sub-step failed. Reported, then the menu continues."""
    def __init__(self, message: str, step: str, domain: str | None = None):
        super().__init__(message)
        self.step = step
        self.domain = domain


class AcmeRateLimitError(OperationError):
    """Raised when the CA rate-limits duplicate certificates for the same domain."""
    def __init__(self, step: str, domain: str, next_retry_iso: str | None, raw_out: str, raw_err: str):
        msg = f"CA rate limit reached for {domain}"
        msg += f"; retry after {next_retry_iso}" if next_retry_iso else "; try again later"
        super().__init__(msg, step, domain)
        self.next_retry_iso = next_retry_iso
        self.raw_out = raw_out
        self.raw_err = raw_err


def is_rate_limited(text: str) -> bool:
    return ("acme:error:rateLimited" in text) or ("too many certificates" in text)


def extract_retry_after_iso(text: str) -> str | None:
    m = re.search(r"retry after\s+([0-9]{4}-[0-9]{2}-[0-9]{2}\s+[0-9]{2}:[0-9]{2}:[0-9]{2})\s+UTC", text, re.I)
    if not m:
        return None
    try:
        dt = datetime.strptime(m.group(1), "%Y-%m-%d %H:%M:%S")
    except ValueError:
        return None
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")
