# sslmenu/domain.py
import re

# labels of 1-63 chars (alnum at both ends), each followed by ".", then an alphabetic TLD
_HOSTNAME = re.compile(r"^([A-Za-z0-9]([A-Za-z0-9\-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,}$")
MAX_HOSTNAME_LEN = 253


def is_valid_domain(name: str) -> bool:
    if not isinstance(name, str) or len(name) > MAX_HOSTNAME_LEN:
        return False
    return _HOSTNAME.fullmatch(name) is not None


def validate_domain(name: str, reporter) -> bool:
    """Check `name` and tell the operator the verdict. Never raises."""
    if is_valid_domain(name):
        reporter.ok(f"Domain validation passed for: {name}")
        return True
    reporter.err(f"Validation Error: The domain '{name}' is not in a valid format.")
    return False
