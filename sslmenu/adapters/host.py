# sslmenu/adapters/host.py
import os
import shutil
from sslmenu.adapters.process import CommandResult, run


class HostSystem:
    """
    Host-level effects used before issuance:
      - package presence probe / apt install
      - ufw status and port rules
      - recursive ownership change of certificate directories
    Assumes it already runs as root, so nothing is wrapped in sudo.
    """

    def is_root(self) -> bool:
        return os.geteuid() == 0

    def command_exists(self, name: str) -> bool:
        return shutil.which(name) is not None

    def refresh_package_index(self) -> CommandResult:
        return run(["apt", "update", "-q"])

    def install_package(self, name: str) -> CommandResult:
        return run(["apt", "install", "-y", name])

    def firewall_active(self) -> bool:
        res = run(["ufw", "status"])
        if not res.ok:
            return False
        # "Status: inactive" also contains "active"
        return any(line.strip().lower() == "status: active" for line in res.stdout.splitlines())

    def allow_port(self, port: int) -> CommandResult:
        return run(["ufw", "allow", str(port)])

    def chown_tree(self, path: str, owner: str, group: str) -> CommandResult:
        return run(["chown", "-R", f"{owner}:{group}", path])

    def cert_not_after(self, cert_path: str) -> CommandResult:
        return run(["openssl", "x509", "-in", cert_path, "-noout", "-enddate"])
