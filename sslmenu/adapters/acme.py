# sslmenu/adapters/acme.py
import logging
import requests
from sslmenu.adapters.process import CommandResult, run
from sslmenu.config import Settings

logger = logging.getLogger(__name__)


class AcmeClient:
    """Thin argv builder over the acme.sh script, one method per subcommand."""
    def __init__(self, settings: Settings):
        self.settings = settings
        self.acme_sh = settings.acme_sh

    # ------------------ argv helpers ------------------
    def _acme(self, *args: str) -> list[str]:
        argv = [self.acme_sh]
        if self.settings.acme_home:
            argv += ["--home", self.settings.acme_home]
        argv += list(args)
        if self.settings.acme_debug:
            argv += ["--debug", "2"]
        return argv

    def _ecc(self) -> list[str]:
        return ["--ecc"] if self.settings.ecc else []

    # ------------------ bootstrap ------------------
    def install(self) -> CommandResult:
        url = self.settings.install_url
        argv = ["sh"]
        if self.settings.account_email:
            argv += ["-s", f"email={self.settings.account_email}"]
        try:
            r = requests.get(url, timeout=self.settings.install_timeout)
            r.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error("acme.sh installer download failed from %s: %s", url, e)
            return CommandResult(argv=argv, returncode=1, stderr=f"download of {url} failed: {e}")
        return run(argv, input=r.text)

    def enable_auto_upgrade(self) -> CommandResult:
        return run(self._acme("--upgrade", "--auto-upgrade"))

    def set_default_ca(self, server: str) -> CommandResult:
        return run(self._acme("--set-default-ca", "--server", server))

    # ------------------ certificate lifecycle ------------------
    def issue(self, domain: str, key_length: str) -> CommandResult:
        return run(self._acme("--issue", "-d", domain, "--standalone", "--keylength", key_length))

    def install_cert(self, domain: str, fullchain_file: str, key_file: str) -> CommandResult:
        return run(self._acme("--install-cert", "-d", domain, *self._ecc(),
                              "--fullchain-file", fullchain_file,
                              "--key-file", key_file))

    def revoke(self, domain: str) -> CommandResult:
        return run(self._acme("--revoke", "-d", domain, *self._ecc()))

    def remove(self, domain: str) -> CommandResult:
        return run(self._acme("--remove", "-d", domain, *self._ecc()))

    def renew(self, domain: str, force: bool = True) -> CommandResult:
        args = ["--renew", "-d", domain]
        if force:
            args.append("--force")
        return run(self._acme(*args, *self._ecc()))
