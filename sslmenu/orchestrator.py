# sslmenu/orchestrator.py
import logging
import os
import shutil
from datetime import datetime
from sslmenu.adapters.process import CommandResult
from sslmenu.config import Settings
from sslmenu.errors import (
    AcmeRateLimitError, OperationError, SetupError,
    EXIT_ACME_INSTALL, EXIT_ACME_SET_CA, EXIT_ACME_UPGRADE, EXIT_FIREWALL, EXIT_HELPER_INSTALL,
    extract_retry_after_iso, is_rate_limited,
)
from sslmenu.records import CertificateRecord

logger = logging.getLogger(__name__)


class Orchestrator:
    """
    Certificate lifecycle for one domain at a time.

    Issue:  prepare_environment -> bootstrap_acme -> issue_certificate
    Revoke: revoke_certificate (every cleanup step runs, failures reported together)
    Renew:  renew_certificate (forced renew, then reinstall to the same paths)

    `host` and `acme` only need the methods of HostSystem / AcmeClient, so tests
    pass in-memory fakes.
    """
    def __init__(self, settings: Settings, host, acme, reporter):
        self.settings = settings
        self.host = host
        self.acme = acme
        self.reporter = reporter

    def record(self, domain: str) -> CertificateRecord:
        return CertificateRecord.for_domain(domain, self.settings.cert_base_dir)

    # ------------------ environment ------------------
    def prepare_environment(self):
        pkg = self.settings.helper_package
        if self.host.command_exists(pkg):
            self.reporter.ok(f"{pkg.capitalize()} is already installed.")
        else:
            refresh = self.host.refresh_package_index()
            if not refresh.ok:
                logger.warning("package index refresh failed, trying install anyway")
            res = self.host.install_package(pkg)
            if not res.ok:
                self._log_failure(res)
                raise SetupError(f"Failed to install {pkg}.", EXIT_HELPER_INSTALL)
            self.reporter.ok(f"{pkg.capitalize()} installed.")

        port = self.settings.challenge_port
        if self.host.firewall_active():
            res = self.host.allow_port(port)
            if not res.ok:
                self._log_failure(res)
                raise SetupError(f"Failed to allow port {port}.", EXIT_FIREWALL)
            self.reporter.ok(f"Port {port} allowed in the firewall.")
        else:
            self.reporter.ok(f"Firewall is not active, port {port} is already reachable.")

    def bootstrap_acme(self):
        steps = [
            (self.acme.install, (), "Failed to install ACME.sh.", EXIT_ACME_INSTALL),
            (self.acme.enable_auto_upgrade, (), "Failed to set up ACME.sh auto-upgrade.", EXIT_ACME_UPGRADE),
            (self.acme.set_default_ca, (self.settings.ca_server,),
             f"Failed to set default CA to {self.settings.ca_server}.", EXIT_ACME_SET_CA),
        ]
        for fn, args, failure, code in steps:
            res = fn(*args)
            if not res.ok:
                self._log_failure(res)
                raise SetupError(failure, code)
        self.reporter.ok(f"ACME.sh ready, default CA: {self.settings.ca_server}.")

    # ------------------ ISSUE ------------------
    def request_certificate(self, domain: str) -> dict:
        self.prepare_environment()
        self.bootstrap_acme()
        return self.issue_certificate(domain)

    def issue_certificate(self, domain: str) -> dict:
        rec = self.record(domain)
        try:
            os.makedirs(rec.directory, exist_ok=True)
        except OSError as e:
            raise OperationError(f"Failed to create certificate directory for {domain}: {e}", "mkdir", domain) from e

        res = self.acme.issue(domain, self.settings.key_length)
        if _already_issued(res):
            self.reporter.ok(f"Certificate for {domain} is already issued and not due for renewal, installing it.")
        else:
            self._check(res, "issue", domain, f"Failed to issue certificate for {domain}.")
        self._check(self.acme.install_cert(domain, rec.fullchain_file, rec.key_file),
                    "install", domain, f"Failed to install certificate for {domain}.")
        self._check(self.host.chown_tree(rec.directory, self.settings.cert_owner, self.settings.cert_group),
                    "chown", domain, f"Failed to change owner and group of {rec.directory}.")

        not_after = self._read_not_after(rec)
        self.reporter.info()
        self.reporter.ok(f"SSL certificate obtained and installed for {domain}.")
        self._report_paths(rec, not_after)
        return self._summary(rec, "issued", not_after)

    # ------------------ REVOKE ------------------
    def revoke_certificate(self, domain: str) -> dict:
        rec = self.record(domain)
        failed = []

        res = self.acme.revoke(domain)
        if not res.ok:
            self._log_failure(res)
            self.reporter.err(f"Failed to revoke certificate for {domain}.")
            failed.append("revoke")

        if rec.exists():
            try:
                shutil.rmtree(rec.directory)
                self.reporter.ok(f"Removed certificate directory for {domain}.")
            except OSError as e:
                logger.error("rmtree %s: %s", rec.directory, e)
                self.reporter.err(f"Failed to remove certificate directory for {domain}.")
                failed.append("delete")
        else:
            self.reporter.ok(f"Certificate directory for {domain} does not exist, no need to remove.")

        res = self.acme.remove(domain)
        if not res.ok:
            self._log_failure(res)
            self.reporter.err(f"Failed to remove certificate data for {domain}.")
            failed.append("remove")

        if failed:
            raise OperationError(f"Revoke of {domain} incomplete, failed steps: {', '.join(failed)}.",
                                 failed[0], domain)
        self.reporter.ok(f"SSL certificate revoked and cleaned for {domain}.")
        return self._summary(rec, "revoked", None)

    # ------------------ RENEW ------------------
    def renew_certificate(self, domain: str) -> dict:
        rec = self.record(domain)
        self._check(self.acme.renew(domain, force=True),
                    "renew", domain, f"Failed to renew certificate for {domain}.")
        try:
            os.makedirs(rec.directory, exist_ok=True)
        except OSError as e:
            raise OperationError(f"Failed to create certificate directory for {domain}: {e}", "mkdir", domain) from e
        self._check(self.acme.install_cert(domain, rec.fullchain_file, rec.key_file),
                    "install", domain, f"Failed to install renewed certificate for {domain}.")
        self._check(self.host.chown_tree(rec.directory, self.settings.cert_owner, self.settings.cert_group),
                    "chown", domain, f"Failed to change owner and group of {rec.directory}.")

        not_after = self._read_not_after(rec)
        self.reporter.ok(f"SSL certificate forcefully renewed for {domain}.")
        self._report_paths(rec, not_after)
        return self._summary(rec, "renewed", not_after)

    # ------------------ internals ------------------
    def _check(self, res: CommandResult, step: str, domain: str, failure: str):
        if res.ok:
            return
        self._log_failure(res)
        txt = (res.stderr or "") + (res.stdout or "")
        if is_rate_limited(txt):
            raise AcmeRateLimitError(step, domain, extract_retry_after_iso(txt), res.stdout, res.stderr)
        raise OperationError(failure, step, domain)

    def _log_failure(self, res: CommandResult):
        logger.error("command failed:\n%s", res.describe())

    def _read_not_after(self, rec: CertificateRecord) -> str | None:
        res = self.host.cert_not_after(rec.fullchain_file)
        if res.ok:
            for line in res.stdout.splitlines():
                if line.startswith("notAfter="):
                    try:
                        return _to_iso(line.split("=", 1)[1].strip())
                    except ValueError:
                        break
        self.reporter.warn(f"Could not read the expiry date of {rec.fullchain_file}.")
        return None

    def _report_paths(self, rec: CertificateRecord, not_after: str | None):
        self.reporter.info()
        self.reporter.ok(f"Fullchain:    {rec.fullchain_file}")
        self.reporter.ok(f"Private:      {rec.key_file}")
        if not_after:
            self.reporter.ok(f"Expires:      {not_after}")

    def _summary(self, rec: CertificateRecord, status: str, not_after: str | None) -> dict:
        return {
            "domain": rec.domain,
            "status": status,
            "fullchain": rec.fullchain_file,
            "private_key": rec.key_file,
            "not_after": not_after,
        }


def _to_iso(openssl_dt: str) -> str:
    # openssl pads single-digit days with a space: "Jan  5 00:00:00 2027 GMT"
    return datetime.strptime(" ".join(openssl_dt.split()), "%b %d %H:%M:%S %Y %Z").isoformat() + "Z"


def _already_issued(res: CommandResult) -> bool:
    # acme.sh --issue exits 2 when a valid cert exists and renewal is not due
    out = res.stdout or ""
    return res.returncode == 2 and ("Skipping. Next renewal time is:" in out or "Domains not changed." in out)
