# sslmenu/config.py
import os
from typing import Optional
from pydantic import BaseModel, Field, field_validator

# acme.sh --keylength values
KEY_LENGTHS = ("ec-256", "ec-384", "2048", "3072", "4096")

# acme.sh short names for --server (a full directory URL is accepted too)
CA_SERVERS = ("letsencrypt", "letsencrypt_test", "zerossl", "google", "googletest", "buypass", "buypass_test")

_TRUE = ("1", "true", "yes")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    cert_base_dir: str = "/etc/ssl"
    acme_sh: str = Field(default_factory=lambda: os.path.expanduser("~/.acme.sh/acme.sh"))
    acme_home: Optional[str] = None
    acme_debug: bool = False
    install_url: str = "https://get.acme.sh"
    install_timeout: float = 60
    account_email: Optional[str] = None
    ca_server: str = "letsencrypt"
    key_length: str = "ec-256"
    helper_package: str = "socat"
    challenge_port: int = Field(default=80, ge=1, le=65535)
    cert_owner: str = "nobody"
    cert_group: str = "nogroup"
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    @field_validator("key_length")
    @classmethod
    def _known_key_length(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in KEY_LENGTHS:
            raise ValueError(f"key_length must be one of {', '.join(KEY_LENGTHS)}")
        return v

    @field_validator("ca_server")
    @classmethod
    def _known_ca(cls, v: str) -> str:
        v = v.strip()
        if v.lower() in CA_SERVERS:
            return v.lower()
        if v.startswith("https://"):
            return v
        raise ValueError(f"ca_server must be one of {', '.join(CA_SERVERS)} or an https:// directory URL")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return v

    @property
    def ecc(self) -> bool:
        return self.key_length.startswith("ec-")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from SSLMENU_* (and ACME_HOME / ACME_DEBUG) environment variables."""
        env = {
            "cert_base_dir": os.getenv("SSLMENU_CERT_DIR"),
            "acme_sh": os.getenv("SSLMENU_ACME_SH"),
            "acme_home": os.getenv("ACME_HOME"),
            "install_url": os.getenv("SSLMENU_INSTALL_URL"),
            "install_timeout": os.getenv("SSLMENU_INSTALL_TIMEOUT"),
            "account_email": os.getenv("SSLMENU_EMAIL"),
            "ca_server": os.getenv("SSLMENU_CA"),
            "key_length": os.getenv("SSLMENU_KEY_LENGTH"),
            "helper_package": os.getenv("SSLMENU_HELPER_PACKAGE"),
            "challenge_port": os.getenv("SSLMENU_CHALLENGE_PORT"),
            "cert_owner": os.getenv("SSLMENU_CERT_OWNER"),
            "cert_group": os.getenv("SSLMENU_CERT_GROUP"),
            "log_level": os.getenv("SSLMENU_LOG_LEVEL"),
            "log_file": os.getenv("SSLMENU_LOG_FILE"),
        }
        kw = {k: v for k, v in env.items() if v not in (None, "")}
        if "acme_sh" in kw:
            kw["acme_sh"] = os.path.expanduser(kw["acme_sh"])
        kw["acme_debug"] = str(os.getenv("ACME_DEBUG", "0")).lower() in _TRUE
        return cls(**kw)
