# sslmenu/records.py
import os
from pydantic import BaseModel


class CertificateRecord(BaseModel):
    """On-disk layout of one domain's certificate: <base>/<domain>/<domain>_{fullchain.cer,private.key}."""
    domain: str
    directory: str
    fullchain_file: str
    key_file: str

    @classmethod
    def for_domain(cls, domain: str, base_dir: str) -> "CertificateRecord":
        d = os.path.join(base_dir, domain)
        return cls(
            domain=domain,
            directory=d,
            fullchain_file=os.path.join(d, f"{domain}_fullchain.cer"),
            key_file=os.path.join(d, f"{domain}_private.key"),
        )

    def exists(self) -> bool:
        return os.path.isdir(self.directory)
