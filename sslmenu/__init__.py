"""Interactive acme.sh front-end: obtain, revoke and force-renew TLS certificates."""

__version__ = "0.1.0"
