"""Authentication helpers for the Databricks catalog service.

This module centralizes creation of a Databricks WorkspaceClient and applies
small normalization rules (such as sanitizing the host URL) so that a
metastore URI taken from job properties can be used directly as the
workspace host.
"""

import re

from databricks.sdk import WorkspaceClient
from databricks.sdk.core import Config


class AuthError(RuntimeError):
    """Raised when Databricks authentication fails."""


def _format_auth_error(message: str, profile: str | None) -> str:
    """Return a user-friendly auth error message."""
    login_match = re.search(r"databricks auth login ([^\s]+)", message)
    if login_match:
        cmd = "databricks auth login"
        if profile:
            cmd = f"{cmd} --profile {profile}"
        return (
            "Databricks authentication failed. Your refresh token is invalid.\n"
            f"Re-authenticate with:\n  $ {cmd}"
        )
    return f"Databricks authentication failed: {message}"


def _sanitize_host(host: str | None) -> str | None:
    """
    Normalize a Databricks host URL.

    - Removes query strings (e.g. '?o=123456789')
    - Removes trailing slashes
    """
    if not host:
        return host
    host = host.split("?", 1)[0]
    return host.rstrip("/")


def get_client(profile: str | None = None, host: str | None = None) -> WorkspaceClient:
    """
    Create and return a configured Databricks WorkspaceClient.

    If a profile is provided, it is resolved using the Databricks unified
    authentication configuration (~/.databrickscfg or environment variables).
    An explicit host (the metastore URI override) takes precedence over the
    host of the profile.
    """
    kwargs = {}
    if profile:
        kwargs["profile"] = profile
    if host:
        kwargs["host"] = _sanitize_host(host)
    try:
        cfg = Config(**kwargs)
    except ValueError as exc:
        raise AuthError(_format_auth_error(str(exc), profile)) from exc
    cfg.host = _sanitize_host(cfg.host)
    return WorkspaceClient(config=cfg)
