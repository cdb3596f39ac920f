from __future__ import annotations
"""Backend connection profiles loaded from the environment."""
from dataclasses import dataclass
from typing import Mapping

import keyring
from keyring.errors import KeyringError

from .errors import ConfigurationError

BACKEND_PREFIXES = {"a": "CEPH_A", "b": "CEPH_B"}


@dataclass(frozen=True)
class BackendProfile:
    """Endpoint and credentials for one storage backend."""

    name: str
    endpoint_url: str
    access_key: str
    secret_key: str


class KeychainStore:
    """Encapsulates OS keychain access for backend secrets."""

    def __init__(self, service_name: str = "rados-reconcile"):
        self._service_name = service_name

    def get_secret(self, backend_name: str) -> str:
        if not backend_name:
            return ""
        try:
            return keyring.get_password(self._service_name, f"ceph-{backend_name}") or ""
        except KeyringError:
            return ""


def load_backend_profile(
    name: str,
    environ: Mapping[str, str],
    keychain: KeychainStore | None = None,
) -> BackendProfile:
    """Build the profile for backend ``name`` from ``<PREFIX>_*`` variables.

    The secret key falls back to the OS keychain when the variable is unset.
    """
    try:
        prefix = BACKEND_PREFIXES[name]
    except KeyError:
        raise ConfigurationError(f"Unknown backend '{name}'") from None

    endpoint_url = environ.get(f"{prefix}_ADDRESS", "").strip()
    access_key = environ.get(f"{prefix}_ACCESS_KEY_ID", "").strip()
    if not endpoint_url:
        raise ConfigurationError(f"{prefix}_ADDRESS is not set")
    if not access_key:
        raise ConfigurationError(f"{prefix}_ACCESS_KEY_ID is not set")

    secret_key = environ.get(f"{prefix}_SECRET_ACCESS_KEY", "")
    if not secret_key:
        secret_key = (keychain or KeychainStore()).get_secret(name)
    if not secret_key:
        raise ConfigurationError(
            f"{prefix}_SECRET_ACCESS_KEY is not set and no keychain entry exists"
        )
    return BackendProfile(
        name=name,
        endpoint_url=endpoint_url,
        access_key=access_key,
        secret_key=secret_key,
    )


def load_backend_profiles(
    environ: Mapping[str, str],
    keychain: KeychainStore | None = None,
) -> tuple[BackendProfile, BackendProfile]:
    keychain = keychain or KeychainStore()
    return (
        load_backend_profile("a", environ, keychain),
        load_backend_profile("b", environ, keychain),
    )
