"""
peridio_sdk.tier2_transport.trust
──────────────────────────────────
TLS trust for the API client: the public CA set (certifi), the three roots
shipped with the package for the services the API fronts, and an optional
caller-supplied PEM bundle.

The shipped roots are read from package data once per process and shared by
every client.
"""
from __future__ import annotations

import ssl
from functools import lru_cache
from importlib.resources import files
from pathlib import Path

import certifi

from peridio_sdk.tier0_core.errors import ConfigurationError

EMBEDDED_ROOTS = ("admin-api.pem", "nerveshub.pem", "peridio.pem")

_PEM_MARKER = "-----BEGIN CERTIFICATE-----"


@lru_cache(maxsize=1)
def embedded_roots() -> tuple[str, ...]:
    """PEM text of the shipped roots, in EMBEDDED_ROOTS order."""
    certificates = files("peridio_sdk") / "certificates"
    return tuple(
        (certificates / name).read_text(encoding="ascii") for name in EMBEDDED_ROOTS
    )


def load_ca_bundle(path: str | Path) -> str:
    """
    Read a caller CA bundle. The path must name an existing regular file
    holding at least one PEM certificate.
    """
    bundle = Path(path)
    if not bundle.is_file():
        raise ConfigurationError(
            "invalid_ca_bundle",
            "The CA bundle path you provided is invalid.",
            f"CA bundle {str(bundle)!r} is not an existing regular file.",
            ca_bundle_path=str(bundle),
        )
    try:
        text = bundle.read_text(encoding="ascii")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(
            "invalid_ca_bundle",
            "The CA bundle could not be read.",
            f"Error reading CA bundle {str(bundle)!r}: {exc}",
            ca_bundle_path=str(bundle),
        ) from exc
    if _PEM_MARKER not in text:
        raise ConfigurationError(
            "invalid_ca_bundle",
            "The CA bundle does not contain a PEM certificate.",
            ca_bundle_path=str(bundle),
        )
    return text


def build_ssl_context(ca_bundle_path: str | Path | None = None) -> ssl.SSLContext:
    """Return a verifying SSL context trusting public, shipped and caller roots."""
    context = ssl.create_default_context(cafile=certifi.where())
    context.load_verify_locations(cadata="\n".join(embedded_roots()))
    if ca_bundle_path is not None:
        bundle = load_ca_bundle(ca_bundle_path)
        try:
            context.load_verify_locations(cadata=bundle)
        except ssl.SSLError as exc:
            raise ConfigurationError(
                "invalid_ca_bundle",
                "The CA bundle could not be parsed.",
                f"Error parsing CA bundle {str(ca_bundle_path)!r}: {exc}",
                ca_bundle_path=str(ca_bundle_path),
            ) from exc
    return context


__all__ = ["EMBEDDED_ROOTS", "embedded_roots", "load_ca_bundle", "build_ssl_context"]
