from __future__ import annotations
"""Formatting helpers shared by the driver and the command line."""
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, metadata, version

DIST_NAME = "rados-reconcile"
SIZE_UNITS = ("B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB")


@dataclass(frozen=True)
class PackageInfo:
    name: str
    version: str


def load_package_info(dist_name: str = DIST_NAME) -> PackageInfo:
    try:
        distribution_metadata = metadata(dist_name)
        package_version = version(dist_name)
    except PackageNotFoundError:
        return PackageInfo(
            name=dist_name,
            version="unknown",
        )
    return PackageInfo(
        name=distribution_metadata.get("Name") or dist_name,
        version=package_version,
    )


def format_size(size: int) -> str:
    """Render a byte count with a binary unit, e.g. ``"1.5 GiB"``."""
    value = float(size)
    for unit in SIZE_UNITS[:-1]:
        if value < 1024:
            break
        value /= 1024
    else:
        unit = SIZE_UNITS[-1]
    return f"{int(value)} B" if unit == "B" else f"{value:.1f} {unit}"


def summarize_mismatches(mismatches) -> dict[str, int]:
    """Count entries per kind, e.g. ``{"only_a": 2, "size_mismatch": 1}``."""
    counts: dict[str, int] = {}
    for entry in mismatches.values():
        counts[entry.kind] = counts.get(entry.kind, 0) + 1
    return counts
