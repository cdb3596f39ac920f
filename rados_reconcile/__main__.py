"""Module entry point for the bucket reconciliation tool."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Sequence

from .controller import ReconciliationController
from .errors import ConfigurationError, InvocationError, ReconcileError
from .filters import read_cutoff
from .formatting import load_package_info
from .profiles import KeychainStore, load_backend_profiles
from .reports import ReportWriter
from .services import ListingService
from .settings import LOG_LEVEL_VAR, SettingsLoader, read_environment

LOGGER = logging.getLogger("rados_reconcile")


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):
        raise InvocationError(f"{message}\n{self.format_usage().strip()}")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="rados-reconcile",
        description="Compare bucket listings between two S3 backends.",
        epilog="Example: rados-reconcile /app/bucket_list/bucket_list_1.txt /app/datetime/datetime.txt",
    )
    parser.add_argument("bucket_list", help="file with one bucket name per line")
    parser.add_argument("cutoff_file", help="file holding the maximum RFC 3339 last-modified timestamp")
    parser.add_argument("--env-file", default=".env", help="dotenv file with backend settings (default: .env)")
    parser.add_argument("--parallel", action="store_true", help="list both backends concurrently")
    parser.add_argument("--log-level", default=None, help="logging level (default: INFO)")
    package_info = load_package_info()
    parser.add_argument("--version", action="version", version=f"{package_info.name} {package_info.version}")
    return parser


def read_bucket_list(path) -> list[str]:
    try:
        with open(path, encoding="utf-8") as handle:
            return handle.read().split("\n")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read bucket list {path}: {exc}") from exc


def run(
    argv: Sequence[str] | None = None,
    *,
    environ=None,
    keychain: KeychainStore | None = None,
    client_factory=None,
) -> int:
    args = build_parser().parse_args(argv)
    env = read_environment(os.environ if environ is None else environ, args.env_file)
    if args.log_level:
        env[LOG_LEVEL_VAR] = args.log_level
    settings = SettingsLoader().load(env)
    logging.getLogger().setLevel(settings.log_level)

    backend_a, backend_b = load_backend_profiles(env, keychain)
    service = ListingService(
        client_factory,
        max_keys=settings.max_keys,
        request_timeout=settings.request_timeout,
    )
    controller = ReconciliationController(
        backend_a,
        backend_b,
        service=service,
        writer=ReportWriter(settings.output_dir),
        parallel=args.parallel,
    )
    cutoff = read_cutoff(args.cutoff_file)
    controller.run(read_bucket_list(args.bucket_list), cutoff)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        return run(argv)
    except ReconcileError as exc:
        LOGGER.error("%s: %s", type(exc).__name__, exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
