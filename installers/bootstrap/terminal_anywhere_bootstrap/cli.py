"""CLI bootstrap installer that downloads and places the Terminal Anywhere binaries."""

from __future__ import annotations

import argparse
import json
import sys
from functools import partial

from terminal_anywhere_core.config import RELEASE_TAG_ENV, InstallerConfig, load_config
from terminal_anywhere_core.logging_setup import configure_logging, get_logger

from .errors import BootstrapError, UnsupportedPlatformError
from .launcher import MODES, launch
from .products import Product, get_product
from .service import install_product, path_guidance, plan_product

LOGGER = get_logger("cli")

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

HELP_FLAGS = ("-h", "--help")


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _print_lines(lines) -> None:
    for line in lines:
        print(line)


def _report_unsupported(exc: UnsupportedPlatformError) -> None:
    LOGGER.error(str(exc))
    LOGGER.info("Supported platforms:")
    _print_lines(f"  - {name}" for name in exc.supported)


def _select_pin(tag: str | None, cfg: InstallerConfig) -> str | None:
    if tag:
        LOGGER.info(f"Using release tag: {tag}")
        return tag
    if cfg.release_tag:
        LOGGER.info(f"Using release tag from {RELEASE_TAG_ENV}: {cfg.release_tag}")
    return cfg.release_tag


def install_one(product: Product, cfg: InstallerConfig, pin: str | None) -> int:
    print("")
    LOGGER.info(f"{product.display_name} Installer")
    print("=" * (len(product.display_name) + 10))
    try:
        result = install_product(product, cfg, pin=pin)
    except UnsupportedPlatformError as exc:
        _report_unsupported(exc)
        return EXIT_FAILURE
    except BootstrapError as exc:
        LOGGER.error(str(exc), extra={"event": "install_failed"})
        return EXIT_FAILURE
    except OSError as exc:
        LOGGER.error(f"Installation failed: {exc}", extra={"event": "install_failed"})
        return EXIT_FAILURE

    if not result.in_path:
        guidance = path_guidance(result.final_path.parent)
        LOGGER.warning(guidance[0])
        _print_lines(guidance[1:])

    LOGGER.info("Installation complete!", extra={"event": "success"})
    print("")
    print("Usage:")
    _print_lines(product.usage)
    return EXIT_SUCCESS


def plan_one(product: Product, cfg: InstallerConfig, pin: str | None) -> dict:
    plan, target = plan_product(product, cfg, pin=pin)
    return {
        "product": product.key,
        "platform": plan.platform.value,
        "release_tag": plan.pin or "latest",
        "candidates": [{"url": c.url, "origin": c.origin.value} for c in plan],
        "final_path": str(target.final_path),
        "update": target.final_path.exists(),
    }


def cmd_dry_run(args: argparse.Namespace, cfg: InstallerConfig) -> int:
    pin = args.tag or cfg.release_tag
    keys = ["server", "client"] if args.command == "both" else [args.command]
    try:
        plans = [plan_one(get_product(key), cfg, pin) for key in keys]
    except UnsupportedPlatformError as exc:
        _report_unsupported(exc)
        return EXIT_FAILURE
    _print_json(plans if len(plans) > 1 else plans[0])
    return EXIT_SUCCESS


class _InstallerArgumentParser(argparse.ArgumentParser):
    """Usage errors exit with 1 instead of argparse's 2."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--tag", default=None, metavar="RELEASE_TAG", help=f"Pin a release tag (overrides {RELEASE_TAG_ENV})")
    parser.add_argument("--dry-run", action="store_true", help="Resolve platform and download URLs only")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output")


def build_parser() -> argparse.ArgumentParser:
    parser = _InstallerArgumentParser(
        prog="terminal-anywhere-install",
        description="Terminal Anywhere installer bootstrap",
        epilog="Without a command: interactive menu on a terminal, 'both' when piped.",
    )
    sub = parser.add_subparsers(dest="command")

    server_cmd = sub.add_parser("server", help="Install terminal_anywhere_server")
    _add_common(server_cmd)

    client_cmd = sub.add_parser("client", help="Install terminal_anywhere_client")
    _add_common(client_cmd)

    both_cmd = sub.add_parser("both", help="Install server and client")
    _add_common(both_cmd)

    return parser


def _is_interactive() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def main(argv: list[str] | None = None, interactive: bool | None = None) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)
    interactive = _is_interactive() if interactive is None else interactive

    # Unknown top-level words are the launcher's call, not an argparse error.
    unknown_token: str | None = None
    if argv and argv[0] not in MODES and argv[0] not in HELP_FLAGS:
        unknown_token, argv = argv[0], argv[1:]

    args = build_parser().parse_args(argv)
    configure_logging(console=True, verbose=getattr(args, "verbose", False))
    cfg = load_config()

    try:
        if args.command is not None and args.dry_run:
            return cmd_dry_run(args, cfg)

        pin = _select_pin(getattr(args, "tag", None), cfg)
        return launch(
            unknown_token if unknown_token is not None else args.command,
            interactive=interactive,
            install_one=partial(install_one, cfg=cfg, pin=pin),
        )
    except KeyboardInterrupt:
        LOGGER.error("Interrupted")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    raise SystemExit(main())
