"""Combined launcher: pick server, client or both, then run the installers."""

from __future__ import annotations

from typing import Callable

from terminal_anywhere_core.logging_setup import get_logger

from .products import CLIENT, QUICK_START, SERVER, Product

LOGGER = get_logger("launcher")

MODES = ("server", "client", "both")
DEFAULT_MODE = "both"

InstallOne = Callable[[Product], int]
InputFn = Callable[[str], str]

MENU = (
    "Terminal Anywhere Installer",
    "==========================================",
    "",
    "What would you like to install?",
    "",
    "  1) Server only   - Host terminals for remote access",
    "  2) Client only   - Connect to remote terminals",
    "  3) Both          - Full Terminal Anywhere suite",
    "  4) Help          - Show detailed information",
    "  q) Quit          - Exit installer",
    "",
)

HELP = (
    "Terminal Anywhere Help",
    "============================================",
    "",
    "Terminal Anywhere streams terminal sessions over WebSocket so they can be",
    "reached and shared from anywhere.",
    "",
    "Server (terminal_anywhere_server):",
    "  - Hosts terminal sessions via WebSocket",
    "  - Provides a web-based terminal interface",
    "  - Generates access tokens on start",
    "",
    "Client (terminal_anywhere_client):",
    "  - Native terminal interface",
    "  - Connects to any Terminal Anywhere server",
    "  - Session listing and resumption",
    "",
    "Non-interactive use:",
    "  terminal-anywhere-install server",
    "  terminal-anywhere-install client --tag v1.24.4",
    "  terminal-anywhere-install both",
    "",
)

_MENU_CHOICES = {"1": "server", "2": "client", "3": "both"}


def _print_lines(lines) -> None:
    for line in lines:
        print(line)


def install_mode(mode: str, install_one: InstallOne) -> int:
    if mode == "server":
        return install_one(SERVER)
    if mode == "client":
        return install_one(CLIENT)

    LOGGER.info("Installing complete Terminal Anywhere suite...")
    code = install_one(SERVER)
    if code != 0:
        return code
    LOGGER.info("Now installing client...")
    code = install_one(CLIENT)
    if code != 0:
        return code

    LOGGER.info("Complete installation finished!", extra={"event": "success"})
    print("")
    _print_lines(QUICK_START)
    return 0


def run_menu(install_one: InstallOne, input_fn: InputFn = input) -> int:
    while True:
        _print_lines(MENU)
        try:
            choice = input_fn("Enter your choice [1-4, q]: ").strip()
        except EOFError:
            return 0

        if choice in _MENU_CHOICES:
            print("")
            install_mode(_MENU_CHOICES[choice], install_one)
        elif choice == "4":
            _print_lines(HELP)
        elif choice in ("q", "Q"):
            LOGGER.info("Thanks for using Terminal Anywhere!")
            return 0
        else:
            LOGGER.warning("Invalid option. Please choose 1-4 or q.")
            continue

        try:
            input_fn("Press Enter to continue...")
        except EOFError:
            return 0


def launch(token: str | None, interactive: bool, install_one: InstallOne, input_fn: InputFn = input) -> int:
    """Decide what to install from the top-level token and session type.

    No token: the menu when interactive, ``both`` when piped. An unknown
    token is an error when piped and falls back to ``both`` otherwise.
    """
    if token is None:
        if interactive:
            return run_menu(install_one, input_fn=input_fn)
        LOGGER.warning("Non-interactive session detected (likely piped through curl)")
        LOGGER.info("Installing both server and client (default)")
        return install_mode(DEFAULT_MODE, install_one)

    if token in MODES:
        return install_mode(token, install_one)

    if not interactive:
        LOGGER.error(f"Unknown option: {token}")
        LOGGER.info("Usage: terminal-anywhere-install [server|client|both|--help]")
        return 1

    LOGGER.warning(f"Unknown argument: {token}. Expected: server | client | both")
    LOGGER.info("Proceeding with full installation (both).")
    return install_mode(DEFAULT_MODE, install_one)
