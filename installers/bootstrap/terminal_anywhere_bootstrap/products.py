"""Installable products and the guidance printed once they are in place."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Product:
    key: str
    binary_name: str
    display_name: str
    usage: tuple[str, ...]


SERVER = Product(
    key="server",
    binary_name="terminal_anywhere_server",
    display_name="Terminal Anywhere Server",
    usage=(
        "  # Start server (localhost only)",
        "  terminal_anywhere_server",
        "",
        "  # Start server (network accessible)",
        "  terminal_anywhere_server --bind-all",
        "",
        "  # Show help",
        "  terminal_anywhere_server --help",
        "",
        "After starting the server:",
        "  - Server will display a secure access token",
        "  - Use the token to connect clients from other machines",
        "  - Localhost connections don't need a token",
        "  - TA_TOKEN, TA_HOST and TA_PORT override the defaults",
        "",
        "Connect a client:",
        "  terminal-anywhere-install client",
        "  terminal_anywhere_client ws://server-ip:7860/ws --token TOKEN",
    ),
)

CLIENT = Product(
    key="client",
    binary_name="terminal_anywhere_client",
    display_name="Terminal Anywhere Client",
    usage=(
        "  # Connect to server",
        "  terminal_anywhere_client ws://server-ip:7860/ws --token TOKEN",
        "",
        "  # Connect to localhost (no token needed)",
        "  terminal_anywhere_client ws://127.0.0.1:7860/ws",
        "",
        "  # List available sessions",
        "  terminal_anywhere_client list ws://server-ip:7860/ws --token TOKEN",
        "",
        "  # Resume a session",
        "  terminal_anywhere_client resume ws://server-ip:7860/ws session-id --token TOKEN",
        "",
        "Exit controls:",
        "  - Double Ctrl+C (within 2 seconds): Disconnect from server",
        "  - Single Ctrl+C: Send interrupt to remote terminal",
        "  - Ctrl+D: Send EOF to remote terminal",
        "",
        "Web terminal access:",
        "  - Local: http://server-ip:7860/terminal",
        "  - Network: http://server-ip:7860/terminal?token=TOKEN",
        "  - Resume: http://server-ip:7860/terminal?token=TOKEN&resume=session-id",
    ),
)

PRODUCTS: dict[str, Product] = {SERVER.key: SERVER, CLIENT.key: CLIENT}

QUICK_START = (
    "Quick Start Guide:",
    "  1. Start server: terminal_anywhere_server --bind-all",
    "  2. Note the access token displayed",
    "  3. Connect client: terminal_anywhere_client ws://server-ip:7860/ws --token TOKEN",
    "",
    "Or access via web browser:",
    "  http://server-ip:7860/terminal?token=TOKEN",
)


def get_product(key: str) -> Product:
    try:
        return PRODUCTS[key]
    except KeyError:
        raise ValueError(f"Unknown product: {key}. Expected one of: {', '.join(PRODUCTS)}") from None
