"""CLI output utilities and formatting."""

import os

from colorama import Fore, Style

BANNER = f"""
{Fore.CYAN}{Style.BRIGHT}mingit{Style.RESET_ALL} {Fore.WHITE}- content-addressed objects in git's loose format{Style.RESET_ALL}
"""


def success(message: str) -> str:
    """Format success message in green."""
    return f"{Fore.GREEN}✓ {message}{Style.RESET_ALL}"


def info(message: str) -> str:
    """Format info message in cyan."""
    return f"{Fore.CYAN}→ {message}{Style.RESET_ALL}"


def error(message: str) -> str:
    """Format error message in red."""
    return f"{Fore.RED}✗ {message}{Style.RESET_ALL}"


def display_name(name: bytes) -> str:
    """Render a raw entry name for the terminal without failing on bad UTF-8."""
    return name.decode('utf-8', 'backslashreplace')


def display_path(path) -> str:
    """Render a filesystem path relative to the current directory when possible."""
    try:
        return os.path.relpath(path)
    except ValueError:
        return str(path)
