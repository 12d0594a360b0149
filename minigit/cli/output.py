"""CLI output utilities and formatting."""

from colorama import Fore, Style

# ASCII art banner for the minigit CLI
BANNER = f"""
{Fore.YELLOW}+------------------------------------------+{Style.RESET_ALL}
{Fore.YELLOW}|{Style.RESET_ALL}   {Fore.CYAN}{Style.BRIGHT}minigit{Style.RESET_ALL}                                {Fore.YELLOW}|{Style.RESET_ALL}
{Fore.YELLOW}|{Style.RESET_ALL}   {Fore.WHITE}content-addressed version control{Style.RESET_ALL}      {Fore.YELLOW}|{Style.RESET_ALL}
{Fore.YELLOW}+------------------------------------------+{Style.RESET_ALL}
"""


def short_hash(obj_hash: str) -> str:
    """Abbreviated, highlighted object hash."""
    return f"{Fore.YELLOW}{obj_hash[:7]}{Style.RESET_ALL}"


def success(message: str) -> str:
    """Format success message in green."""
    return f"{Fore.GREEN}✓ {message}{Style.RESET_ALL}"


def info(message: str) -> str:
    """Format info message in cyan."""
    return f"{Fore.CYAN}→ {message}{Style.RESET_ALL}"


def warning(message: str) -> str:
    """Format warning message in yellow."""
    return f"{Fore.YELLOW}⚠ {message}{Style.RESET_ALL}"


def error(message: str) -> str:
    """Format error message in red."""
    return f"{Fore.RED}✗ {message}{Style.RESET_ALL}"
