"""
Console notifications and prompts.
"""
from typing import List, Optional
from colorama import init, Fore, Style

# Initialize colorama for cross-platform colored output
init(autoreset=True)


class ConsoleNotifier:
    """Prints colored notifications and reads answers from stdin (or a given stream)."""

    def __init__(self, stdin=None):
        self.stdin = stdin

    def info(self, message: str) -> None:
        print(f"{Fore.CYAN}{message}{Style.RESET_ALL}")

    def success(self, message: str) -> None:
        print(f"{Fore.GREEN}✓ {message}{Style.RESET_ALL}")

    def warning(self, message: str) -> None:
        print(f"{Fore.YELLOW}⚠ {message}{Style.RESET_ALL}")

    def error(self, message: str) -> None:
        print(f"{Fore.RED}✗ {message}{Style.RESET_ALL}")

    def prompt(self, message: str, placeholder: str = '') -> Optional[str]:
        """
        Ask for free text.
        Returns:
            The stripped answer, or None if the prompt was dismissed (EOF / Ctrl+C)
        """
        hint = f" ({placeholder})" if placeholder else ''
        text = f"{Fore.YELLOW}{message}{hint}: {Style.RESET_ALL}"
        try:
            if self.stdin is None:
                return input(text).strip()
            print(text, end='', flush=True)
            line = self.stdin.readline()
        except (EOFError, KeyboardInterrupt):
            print()
            return None
        if not line:
            print()
            return None
        return line.strip()

    def choose(self, message: str, options: List[str]) -> Optional[str]:
        """
        Offer a fixed set of options; answers match case-insensitively on the
        option or its first letter.
        Returns:
            The selected option, or None if dismissed or unrecognised
        """
        keys = '/'.join(options)
        answer = self.prompt(f"{message} [{keys}]")
        if not answer:
            return None
        answer = answer.lower()
        for option in options:
            if answer == option.lower() or answer == option[0].lower():
                return option
        return None
