"""
Main CLI interface for the local npm repository manager.
"""
import argparse
import shlex
import sys
from typing import Callable, Dict, List, Optional

from colorama import Fore, Style
from tabulate import tabulate

from .config import Settings, VERSION_SOURCES
from .installer import PackageInstaller
from .managers.base_manager import BaseRegistryClient
from .managers.http_registry import HttpRegistryClient
from .managers.npm_manager import NPMRegistryClient
from .updates import UpdateScanner
from .utils.notifier import ConsoleNotifier
from .utils.package_cache import PackageCache

EXIT_COMMANDS = ('exit', 'quit')


def build_client(settings: Settings) -> BaseRegistryClient:
    if settings.version_source == 'http':
        return HttpRegistryClient(command=settings.npm_command, registry=settings.registry_url,
                                  timeout=settings.timeout)
    return NPMRegistryClient(command=settings.npm_command, timeout=settings.timeout)


class LocalRepositoryCLI:
    """Command surface of the local npm repository."""

    def __init__(self, settings: Settings, client: Optional[BaseRegistryClient] = None,
                 notifier: Optional[ConsoleNotifier] = None,
                 scanner: Optional[UpdateScanner] = None):
        self.settings = settings
        self.notifier = notifier or ConsoleNotifier()
        self.client = client or build_client(settings)
        self.cache = PackageCache(settings.cache_root)
        self.installer = PackageInstaller(self.cache, self.client, self.notifier,
                                          workspace_root=settings.workspace_root)
        self.scanner = scanner or UpdateScanner(self.cache, self.client, self.notifier)

        # Command id -> handler; handlers return True on success
        self.commands: Dict[str, Callable[..., bool]] = {
            'install': self.install,
            'check-updates': self.check_updates,
            'list': self.show_local_packages,
            'hello': self.hello,
        }

    def dispatch(self, command: str, **kwargs) -> bool:
        handler = self.commands.get(command)
        if handler is None:
            self.notifier.error(f"Unknown command '{command}'. Available: {', '.join(self.commands)}")
            return False
        return handler(**kwargs)

    def activate(self) -> None:
        """Startup hook: warn if npm is missing and run the (cooldown-gated) update scan."""
        if not self.client.is_available():
            self.notifier.warning(f"{self.client.command} is not available; registry operations will fail")
        self.scanner.check_for_updates()

    def install(self, name: Optional[str] = None, version: Optional[str] = None) -> bool:
        """Install a package, prompting for the name and version when not given."""
        if name is None:
            name = self.notifier.prompt("Enter package name to install", "e.g., lodash, express, react")
            if not name:
                return False
            if version is None:
                version = self.notifier.prompt("Enter version (leave empty for latest)", "e.g., 1.0.0")
        outcome = self.installer.install_package(name, version or None)
        return outcome.installed

    def check_updates(self) -> bool:
        report = self.scanner.check_for_updates(force=True)
        return report.completed

    def show_local_packages(self) -> bool:
        packages = self.cache.list()
        if not packages:
            self.notifier.info("No packages found in local repository")
            return True

        table_data: List[List[str]] = [[name, version, self.cache.package_path(name, version)]
                                       for name, version in packages]
        print(f"\n{Fore.GREEN}Local packages: {len(packages)}{Style.RESET_ALL}")
        print(tabulate(table_data, headers=['Package', 'Version', 'Path'], tablefmt='grid'))
        return True

    def hello(self) -> bool:
        self.notifier.info("Hello World from Local NPM Repository Manager!")
        return True

    def shell(self, stdin=None) -> None:
        """
        Read command ids until EOF or exit; the update cooldown lasts for the session.
        When stdin is given, prompts raised by commands read from it too.
        """
        if stdin is None:
            self._shell_loop(sys.stdin)
            return
        previous = getattr(self.notifier, 'stdin', None)
        self.notifier.stdin = stdin
        try:
            self._shell_loop(stdin)
        finally:
            self.notifier.stdin = previous

    def _shell_loop(self, stream) -> None:
        self.activate()
        print(f"{Fore.CYAN}Commands: {', '.join(self.commands)}, exit{Style.RESET_ALL}")
        while True:
            print(f"{Fore.YELLOW}lnr> {Style.RESET_ALL}", end='', flush=True)
            line = stream.readline()
            if not line:
                print()
                break
            try:
                parts = shlex.split(line)
            except ValueError as e:
                self.notifier.error(f"Could not parse command: {e}")
                continue
            if not parts:
                continue
            if parts[0] in EXIT_COMMANDS:
                break
            if parts[0] == 'install' and len(parts) > 1:
                self.dispatch('install', name=parts[1], version=parts[2] if len(parts) > 2 else None)
            else:
                self.dispatch(parts[0])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='lnr',
        description='Local NPM Repository Manager',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s install                      # Prompt for package name and version
    %(prog)s install -n lodash            # Install latest lodash (cache first)
    %(prog)s install -n lodash -v 4.17.21 # Install an exact version
    %(prog)s check-updates                # Offer newer versions of cached packages
    %(prog)s list                         # Show cached packages
    %(prog)s shell                        # Interactive session
                """
    )
    parser.add_argument('command',
                        choices=['install', 'check-updates', 'list', 'hello', 'shell'],
                        help='Command to execute')
    parser.add_argument('-n', '--name', help='Package name (install)')
    parser.add_argument('-v', '--version', dest='package_version', help='Package version (install)')
    parser.add_argument('-w', '--workspace', help='Project directory to install into')
    parser.add_argument('-s', '--storage', help='Storage directory holding the npm-cache')
    parser.add_argument('--version-source', choices=VERSION_SOURCES,
                        help="Resolve latest versions with 'npm view' or the registry HTTP API")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.load(storage_dir=args.storage, workspace_root=args.workspace,
                                 version_source=args.version_source)
    except ValueError as e:
        print(f"{Fore.RED}Error: {e}{Style.RESET_ALL}")
        return 1

    cli = LocalRepositoryCLI(settings)

    if args.command == 'shell':
        cli.shell()
        return 0
    if args.command == 'install':
        ok = cli.dispatch('install', name=args.name, version=args.package_version)
    else:
        ok = cli.dispatch(args.command)
    return 0 if ok else 1


if __name__ == '__main__':
    sys.exit(main())
