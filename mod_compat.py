import argparse
import logging
import sys
from pathlib import Path
from typing import List, Tuple

from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table, box

from modcompat import Compatibility, CompatibilityResolver, ModCompatError, ModDefinition
from modcompat.config import Settings
from modcompat.report import generate_compatibility_report
from modcompat.utils import console, load_mod_manifest

STATUS_STYLES = {
    Compatibility.OK: "[green]OK[/]",
    Compatibility.OLD: "[red]OLD[/]",
    Compatibility.UNKNOWN: "[yellow]?[/]",
}


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="""
Mod Compatibility Checker

Reads the installed application version, refreshes the table of compatibility
epochs and reports which mods were built for the installed epoch.

Example usage:
  python mod_compat.py --base-dir mod-installer --mods mods.json
  python mod_compat.py --mods mods.json --report report.md --offline
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--base-dir', default='mod-installer',
                        help='Tool directory next to the application install (default: mod-installer)')
    parser.add_argument('--mods',
                        help='JSON file with a list of mods (name, version, compatibleWith, releaseDate)')
    parser.add_argument('--report',
                        help='Write a markdown report to this file')
    parser.add_argument('--offline', action='store_true',
                        help='Skip refreshing the compatibility epochs')
    parser.add_argument('--verbose', action='store_true',
                        help='Show debug logging')
    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def check_mods(resolver: CompatibilityResolver, mods: List[ModDefinition]) -> List[Tuple[ModDefinition, Compatibility]]:
    return [(mod, resolver.get_compatibility(mod)) for mod in mods]


def print_results(results: List[Tuple[ModDefinition, Compatibility]]) -> None:
    table = Table(box=box.ROUNDED)
    table.add_column("Status", justify="center")
    table.add_column("Mod", style="bold")
    table.add_column("Details", style="dim")

    for mod, compatibility in results:
        if mod.compatible_with:
            details = f"Compatible with {mod.compatible_with}"
        else:
            details = f"Released {mod.release_date.strftime('%Y-%m-%d')}"
        table.add_row(STATUS_STYLES[compatibility], f"{mod.name} {mod.version}".rstrip(), details)

    console.print(table)


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    resolver = CompatibilityResolver(Path(args.base_dir), settings=Settings.from_env())
    try:
        if args.offline:
            resolver.read_current_version()
        else:
            resolver.initialize()
    except ModCompatError as e:
        console.print(f"[red]{e}[/]")
        return 1

    state = resolver.get_state()
    checked = state.checked.strftime("%Y-%m-%d %H:%M:%S %Z") if state.checked else "never"
    epoch = resolver.current_epoch
    console.print(Panel.fit(
        f"Installed version: [blue]{resolver.get_current_version()}[/]\n"
        f"Compatibility epoch: [cyan]{epoch or 'unknown'}[/]\n"
        f"Known epochs: {len(state.table)} (last checked {checked})",
        title="[bold green]Mod Compatibility Checker[/]",
    ))

    results: List[Tuple[ModDefinition, Compatibility]] = []
    if args.mods:
        try:
            mods = [ModDefinition.from_dict(item) for item in load_mod_manifest(args.mods)]
            results = check_mods(resolver, mods)
        except (OSError, KeyError, TypeError, ValueError) as e:
            # InvalidVersionFormat is a ValueError too
            console.print(f"[red]Could not read mods from {args.mods}: {e}[/]")
            return 1
        print_results(results)

    if args.report:
        report_content = generate_compatibility_report(
            current_version=resolver.get_current_version(),
            state=state,
            current_epoch=str(epoch) if epoch else None,
            results=results,
        )
        with open(args.report, 'w', encoding='utf-8') as f:
            f.write(report_content)
        console.print(f"\n[dim]Detailed report saved to {args.report}[/]")

    return 0


if __name__ == "__main__":
    sys.exit(main())
