#!/usr/bin/env python3
"""Command-line interface for mac-backup-helper."""
import argparse
import functools
import json
import os
import sys

import questionary
from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

from .core import config as config_module
from .core.constants import HOME, SIZE_WIDTH
from .core.errors import ScanRootError
from .services import collector_service as collector
from .services import report_service as report
from .services import users_service as users
from .utils.disk import human_size_kb, is_real_dir, printable

console = Console(record=True)


def print_lines(root, lines):
    """Print one root's tree. Sizes in yellow, placeholders dim."""
    for line in lines:
        if line.placeholder and not line.size_text:
            console.print(f"[dim]{escape(printable(line.format()))}[/]", highlight=False)
            continue
        head = f"{line.size_text:>{SIZE_WIDTH}}"
        rest = escape(printable(line.format()[len(head):]))
        console.print(f"[yellow]{head}[/]{rest}", highlight=False)


def _print_root_header(root):
    console.print()
    console.print(Rule(f"[bold cyan]{escape(printable(root))}[/]", style="cyan"))


def _print_failure(failure):
    console.print(f"  [red]✗[/] {escape(printable(failure.root))}: {escape(printable(str(failure.error)))}")


def pick_user_tui(homes):
    """Select menu of user homes. Returns the chosen path, or None on Ctrl+C."""
    choices = [questionary.Choice(f"{name}  ({path})", value=path) for name, path in homes]
    return questionary.select("Which user should be scanned?", choices=choices).ask()


def pick_user(homes):
    if sys.stdin.isatty():
        return pick_user_tui(homes)
    console.print()
    console.print("[cyan]Select the user to scan:[/]\n")
    for i, (name, path) in enumerate(homes, 1):
        console.print(f"  [bold]{i})[/] {escape(name)}  [dim]{escape(path)}[/]")
    choice = console.input("\n[cyan]Your choice: [/]").strip()
    if choice.isdigit() and 1 <= int(choice) <= len(homes):
        return homes[int(choice) - 1][1]
    return None


def _list_users() -> None:
    homes = users.list_user_homes()
    console.print(Rule("[bold cyan]mac-backup-helper — Users[/]", style="cyan"))
    console.print()
    if not homes:
        console.print("[yellow]No user home folders found.[/]")
        console.print()
        return
    table = Table(show_header=True, header_style="bold cyan", box=None, padding=(0, 2))
    table.add_column("User", style="cyan")
    table.add_column("Home", style="")
    for name, path in homes:
        table.add_row(escape(name), escape(path))
    console.print(table)
    console.print()


def _run_config(argv: list) -> None:
    p = argparse.ArgumentParser(prog="mac-backup-helper config", description="Manage configuration.")
    p.add_argument("--init", action="store_true", help="Create default config file")
    p.add_argument("--show", action="store_true", help="Show current config")
    p.add_argument("--force", action="store_true", help="With --init, overwrite an existing config file")
    args = p.parse_args(argv)
    if args.init:
        path = config_module.init_config(force=args.force)
        console.print(Rule("[bold cyan]Config[/]", style="cyan"))
        console.print()
        if path is None:
            console.print(f"  [yellow]Config already exists at {escape(config_module.config_path())}. Use --force to reset it.[/]")
        else:
            console.print(f"  [green]✓[/] Created config at [cyan]{escape(path)}[/]")
        console.print()
        return
    if args.show:
        if not config_module.config_exists():
            console.print("[yellow]No config found. Run: mac-backup-helper config --init[/]")
            return
        cfg = config_module.load()
        console.print(Rule("[bold cyan]Config[/]", style="cyan"))
        console.print()
        console.print(escape(json.dumps(cfg, indent=2)), highlight=False)
        console.print()
        return
    p.print_help()


def resolve_roots(args, cfg):
    """Positional paths, then --user, then the picker, then config, then $HOME."""
    if args.paths:
        return list(args.paths)
    if args.user:
        return [users.user_home(args.user)]
    if args.interactive:
        homes = users.list_user_homes()
        if not homes:
            raise ScanRootError("No user home folders to choose from")
        chosen = pick_user(homes)
        return [chosen] if chosen else []
    if cfg.get("scan_roots"):
        return list(cfg["scan_roots"])
    return [HOME]


def _save_log(path):
    path = os.path.expanduser(path)
    dirname = os.path.dirname(path)
    if dirname and not is_real_dir(dirname):
        os.makedirs(dirname, exist_ok=True)
    console.save_text(path, clear=False, styles=False)
    console.print(f"[dim]Log written to {escape(path)}[/]")


def main(argv=None):
    argv = argv if argv is not None else sys.argv[1:]
    if argv and argv[0] == "users":
        _list_users()
        return
    if argv and argv[0] == "config":
        _run_config(argv[1:])
        return

    cfg = config_module.load()
    parser = argparse.ArgumentParser(
        prog="mac-backup-helper",
        description="Show which folders and files hold the space before a backup or migration.",
    )
    parser.add_argument("paths", nargs="*", help="Folders to scan (default: config scan_roots or your home).")
    parser.add_argument("--user", help="Scan /Users/<USER>.")
    parser.add_argument("--interactive", action="store_true", help="Pick the user to scan from a menu.")
    parser.add_argument("--threshold", type=int, default=cfg["threshold_kb"],
                        help=f"Smallest size in KB worth listing (default: {cfg['threshold_kb']}).")
    parser.add_argument("--one-filesystem", dest="one_filesystem", action="store_true",
                        help="Do not cross into other volumes (du -x).")
    parser.add_argument("--cross-filesystems", dest="one_filesystem", action="store_false",
                        help="Follow mounted volumes too.")
    parser.add_argument("--log", default=cfg["log_file"], help="Also write the report as plain text to this file.")
    parser.set_defaults(one_filesystem=cfg["one_filesystem"])
    args = parser.parse_args(argv)

    if args.threshold < 1:
        console.print("[red]--threshold must be at least 1 KB.[/]")
        sys.exit(1)

    try:
        roots = resolve_roots(args, cfg)
    except ScanRootError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        sys.exit(1)
    if not roots:
        console.print("[yellow]No selection. Exiting.[/]")
        sys.exit(0)

    console.print(Rule("[bold cyan]💾 mac-backup-helper[/]", style="cyan"))
    console.print(f"[cyan]Items of at least {human_size_kb(args.threshold)} (sizes are approximate):[/]")

    collect = functools.partial(
        collector.collect_sizes,
        one_filesystem=args.one_filesystem,
        timeout=cfg["scan_timeout_sec"],
    )
    try:
        result = report.run_report(
            roots,
            args.threshold,
            collect=collect,
            on_root=_print_root_header,
            on_lines=print_lines,
            on_error=_print_failure,
        )
    except ScanRootError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        sys.exit(1)

    console.print()
    console.print(f"  [bold green]Total: {human_size_kb(result.total.total_kb)}[/]")
    console.print()
    if args.log:
        _save_log(args.log)
    if result.failures:
        sys.exit(2)


if __name__ == "__main__":
    main()
