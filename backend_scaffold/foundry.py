#!/usr/bin/env python3
"""
Backend Scaffold — Node · TypeScript · PostgreSQL
- asks for name/version/description/author/license (or takes them from flags)
- optional extras: docker (Dockerfile, compose, .dockerignore) and
  githooks (husky, commitlint, lint-staged)
- checks the Node.js version and that <cwd>/<name> does not exist yet
- writes the src/ tests/ logs/ tree and the root config files
- runs `git init` in the new project
"""
from __future__ import annotations

import argparse
import logging
import subprocess
import sys
import traceback
from pathlib import Path
from typing import Mapping, Sequence

from rich.console import Console
from rich.markup import escape

from backend_scaffold import __version__
from backend_scaffold.checks import check_existing_project, check_node_version
from backend_scaffold.config_files import write_config_files
from backend_scaffold.layout import build_structure
from backend_scaffold.metadata import DEFAULTS, EXTRAS, ProjectMetadata, validate_project_name
from backend_scaffold.prompts import PromptSession, collect_metadata
from backend_scaffold.structure import Node, materialize

logger = logging.getLogger(__name__)


def run(cmd: list[str], console: Console, cwd: Path | None = None, check: bool = True) -> subprocess.CompletedProcess:
    console.print(f"[dim]$ {' '.join(cmd)}[/dim]")
    return subprocess.run(cmd, cwd=str(cwd) if cwd else None, check=check)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------- generation ----------------------

def generate_project(
    project_dir: Path,
    metadata: ProjectMetadata,
    min_node: int = DEFAULTS["min_node"],
    structure: Mapping[str, Node] | None = None,
) -> None:
    """Create ``project_dir`` and everything inside it. No rollback on failure."""
    project_dir.mkdir(parents=True)
    logger.info("materializing %s", project_dir)
    materialize(project_dir, structure if structure is not None else build_structure())
    write_config_files(project_dir, metadata, min_node)


def init_git(project_dir: Path, console: Console) -> None:
    run(["git", "init"], console, cwd=project_dir)
    console.print("[green bold]✅ Git repo created[/green bold]")


# ---------------------- CLI / Helpers ----------------------

def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="backend-scaffold",
        description="Node · TypeScript · PostgreSQL backend scaffolder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  backend-scaffold
  backend-scaffold orders-api --docker --githooks --author "Jane Doe"
  backend-scaffold orders-api -y --no-git
""",
    )
    p.add_argument("name", nargs="?", help="Project name (also the directory name)")
    p.add_argument("--project-version", dest="version", default=None, help=f"Project version (default: {DEFAULTS['version']})")
    p.add_argument("--description", default=None, help="Project description")
    p.add_argument("--author", default=None, help="Author")
    p.add_argument("--license", default=None, help=f"License (default: {DEFAULTS['license']})")
    p.add_argument("--docker", action="store_true", help="Add Dockerfile, docker-compose.yml and .dockerignore")
    p.add_argument("--githooks", action="store_true", help="Add husky, commitlint and lint-staged")
    p.add_argument("-y", "--yes", action="store_true", help="Do not prompt; use flags and defaults")
    p.add_argument("--no-git", action="store_true", help="Skip `git init`")
    p.add_argument(
        "--min-node",
        type=int,
        default=DEFAULTS["min_node"],
        help=f"Minimum Node.js major version (default: {DEFAULTS['min_node']})",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def _preset_from_args(args: argparse.Namespace) -> dict:
    preset = {
        "name": args.name,
        "version": args.version,
        "description": args.description,
        "author": args.author,
        "license": args.license,
        "extras": None,
    }
    chosen = [key for key in EXTRAS if getattr(args, key)]
    if chosen or args.yes:
        preset["extras"] = chosen
    return preset


def gather_metadata(args: argparse.Namespace, console: Console) -> ProjectMetadata:
    preset = _preset_from_args(args)
    if args.yes:
        return ProjectMetadata(
            name=validate_project_name(preset["name"]),
            version=preset["version"] or DEFAULTS["version"],
            description=preset["description"] or "",
            author=preset["author"] or "",
            license=preset["license"] or DEFAULTS["license"],
            extras=preset["extras"],
        )

    with PromptSession(console=console) as session:
        return collect_metadata(session, preset)


def print_summary(console: Console, metadata: ProjectMetadata, project_dir: Path) -> None:
    console.print()
    console.print("[green bold]✅ Project created[/green bold]")
    console.print(f"[dim]Name[/dim] [bold]{escape(metadata.name)}[/bold]")
    console.print(f"[dim]Path[/dim] {escape(str(project_dir))}", soft_wrap=True)
    if metadata.docker:
        console.print("[cyan]🐳 Docker enabled[/cyan]")
    if metadata.githooks:
        console.print("[cyan]🪝 Git Hooks enabled[/cyan]")

    console.print("\n[bold]Next steps:[/bold]")
    hint = "  [dim]# prepare script runs husky install automatically[/dim]" if metadata.githooks else ""
    console.print(f"  [cyan]$[/cyan] cd {escape(metadata.name)} && npm install{hint}")
    console.print("  [cyan]$[/cyan] cp .env.example .env")
    if metadata.docker:
        console.print("  [cyan]$[/cyan] docker compose up -d --build")
    else:
        console.print("  [cyan]$[/cyan] npm run dev")
    console.print()


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    console = Console()
    err_console = Console(stderr=True)

    try:
        console.print("\n[cyan bold]  Backend Scaffold  [/cyan bold][dim]Node · TypeScript · PostgreSQL[/dim]\n")

        metadata = gather_metadata(args, console)
        project_dir = Path.cwd() / metadata.name

        check_node_version(minimum=args.min_node)
        check_existing_project(project_dir)

        generate_project(project_dir, metadata, args.min_node)

        if args.no_git:
            logger.info("skipping git init for %s", project_dir)
        else:
            init_git(project_dir, console)

        print_summary(console, metadata, project_dir)
    except Exception as exc:
        err_console.print(f"\n[red]✖ Error:[/red] {escape(str(exc))}", soft_wrap=True)
        traceback.print_exc(file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
