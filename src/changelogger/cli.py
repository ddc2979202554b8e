"""
Command line interface for the changelogger tool.

This module defines the ``main`` command group used as the entry point
of the ``changelogger`` command, with its two actions ``create`` and
``update``. It locates the repository, loads configuration, wires the
Git client, document store and version prompt into a
:class:`~changelogger.engine.ChangelogEngine` and reports the outcome
through exit codes.
"""

from __future__ import annotations

import functools
import logging
import time
from pathlib import Path
from typing import Callable, List, Optional

import click

from changelogger import __version__
from changelogger.config.loader import ConfigError, load_config
from changelogger.engine import (
    ChangelogEngine,
    DocumentExistsError,
    GenerationResult,
    Outcome,
    ProviderError,
)
from changelogger.document.store import FileDocumentStore
from changelogger.vcs.git_client import GitClient
from changelogger.versioning.project_metadata import ProjectMetadataReader

# Create a module-level logger. Attach a null handler and disable
# propagation to avoid logging errors when the root logger's stream is
# closed (such as during unit tests). Library modules keep propagating so
# their messages reach the handler configured by ``main``.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_INVALID_USAGE = 2
EXIT_NO_REPO = 3
EXIT_NO_CHANGES = 4
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6
EXIT_DOCUMENT_ERROR = 7
EXIT_ABORTED = 8

TOTAL_STEPS = 3


# ---------------------------------------------------------------------------
# Progress and status display utilities
# ---------------------------------------------------------------------------

class ProgressIndicator:
    """Simple progress indicator for user feedback."""

    def __init__(self, message: str, show_spinner: bool = True):
        self.message = message
        self.show_spinner = show_spinner
        self.spinner_chars = ['⠋', '⠙', '⠹', '⠸', '⠼', '⠴', '⠦', '⠧', '⠇', '⠏']
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        if self.show_spinner:
            click.echo(f"{self.spinner_chars[0]} {self.message}...", nl=False)
        else:
            click.echo(f"→ {self.message}...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = time.time() - self.start_time
        if self.show_spinner:
            click.echo(f"\r✓ {self.message} (took {elapsed:.1f}s)")
        else:
            click.echo(f"  ✓ Done ({elapsed:.1f}s)")
        return False


def print_banner(title: str):
    click.echo("\n" + "="*60)
    click.echo(f"📝 {title}".center(60))
    click.echo("="*60)


def print_step(step_num: int, total_steps: int, message: str):
    """Print a step indicator."""
    click.echo(f"\n{'='*60}")
    click.echo(f"Step {step_num}/{total_steps}: {message}")
    click.echo(f"{'='*60}")


def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}", err=False)


def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}", err=False)


def print_warning(message: str, indent: int = 0):
    """Print a warning message."""
    prefix = "  " * indent
    click.echo(f"{prefix}⚠ {message}", err=False)


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


def print_summary_box(title: str, items: List[str]):
    """Print a formatted summary box."""
    max_width = max(len(title), max(len(item) for item in items) if items else 0)
    box_width = min(max_width + 4, 60)

    click.echo(f"\n┌{'─' * box_width}┐")
    click.echo(f"│ {title.ljust(box_width - 2)}│")
    click.echo(f"├{'─' * box_width}┤")
    for item in items:
        click.echo(f"│ {item.ljust(box_width - 2)}│")
    click.echo(f"└{'─' * box_width}┘")


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------

class ClickVersionPrompt:
    """Ask the user for a version on the terminal.

    A cancelled prompt (Ctrl+C, end of input) counts as no answer.
    """

    def ask(self, prompt_text: str, placeholder: str, default: str) -> Optional[str]:
        click.echo(f"\n   💡 {placeholder}")
        try:
            return click.prompt(f"   {prompt_text}", default=default, show_default=True)
        except click.exceptions.Abort:
            click.echo("")
            print_warning("Version prompt cancelled")
            return None


def locate_repository(start_dir: Path) -> Path:
    """Find the Git repository containing ``start_dir``.

    Raises
    ------
    click.exceptions.Exit
        With code EXIT_NO_REPO if no repository is found.
    """
    with ProgressIndicator("Locating Git repository"):
        repo_root = GitClient.find_repo_root(start_dir)

    if repo_root is None:
        print_error(
            f"No .git directory found in {start_dir} or its parent directories. "
            "This command requires a git repository."
        )
        raise click.exceptions.Exit(EXIT_NO_REPO)
    print_success(f"Found Git repository at: {repo_root}")
    return repo_root


def build_engine(project_dir: Optional[Path], changelog_file: Optional[str], no_input: bool) -> ChangelogEngine:
    """Run the repository and configuration steps and return a ready engine."""
    if changelog_file is not None and not changelog_file.strip():
        print_error("--file must name a changelog file.")
        raise click.exceptions.Exit(EXIT_INVALID_USAGE)
    project_dir = (project_dir or Path.cwd()).resolve()

    print_step(1, TOTAL_STEPS, "Locating Repository")
    repo_root = locate_repository(project_dir)
    logger.debug("Project folder: %s, repository root: %s", project_dir, repo_root)

    print_step(2, TOTAL_STEPS, "Loading Configuration")
    try:
        with ProgressIndicator("Reading configuration"):
            config = load_config(repo_root)
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

    changelog_path = project_dir / (changelog_file or config["changelog_file"])
    logger.debug("Changelog path: %s", changelog_path)
    print_success("Configuration loaded successfully")
    print_info(f"Changelog: {changelog_path}", indent=1)

    prompt = None
    if config["prompt_for_version"] and not no_input:
        prompt = ClickVersionPrompt()

    return ChangelogEngine(
        repo_root=repo_root,
        changelog_path=changelog_path,
        git_client=GitClient(repo_root),
        store=FileDocumentStore(),
        metadata_reader=ProjectMetadataReader([project_dir, repo_root]),
        prompt=prompt,
    )


def execute(operation: Callable[[], GenerationResult]) -> GenerationResult:
    """Run an engine operation, translating failures into exit codes."""
    try:
        return operation()
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
    except DocumentExistsError as exc:
        print_error(str(exc))
        raise click.exceptions.Exit(EXIT_ABORTED)
    except ProviderError as exc:
        print_error(str(exc))
        if exc.source == "log":
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)
        raise click.exceptions.Exit(EXIT_DOCUMENT_ERROR)


def report(result: GenerationResult) -> None:
    """Print the outcome and exit with the matching code."""
    name = result.path.name
    if result.outcome is Outcome.NO_NEW_COMMITS:
        print_warning("No new commits found since last changelog update.")
        raise click.exceptions.Exit(EXIT_NO_CHANGES)

    if result.outcome is Outcome.UPDATED:
        print_success(f"{name} updated successfully!")
    else:
        print_success(f"{name} created successfully!")

    items = [f"✓ File: {result.path}"]
    if result.version is not None:
        items.append(f"✓ Version: {result.version}")
    items.append(f"✓ Commits: {result.commit_count}")
    print_summary_box("Summary", items)
    raise click.exceptions.Exit(EXIT_SUCCESS)


def handle_unexpected(command: Callable) -> Callable:
    """Turn unhandled exceptions of a command into EXIT_GENERIC_ERROR."""

    @functools.wraps(command)
    def wrapper(*args, **kwargs):
        try:
            return command(*args, **kwargs)
        except click.exceptions.Exit:
            # Click uses its own Exit exception; re-raise to let Click handle it
            raise
        except Exception as exc:
            logging.exception("Unhandled error: %s", exc)
            print_error(f"Unexpected error: {exc}")
            raise click.exceptions.Exit(EXIT_GENERIC_ERROR)

    return wrapper


def common_options(command: Callable) -> Callable:
    command = click.option(
        "--no-input", "no_input", is_flag=True,
        help="Never prompt; fall back to the default version.",
    )(command)
    command = click.option(
        "--file", "changelog_file", type=str, default=None,
        help="Changelog file name (default from configuration: CHANGELOG.md).",
    )(command)
    command = click.option(
        "--path", "project_dir",
        type=click.Path(exists=True, file_okay=False, path_type=Path), default=None,
        help="Project folder holding the changelog (default: current directory).",
    )(command)
    return command


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@click.group()
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="changelogger")
def main(verbose: bool) -> None:
    """📝 Generate and maintain CHANGELOG.md from your Git history."""
    # Configure logging. Use force=True to ensure handlers are reconfigured
    # on subsequent invocations (important for tests).
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )


@main.command()
@common_options
@click.option("--yes", "yes", is_flag=True, help="Overwrite an existing changelog without asking.")
@handle_unexpected
def create(project_dir: Optional[Path], changelog_file: Optional[str], no_input: bool, yes: bool) -> None:
    """Create a changelog from the whole commit history."""
    print_banner("Create Changelog")
    engine = build_engine(project_dir, changelog_file, no_input)

    print_step(3, TOTAL_STEPS, "Generating Changelog")
    overwrite = False
    if engine.store.exists(engine.changelog_path):
        overwrite = yes
        if not overwrite and not no_input:
            try:
                overwrite = click.confirm(
                    f"   {engine.changelog_path.name} already exists. Do you want to overwrite it?",
                    default=False,
                )
            except click.exceptions.Abort:
                overwrite = False
        if not overwrite:
            print_warning(f"Kept existing {engine.changelog_path.name}; nothing written.")
            raise click.exceptions.Exit(EXIT_ABORTED)

    result = execute(lambda: engine.create(overwrite=overwrite))
    report(result)


@main.command()
@common_options
@handle_unexpected
def update(project_dir: Optional[Path], changelog_file: Optional[str], no_input: bool) -> None:
    """Prepend commits made since the last entry, creating the changelog if needed."""
    print_banner("Update Changelog")
    engine = build_engine(project_dir, changelog_file, no_input)

    print_step(3, TOTAL_STEPS, "Generating Changelog")
    result = execute(engine.update)
    report(result)
