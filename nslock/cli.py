"""nslock CLI — inspect, generate and check the namespace lockfile."""

import logging

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from nslock import __version__

console = Console()


class ConsoleSink:
    """Report sink printing to the rich console."""

    def error(self, message: str) -> None:
        console.print(f"[red]{escape(message)}[/]")

    def warn(self, message: str) -> None:
        console.print(f"[yellow]{escape(message)}[/]")

    def info(self, message: str) -> None:
        console.print(f"[green]{escape(message)}[/]")


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", default=None, help="Path to a .nslock.yaml config file")
@click.option(
    "--log-level",
    default="warning",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Logging verbosity",
)
@click.pass_context
def main(ctx: click.Context, config_path: str | None, log_level: str):
    """nslock — namespaced dependencies and their lockfile.

    Namespaces disambiguate identically-named packages that come from
    different groups on the same source. nslock records them in a
    companion lockfile and checks it for drift.
    """
    from nslock.config import load_config
    from nslock.errors import ConfigError

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )

    try:
        ctx.obj = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


def _lockfile_option(f):
    return click.option("--lockfile", "-l", default=None, help="Lockfile path (overrides config)")(f)


def _load_registry(manifest: str | None, registry=None):
    from nslock.declarations import load_manifest
    from nslock.errors import ManifestError
    from nslock.registry.store import NamespaceRegistry

    registry = registry if registry is not None else NamespaceRegistry()
    if manifest:
        try:
            load_manifest(manifest, registry)
        except ManifestError as e:
            raise click.ClickException(str(e)) from e
    return registry


# ── Check ────────────────────────────────────────────────────────────


@main.command()
@click.option("--manifest", "-m", default=None, help="Manifest whose declarations are checked")
@_lockfile_option
@click.pass_obj
def check(config, manifest: str | None, lockfile: str | None):
    """Validate the namespace lockfile against the manifest.

    Exits with status 1 when errors are found. Warnings never fail the check.
    """
    from nslock.lockfile.reader import LockfileReader
    from nslock.validation.report import report
    from nslock.validation.validator import ConsistencyValidator

    path = lockfile or config.lockfile_path
    console.print(f"\n[bold blue]nslock[/] — Checking: {path}\n")

    registry = _load_registry(manifest)
    result = ConsistencyValidator(registry, LockfileReader(path)).validate()

    if result.warnings and not config.warn_on_missing:
        result.issues = result.errors

    report(result, ConsoleSink())

    if not result.passed:
        console.print(f"\n[red]FAIL[/] {result.summary()}")
        raise SystemExit(1)


# ── Lock ─────────────────────────────────────────────────────────────


@main.command()
@click.option("--manifest", "-m", required=True, help="Manifest declaring namespaced packages")
@click.option("--resolved", "-r", required=True, help="YAML list of resolved specifications")
@_lockfile_option
@click.pass_obj
def lock(config, manifest: str, resolved: str, lockfile: str | None):
    """Write the namespace lockfile from resolver output."""
    from nslock.lockfile.models import ResolvedSpec, spec_lookup_from
    from nslock.lockfile.writer import LockfileWriter

    path = lockfile or config.lockfile_path
    registry = _load_registry(manifest)

    try:
        with open(resolved) as f:
            entries = yaml.safe_load(f) or []
        specs = [ResolvedSpec.from_dict(e) for e in entries]
    except (OSError, yaml.YAMLError, KeyError, TypeError, AttributeError) as e:
        raise click.ClickException(f"Failed to read resolved specs from {resolved}: {e}") from e

    writer = LockfileWriter(path)
    if not writer.should_generate(registry):
        console.print("[yellow]No namespaced packages declared; lockfile not written.[/]")
        return

    if writer.write(registry, spec_lookup_from(specs)):
        console.print(f"[green]Namespace lockfile written to:[/] {path}")
    else:
        console.print(f"[red]Failed to write namespace lockfile:[/] {path}")
        raise SystemExit(1)


# ── Show ─────────────────────────────────────────────────────────────


@main.command()
@_lockfile_option
@click.pass_obj
def show(config, lockfile: str | None):
    """Show the contents of the namespace lockfile."""
    from nslock.errors import NamespaceError
    from nslock.lockfile.reader import LockfileReader

    reader = LockfileReader(lockfile or config.lockfile_path)
    if not reader.exists():
        console.print("[yellow]No namespace lockfile found.[/]")
        return

    try:
        triples = reader.triples()
    except NamespaceError as e:
        raise click.ClickException(str(e)) from e

    table = Table(title=f"Namespace lockfile ({len(triples)} packages)")
    table.add_column("Source", style="dim")
    table.add_column("Namespace", style="cyan")
    table.add_column("Package")
    table.add_column("Version", style="green")
    table.add_column("Platform")

    for source, namespace, name in triples:
        record = reader.record_of(source, namespace, name)
        table.add_row(source, namespace, name, str(record.get("version")), str(record.get("platform", "")))

    console.print(table)


# ── Which ────────────────────────────────────────────────────────────


@main.command()
@click.argument("source")
@click.argument("package")
@click.option("--manifest", "-m", default=None, help="Manifest to layer on top of the lockfile")
@_lockfile_option
@click.pass_obj
def which(config, source: str, package: str, manifest: str | None, lockfile: str | None):
    """Print the namespace PACKAGE belongs to on SOURCE."""
    from dataclasses import replace

    from nslock.errors import NamespaceConflictError
    from nslock.lifecycle import seed_registry
    from nslock.registry.store import NamespaceRegistry
    from nslock.resolution import NamespaceResolution

    if lockfile:
        config = replace(config, lockfile_path=lockfile)

    registry = NamespaceRegistry()
    seed_registry(registry, config)
    _load_registry(manifest, registry)

    resolution = NamespaceResolution(registry, config)
    try:
        namespace = resolution.namespace_for(source, package)
    except NamespaceConflictError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        raise SystemExit(1)

    if resolution.conflicts:
        conflict = resolution.conflicts[-1]
        console.print(
            f"[yellow]{escape(package)} is declared in multiple namespaces on "
            f"{escape(conflict.source)}: {escape(', '.join(conflict.namespaces))}[/]"
        )
    elif namespace is None:
        console.print(f"[yellow]{package} has no namespace on {source}[/]")
    else:
        console.print(f"{namespace}/{package}")


# ── Config ───────────────────────────────────────────────────────────


@main.command(name="config")
@click.pass_obj
def show_config(config):
    """Print the effective configuration."""
    console.print(yaml.safe_dump(config.to_dict(), sort_keys=False).rstrip())


if __name__ == "__main__":
    main()
