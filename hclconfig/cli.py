"""
hclconfig CLI entry point.
"""
import sys
from typing import List, Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from hclconfig import __version__
from hclconfig.config import Config
from hclconfig.errors import ConfigError, MalformedAddressError, ResourceNotFoundError
from hclconfig.getter import Getter
from hclconfig.models.fqdn import fqdn_for, parse_fqdn
from hclconfig.models.resource import Resource
from hclconfig.parsers.hcl import Parser
from hclconfig.registry import default_types, register_generic
from hclconfig.reporters import json_reporter, markdown
from hclconfig.resolver import Resolver
from hclconfig.settings import load_settings

console = Console(stderr=True)


def _load(paths: Tuple[str, ...], settings_path: Optional[str], no_color: bool) -> Tuple[Config, Resolver]:
    stderr = Console(stderr=True, no_color=no_color)
    try:
        settings = load_settings(settings_path)
        registry = default_types()
        register_generic(registry, settings.types)

        config = Config()
        parser = Parser(registry, config, getter=Getter(), settings=settings)
        with stderr.status(f"[bold]Loading {len(paths)} path(s)…"):
            for p in paths:
                parser.parse_directory(p)

        resolver = Resolver(config, include_disabled=settings.include_disabled_dependencies)
        resolver.resolve_all()
    except ConfigError as exc:
        stderr.print(f"[red]Load error:[/red] {exc}")
        sys.exit(2)

    stderr.print(f"Loaded [bold]{config.count()}[/bold] resources.")
    return config, resolver


def _print_table(resources: List[Resource], title: str, no_color: bool) -> None:
    tbl = Table(title=title, show_header=True, header_style="bold")
    tbl.add_column("Address")
    tbl.add_column("Type", width=12)
    tbl.add_column("Module", width=20)
    tbl.add_column("Links")

    for r in resources:
        meta = r.metadata()
        address = str(fqdn_for(meta))
        if meta.disabled and not no_color:
            address = f"[dim]{address} (disabled)[/dim]"
        elif meta.disabled:
            address = f"{address} (disabled)"
        tbl.add_row(address, meta.type, meta.module or "-", "\n".join(meta.resource_links))

    Console(no_color=no_color).print(tbl)


_settings_option = click.option(
    "--settings",
    "settings_path",
    type=click.Path(),
    default=None,
    help="Settings file (default: ./hclconfig.yaml when present).",
)
_no_color_option = click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable rich terminal color output.",
)


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.version_option(__version__)
@click.pass_context
def cli(ctx):
    """hclconfig: load HCL resources and resolve their addresses."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path())
@click.option("--type", "type_name", default=None, help="Only resources of this type.")
@click.option("--module", "module_address", default=None, help="Only resources in this module, e.g. module.db")
@click.option("--children", is_flag=True, default=False, help="With --module, include nested modules.")
@_settings_option
@_no_color_option
def resources(
    paths: Tuple[str, ...],
    type_name: Optional[str],
    module_address: Optional[str],
    children: bool,
    settings_path: Optional[str],
    no_color: bool,
) -> None:
    """List the resources loaded from PATHS."""
    config, _ = _load(paths, settings_path, no_color)

    found = list(config)
    if module_address:
        try:
            found = config.find_module_resources(module_address, children)
        except MalformedAddressError as exc:
            console.print(f"[red]Error:[/red] {exc}")
            sys.exit(2)
    if type_name:
        found = [r for r in found if r.metadata().type == type_name]

    _print_table(found, "Resources", no_color)


@cli.command()
@click.argument("path", type=click.Path())
@click.argument("address")
@click.option("--parent", default="", help="Module the address is relative to, e.g. module1.module2")
@_settings_option
@_no_color_option
def resolve(path: str, address: str, parent: str, settings_path: Optional[str], no_color: bool) -> None:
    """
    Resolve ADDRESS against the configuration at PATH.

    Module addresses list every resource nested in the module.
    """
    _, resolver = _load((path,), settings_path, no_color)

    try:
        if parse_fqdn(address).is_module:
            found = resolver.find_relative_module_resources(address, parent, include_children=True)
            _print_table(found, f"Resources in {address}", no_color)
            return

        r = resolver.find_relative_resource(address, parent)
    except MalformedAddressError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(2)
    except ResourceNotFoundError as exc:
        console.print(f"[red]Not found:[/red] {exc.address}")
        sys.exit(1)

    click.echo(str(fqdn_for(r.metadata())))


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path())
@click.option(
    "--format", "output_format",
    type=click.Choice(["json", "markdown"], case_sensitive=False),
    default="json",
    show_default=True,
    help="Output format.",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    default=None,
    help="Write report to this file (default: stdout).",
)
@_settings_option
@_no_color_option
def graph(
    paths: Tuple[str, ...],
    output_format: str,
    output: Optional[str],
    settings_path: Optional[str],
    no_color: bool,
) -> None:
    """Report the resolved dependency graph of PATHS."""
    config, _ = _load(paths, settings_path, no_color)
    source_label = ", ".join(paths)

    if output_format.lower() == "markdown":
        report_content = markdown.build_report(config, source_label)
    else:
        report_content = json_reporter.build_report(config, source_label)

    if output:
        with open(output, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(report_content)
        Console(stderr=True, no_color=no_color).print(f"Report written to [bold]{output}[/bold]")
    else:
        click.echo(report_content)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
