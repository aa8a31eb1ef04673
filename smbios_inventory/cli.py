"""CLI entry point for the SMBIOS inventory decoder."""

import sys
import json
import dataclasses
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from smbios_inventory.config import ConfigManager, LogManager, load_settings
from smbios_inventory.discovery import TableSource
from smbios_inventory.discovery.entry_point import ChecksumValidator, EntryPoint
from smbios_inventory.discovery.table_walker import TableWalker
from smbios_inventory.errors import SMBIOSDecodeError
from smbios_inventory.session import DecodeSession

__version__ = "0.1.0"

console = Console()
status = Console(stderr=True)


def setup_logging(manager: ConfigManager, debug: bool) -> None:
    level = "DEBUG" if debug else manager.get("logging", "log_level", "INFO")
    LogManager("smbios_inventory", manager.get("logging", "log_dir") or None, level)


def open_source(manager: ConfigManager, entry_point, table, rsmb) -> TableSource:
    """Pick the firmware table blob when given, else entry point + table files."""
    if rsmb:
        return TableSource.from_rsmb_file(rsmb)
    return TableSource.from_files(
        entry_point or manager.get("sources", "entry_point_path"),
        table or manager.get("sources", "table_path"),
    )


@click.group()
@click.version_option(version=__version__)
def cli():
    """SMBIOS Inventory - Decode firmware SMBIOS/DMI tables into JSON records."""
    pass


@cli.command()
@click.option("--entry-point", "-e", type=click.Path(), help="Entry point file (default: from config / sysfs)")
@click.option("--table", "-t", type=click.Path(), help="Structure table file (default: from config / sysfs)")
@click.option("--rsmb", type=click.Path(exists=True), help="Saved 'RSMB' firmware table blob instead of files")
@click.option("--config", "-c", "config_path", type=click.Path(), help="INI configuration file")
@click.option("--strict-checksum", is_flag=True, help="Require byte sums of 0 mod 256")
@click.option("--no-associations", is_flag=True, help="Skip the group associations post-pass")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--output", "-o", type=click.Path(), help="Write JSON here instead of stdout")
def decode(entry_point, table, rsmb, config_path, strict_checksum, no_associations, debug, output):
    """Decode the SMBIOS tables and emit JSON."""
    manager = load_settings(config_path)
    setup_logging(manager, debug)

    try:
        source = open_source(manager, entry_point, table, rsmb)
    except SMBIOSDecodeError as e:
        status.print(f"[red]✗ {e}[/red]")
        sys.exit(1)

    settings = manager.decoder_settings()
    if strict_checksum:
        settings = dataclasses.replace(settings, strict_checksum=True)
    if no_associations:
        settings = dataclasses.replace(settings, resolve_associations=False)

    with DecodeSession(source, settings) as session:
        result = session.run()

    payload = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
    if output:
        Path(output).write_text(payload + "\n", encoding="utf-8")
        status.print(f"✓ Wrote {len(result.records)} record(s) to {output}")
    else:
        click.echo(payload)

    if result.error:
        status.print(f"[red]✗ {result.error}[/red]")
        sys.exit(1)
    for message in result.errors:
        status.print(f"[yellow]⚠️  {message}[/yellow]")


@cli.command()
@click.option("--entry-point", "-e", type=click.Path(), help="Entry point file (default: from config / sysfs)")
@click.option("--config", "-c", "config_path", type=click.Path(), help="INI configuration file")
@click.option("--strict-checksum", is_flag=True, help="Require byte sums of 0 mod 256")
def entry(entry_point, config_path, strict_checksum):
    """Show the parsed entry point."""
    manager = load_settings(config_path)
    path = Path(entry_point or manager.get("sources", "entry_point_path"))

    try:
        data = path.read_bytes()
    except OSError as e:
        status.print(f"[red]✗ Cannot read {path}: {e}[/red]")
        sys.exit(1)

    try:
        parsed = EntryPoint.from_bytes(data)
    except SMBIOSDecodeError as e:
        status.print(f"[red]✗ {e}[/red]")
        sys.exit(1)

    checksum_ok = ChecksumValidator.is_valid(data, strict=strict_checksum)

    table = Table(title=f"SMBIOS {parsed.version} entry point")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in parsed.to_dict().items():
        table.add_row(key, str(value))
    table.add_row("checksum", "ok" if checksum_ok else "failed")
    console.print(table)


@cli.command()
@click.option("--table", "-t", "table_path", type=click.Path(), help="Structure table file (default: from config / sysfs)")
@click.option("--rsmb", type=click.Path(exists=True), help="Saved 'RSMB' firmware table blob")
@click.option("--config", "-c", "config_path", type=click.Path(), help="INI configuration file")
@click.option("--type", "type_codes", type=int, multiple=True, help="Only list these structure types")
def records(table_path, rsmb, config_path, type_codes):
    """List the raw structures walked from the table."""
    manager = load_settings(config_path)

    try:
        if rsmb:
            data = TableSource.from_rsmb_file(rsmb).table
        else:
            data = Path(table_path or manager.get("sources", "table_path")).read_bytes()
    except (OSError, SMBIOSDecodeError) as e:
        status.print(f"[red]✗ {e}[/red]")
        sys.exit(1)

    walked = TableWalker.walk(data)
    if type_codes:
        walked = [r for r in walked if r.type in type_codes]

    table = Table(title=f"{len(walked)} structure(s)")
    table.add_column("Type", justify="right")
    table.add_column("Handle")
    table.add_column("Length", justify="right")
    table.add_column("Strings")
    for record in walked:
        table.add_row(str(record.type), f"0x{record.handle:04x}", str(record.length), ", ".join(record.strings))
    console.print(table)


def main():
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
