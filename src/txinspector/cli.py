"""Command-line interface for the transaction inspector."""

import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from txinspector import __version__
from txinspector.config import InspectorConfig, setup_logging
from txinspector.errors import ParseError
from txinspector.models import Transaction
from txinspector.parser import decode_hex
from txinspector.render import render_ascii, render_json, render_pretty, render_summary


def _parse_input_values(ctx, param, value: Optional[str]) -> Optional[Tuple[int, ...]]:
    """Parse --input-values "1000,2000" into satoshi amounts."""
    if value is None:
        return None
    amounts = []
    for part in value.split(','):
        part = part.strip()
        if not part:
            continue
        try:
            amount = int(part)
        except ValueError:
            raise click.BadParameter(f"not an integer: {part!r}")
        if amount < 0 or amount > 0xffffffffffffffff:
            raise click.BadParameter(f"out of range: {part}")
        amounts.append(amount)
    return tuple(amounts)


def read_tx_hex(tx_hex: Optional[str], file: Optional[Path]) -> str:
    """
    Get the transaction hex from a file, the argument or stdin.

    "-" as the argument reads stdin; with no argument stdin is read only when
    it is not a terminal.

    Raises:
        click.UsageError: If no input was provided
        click.FileError: If the file cannot be read
    """
    if file is not None:
        try:
            return file.read_text().strip()
        except OSError as e:
            raise click.FileError(str(file), hint=str(e))

    stdin = sys.stdin
    if tx_hex == "-":
        return stdin.read().strip()
    if tx_hex is not None:
        return tx_hex.strip()
    if stdin.isatty():
        raise click.UsageError("No transaction provided. Use -h for help.")
    return stdin.read().strip()


def _load(ctx: click.Context, tx_hex: Optional[str], file: Optional[Path], strict: bool) -> Transaction:
    """Decode the transaction or exit with status 1."""
    raw = read_tx_hex(tx_hex, file)
    try:
        return decode_hex(raw, strict=strict)
    except ParseError as e:
        click.echo(
            f"{click.style('Error', fg='red', bold=True)}: Failed to parse transaction", err=True
        )
        click.echo(f"  {e}", err=True)
        ctx.exit(1)


tx_hex_argument = click.argument("tx_hex", required=False, metavar="TX_HEX")
file_option = click.option(
    "-f", "--file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Read the transaction hex from a file",
)
strict_option = click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Reject non-minimal varints, superfluous witness data and malformed output scripts",
)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default: ~/.txinspector/txinspector.conf)",
)
@click.option("--debug", is_flag=True, default=False, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], debug: bool) -> None:
    """Parse and inspect raw Bitcoin transactions."""
    config = InspectorConfig(str(config_path) if config_path else None)
    setup_logging(
        debug=debug or config.getboolean('debug'),
        log_timestamps=config.getboolean('logtimestamps'),
    )
    ctx.obj = config


@cli.command()
@tx_hex_argument
@file_option
@click.option(
    "-o", "--output",
    type=click.Choice(["pretty", "json", "summary", "ascii"]),
    default=None,
    help="Output format",
)
@click.option("--compact", is_flag=True, default=False, help="Single-line JSON")
@click.option("--raw-scripts", is_flag=True, default=False, help="Show script hex")
@click.option(
    "--input-values",
    callback=_parse_input_values,
    default=None,
    help="Comma separated input values in satoshis, for fee calculation",
)
@click.option(
    "--network",
    type=click.Choice(["mainnet", "testnet"]),
    default=None,
    help="Network whose addresses are shown first",
)
@strict_option
@click.pass_context
def decode(
    ctx: click.Context,
    tx_hex: Optional[str],
    file: Optional[Path],
    output: Optional[str],
    compact: bool,
    raw_scripts: bool,
    input_values: Optional[Tuple[int, ...]],
    network: Optional[str],
    strict: bool,
) -> None:
    """Decode a transaction and print it."""
    config: InspectorConfig = ctx.obj
    output = output or config.get('output')
    compact = compact or config.getboolean('compact')
    raw_scripts = raw_scripts or config.getboolean('rawscripts')
    network = network or config.get('network')
    strict = strict or config.getboolean('strict')

    tx = _load(ctx, tx_hex, file, strict)

    if input_values is not None:
        if not tx.set_input_values(input_values):
            click.echo(
                f"{click.style('Warning', fg='yellow', bold=True)}: Provided {len(input_values)} "
                f"input values but transaction has {len(tx.inputs)} inputs",
                err=True,
            )

    if output == "json":
        click.echo(render_json(tx, compact=compact))
    elif output == "summary":
        click.echo(render_summary(tx, network=network))
    elif output == "ascii":
        click.echo(render_ascii(tx))
    else:
        click.echo(render_pretty(tx, raw_scripts=raw_scripts, network=network))


@cli.command()
@tx_hex_argument
@file_option
@strict_option
@click.pass_context
def txid(ctx: click.Context, tx_hex: Optional[str], file: Optional[Path], strict: bool) -> None:
    """Print the transaction id."""
    config: InspectorConfig = ctx.obj
    strict = strict or config.getboolean('strict')
    tx = _load(ctx, tx_hex, file, strict)
    click.echo(tx.txid)


@cli.command()
@tx_hex_argument
@file_option
@strict_option
@click.pass_context
def validate(ctx: click.Context, tx_hex: Optional[str], file: Optional[Path], strict: bool) -> None:
    """Check that a transaction decodes; exit status 1 if not."""
    config: InspectorConfig = ctx.obj
    strict = strict or config.getboolean('strict')
    raw = read_tx_hex(tx_hex, file)
    try:
        decode_hex(raw, strict=strict)
    except ParseError as e:
        click.echo(f"invalid: {e}")
        ctx.exit(1)
    click.echo("valid")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
