"""Text renderings of a decoded transaction."""

from datetime import datetime, timezone
from typing import List

import click

from txinspector.models import Transaction, satoshis_to_btc

RULE = "═" * 63
THIN_RULE = "─" * 60
ASM_DISPLAY_LIMIT = 100
LOCKTIME_THRESHOLD = 500_000_000


def format_locktime(locktime: int) -> str:
    """Describe a locktime as no lock, a block height or a UTC timestamp."""
    if locktime == 0:
        return "0 (no lock)"
    if locktime < LOCKTIME_THRESHOLD:
        return f"{locktime} (block height)"
    try:
        stamp = datetime.fromtimestamp(locktime, tz=timezone.utc)
        return f"{locktime} ({stamp.strftime('%Y-%m-%d %H:%M:%S UTC')})"
    except (OverflowError, OSError, ValueError):
        return f"{locktime} (invalid timestamp)"


def _label(text: str) -> str:
    return click.style(text, fg="white", bold=True)


def _dim(text: str) -> str:
    return click.style(text, fg="bright_black")


def _heading(text: str) -> str:
    return click.style(text, fg="cyan", bold=True)


def render_pretty(tx: Transaction, raw_scripts: bool = False, network: str = "mainnet") -> str:
    """
    Full report of a transaction.

    Args:
        tx: Decoded transaction
        raw_scripts: Also print script hex
        network: Network whose address is shown first (mainnet or testnet)

    Returns:
        Multi-line styled string
    """
    lines: List[str] = [
        "",
        click.style(RULE, fg="bright_blue"),
        click.style("                    BITCOIN TRANSACTION", fg="bright_blue", bold=True),
        click.style(RULE, fg="bright_blue"),
        "",
        _heading("Transaction Info"),
        f"  {_label('TXID:')} {click.style(tx.txid, fg='yellow')}",
    ]
    if tx.is_segwit:
        lines.append(f"  {_label('WTXID:')} {click.style(tx.wtxid, fg='yellow')}")
    segwit = click.style("Yes", fg="green") if tx.is_segwit else "No"
    lines += [
        f"  {_label('Version:')} {tx.version}",
        f"  {_label('SegWit:')} {segwit}",
        f"  {_label('Size:')} {tx.raw_size} bytes",
        f"  {_label('Virtual Size:')} {tx.get_vsize()} vbytes",
        f"  {_label('Weight:')} {tx.weight} WU",
        f"  {_label('Locktime:')} {format_locktime(tx.locktime)}",
        "",
        f"{_heading('Inputs')} ({len(tx.inputs)})",
        _dim(THIN_RULE),
    ]

    for tx_in in tx.inputs:
        lines.append(f"  {_label('Input')} #{tx_in.index}")
        if tx_in.is_coinbase:
            lines.append(f"    Type: {click.style('Coinbase', fg='magenta', bold=True)}")
        else:
            lines.append(f"    Spends: {click.style(tx_in.txid, fg='yellow')}:{tx_in.vout}")
        if tx_in.value is not None:
            lines.append(
                f"    Value: {click.style(str(tx_in.value), fg='green')} sats "
                f"({satoshis_to_btc(tx_in.value):.8f} BTC)"
            )
        lines.append(f"    Sequence: 0x{tx_in.sequence:08x}")
        if tx_in.script_sig.hex:
            lines.append(f"    ScriptSig: {tx_in.script_sig.size} bytes")
            if len(tx_in.script_sig.asm) < ASM_DISPLAY_LIMIT:
                lines.append(f"      {_dim(tx_in.script_sig.asm)}")
            if raw_scripts:
                lines.append(f"      hex: {_dim(tx_in.script_sig.hex)}")
        if tx_in.witness is not None:
            lines.append(f"    Witness: {len(tx_in.witness)} items")
            for i, item in enumerate(tx_in.witness):
                if len(item) < ASM_DISPLAY_LIMIT:
                    lines.append(f"      [{i}] {_dim(item)}")
                else:
                    lines.append(f"      [{i}] {_dim(item[:64])}...")
        lines.append("")

    other = "testnet" if network != "testnet" else "mainnet"
    lines += [f"{_heading('Outputs')} ({len(tx.outputs)})", _dim(THIN_RULE)]
    for tx_out in tx.outputs:
        lines += [
            f"  {_label('Output')} #{tx_out.index}",
            f"    Value: {click.style(str(tx_out.value), fg='green', bold=True)} sats "
            f"({tx_out.value_btc:.8f} BTC)",
            f"    Type: {click.style(tx_out.script_type.description, fg='cyan')}",
        ]
        if tx_out.address is not None:
            lines.append(
                f"    Address: {click.style(tx_out.address.for_network(network), fg='yellow')}"
            )
            lines.append(f"    {other.capitalize()}: {_dim(tx_out.address.for_network(other))}")
        lines.append(f"    Script: {tx_out.script_pubkey.size} bytes")
        if len(tx_out.script_pubkey.asm) < ASM_DISPLAY_LIMIT:
            lines.append(f"      {_dim(tx_out.script_pubkey.asm)}")
        if raw_scripts:
            lines.append(f"      hex: {_dim(tx_out.script_pubkey.hex)}")
        lines.append("")

    lines += [
        _heading("Summary"),
        _dim(THIN_RULE),
        f"  {_label('Total Output:')} {click.style(str(tx.total_output_satoshis), fg='green')} sats "
        f"({tx.total_output_btc:.8f} BTC)",
    ]
    if tx.fee_satoshis is not None:
        lines.append(
            f"  {_label('Fee:')} {click.style(str(tx.fee_satoshis), fg='red')} sats "
            f"({tx.fee_btc or 0.0:.8f} BTC)"
        )
        lines.append(f"  {_label('Fee Rate:')} {tx.fee_rate():.2f} sat/vB")
    lines.append("")
    return "\n".join(lines)


def render_json(tx: Transaction, compact: bool = False) -> str:
    return tx.to_json(compact=compact)


def render_summary(tx: Transaction, network: str = "mainnet") -> str:
    """Short plain-text summary, one line per output."""
    lines = [
        f"Transaction: {tx.txid}",
        f"  Version: {tx.version}, SegWit: {str(tx.is_segwit).lower()}",
        f"  {len(tx.inputs)} input(s), {len(tx.outputs)} output(s)",
        f"  Size: {tx.raw_size} bytes, vSize: {tx.get_vsize()} vbytes",
        f"  Total output: {tx.total_output_btc:.8f} BTC ({tx.total_output_satoshis} sats)",
    ]
    if tx.fee_satoshis is not None:
        lines.append(f"  Fee: {tx.fee_btc or 0.0:.8f} BTC ({tx.fee_satoshis} sats)")

    lines += ["", "Outputs:"]
    for tx_out in tx.outputs:
        if tx_out.address is not None:
            addr = tx_out.address.for_network(network)
        else:
            addr = "[non-standard]"
        lines.append(
            f"  #{tx_out.index}: {tx_out.value_btc:.8f} BTC -> {addr} "
            f"({tx_out.script_type.description})"
        )
    return "\n".join(lines)


def _clip(text: str, width: int) -> str:
    if len(text) > width:
        return text[:width - 3] + "..."
    return text


def render_ascii(tx: Transaction) -> str:
    """Box diagram of inputs flowing into outputs."""
    width = 69
    lines = [
        "",
        "┌" + "─" * width + "┐",
        f"│ {_clip(f'TX: {tx.txid[:16]}...{tx.txid[-8:]}', width - 2):<{width - 2}} │",
        "├" + "─" * width + "┤",
    ]

    max_rows = max(len(tx.inputs), len(tx.outputs))
    for i in range(max_rows):
        input_str = ""
        if i < len(tx.inputs):
            tx_in = tx.inputs[i]
            if tx_in.is_coinbase:
                input_str = "  [COINBASE]"
            else:
                value_str = (
                    f"{satoshis_to_btc(tx_in.value):.4f} BTC" if tx_in.value is not None else "? BTC"
                )
                input_str = f"  {tx_in.txid[:8]}:{tx_in.vout} ({value_str})"

        output_str = ""
        if i < len(tx.outputs):
            tx_out = tx.outputs[i]
            if tx_out.address is not None:
                addr = tx_out.address.mainnet
                if len(addr) > 20:
                    addr = addr[:20] + "..."
            else:
                addr = "[script]"
            output_str = f"{tx_out.value_btc:.4f} BTC -> {addr}"

        arrow = "═══►" if i == max_rows // 2 else "    "
        lines.append(f"│ {_clip(input_str, 30):<30} {arrow} {_clip(output_str, 31):<31} │")

    total = f"Total: {tx.total_output_btc:.8f} BTC"
    if tx.fee_satoshis is not None:
        total += f" | Fee: {tx.fee_satoshis} sats"
    lines += [
        "├" + "─" * width + "┤",
        f"│ {_clip(total, width - 2):<{width - 2}} │",
        "└" + "─" * width + "┘",
        "",
    ]
    return "\n".join(lines)
