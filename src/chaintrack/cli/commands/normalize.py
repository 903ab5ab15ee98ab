"""Normalize and export command."""

import json
from pathlib import Path

import click

from chaintrack.adapters import parse_kaspa_record, unwrap_records
from chaintrack.cli.date_filters import resolve_cli_date_range
from chaintrack.cli.error_handling import handle_domain_error
from chaintrack.domain.csv_export import CSVExportService
from chaintrack.domain.direction import UtxoChangePolicy, outpoint_lookup_from_records
from chaintrack.domain.entities import ActionType
from chaintrack.domain.errors import DomainError
from chaintrack.domain.filters import TransactionFilter, apply_filters
from chaintrack.domain.normalize import NormalizationService
from chaintrack.utils.date_parser import format_export_date


def _load_records(path: str) -> list:
    """Read a saved explorer response and return its raw items."""
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"{path} is not valid JSON: {e}") from e
    return unwrap_records(payload)


def _print_table(transactions) -> None:
    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 110)
    click.echo(
        f"{'Date (UTC)':<20} {'Type':<21} {'Received':<22} {'Sent':<22} {'Fee':<16} {'Tag':<8}"
    )
    click.echo("-" * 110)
    for txn in transactions:
        received = f"{txn.received_quantity} {txn.received_currency}".strip()
        sent = f"{txn.sent_quantity} {txn.sent_currency}".strip()
        fee = f"{txn.fee_amount} {txn.fee_currency}".strip()
        click.echo(
            f"{format_export_date(txn.date):<20} {txn.type.value:<21} {received:<22} "
            f"{sent:<22} {fee:<16} {txn.tag:<8}"
        )
        click.echo(f"  {txn.notes} | {txn.status.value} | {txn.link}")


@click.command("normalize")
@click.argument("raw_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--chain", required=True, help="Chain key (see 'chaintrack chains')")
@click.option("--address", required=True, help="Wallet address whose history this is")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write Awaken CSV to this file")
@click.option(
    "--previous-txs",
    type=click.Path(exists=True, dir_okay=False),
    help="Kaspa transactions spent by RAW_JSON inputs, used to compute fees",
)
@click.option(
    "--report-change",
    is_flag=True,
    help="Report UTXO change returned to the sender as a separate receive",
)
@click.option(
    "--type",
    "types",
    multiple=True,
    type=click.Choice([t.value for t in ActionType]),
    help="Only include this transaction type (repeatable)",
)
@click.option("--asset", help="Only include transactions involving this asset symbol")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--this-month", is_flag=True, help="Filter to current month")
@click.option("--this-year", is_flag=True, help="Filter to current year")
@click.option("--last-month", is_flag=True, help="Filter to last month")
@click.option("--last-year", is_flag=True, help="Filter to last year")
@click.option("--no-record", is_flag=True, help="Do not record the export in history")
@click.pass_context
def normalize_transactions(
    ctx,
    raw_json: str,
    chain: str,
    address: str,
    output: str | None,
    previous_txs: str | None,
    report_change: bool,
    types: tuple[str, ...],
    asset: str | None,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    last_month: bool,
    last_year: bool,
    no_record: bool,
):
    """Normalize a saved explorer response.

    RAW_JSON is a JSON array of explorer items, an Etherscan-style
    {"result": [...]} response or a Fuel GraphQL response.

    Examples:
        chaintrack normalize txlist.json --chain celo --address 0xabc...
        chaintrack normalize kaspa.json --chain kaspa --address kaspa:qr... -o out.csv
    """
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "this-year": this_year,
            "last-month": last_month,
            "last-year": last_year,
        },
    )

    try:
        raw_records = _load_records(raw_json)

        outpoint_lookup = None
        if previous_txs:
            previous = [parse_kaspa_record(raw) for raw in _load_records(previous_txs)]
            outpoint_lookup = outpoint_lookup_from_records(previous)

        result = NormalizationService().normalize(
            raw_records,
            chain,
            address,
            outpoint_lookup=outpoint_lookup,
            change_policy=(
                UtxoChangePolicy.REPORT_CHANGE if report_change else UtxoChangePolicy.COLLAPSE_TO_SEND
            ),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    criteria = TransactionFilter(
        types=frozenset(ActionType(t) for t in types),
        date_from=start,
        date_to=end,
        asset=asset,
    )
    transactions = apply_filters(result["transactions"], criteria)

    if result["errors"]:
        click.echo(f"Skipped {result['skipped']} record(s):", err=True)
        for error in result["errors"]:
            click.echo(f"  {error}", err=True)

    if output is None:
        if not transactions:
            click.echo("No transactions found.")
            return
        _print_table(transactions)
        return

    db = None if no_record else ctx.obj.get("db")
    export = CSVExportService(db).export(
        transactions,
        blockchain=chain.lower(),
        wallet_address=address,
        output_path=output,
    )
    click.echo("\nExport complete:")
    click.echo(f"  Wrote: {len(transactions)} transactions to {export['path']}")
    click.echo(f"  Digest: {export['digest']}")
    if export["export"] is not None:
        click.echo(f"  Recorded as export {export['export'].id}")


def register_commands(cli):
    """Register normalize command with main CLI."""
    cli.add_command(normalize_transactions)
