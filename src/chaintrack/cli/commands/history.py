"""Export history command."""

import click

from chaintrack.domain.export_history import ExportHistoryService
from chaintrack.utils.date_parser import format_export_date


@click.command("history")
@click.option("--chain", help="Only exports for this chain key")
@click.option("--address", help="Only exports for this wallet address")
@click.pass_context
def show_history(ctx, chain: str | None, address: str | None):
    """List recorded CSV exports, newest first."""
    db = ctx.obj["db"]
    service = ExportHistoryService(db)

    exports = service.list_exports(
        blockchain=chain.lower() if chain else None, wallet_address=address
    )
    if not exports:
        click.echo("No exports found.")
        return

    click.echo(f"\nFound {len(exports)} export(s):")
    click.echo("-" * 100)
    click.echo(f"{'ID':<6} {'Date (UTC)':<20} {'Chain':<18} {'Txns':>6}  {'Digest':<20} {'Wallet'}")
    click.echo("-" * 100)
    for record in exports:
        click.echo(
            f"{record.id:<6} {format_export_date(record.created_at):<20} {record.blockchain:<18} "
            f"{record.transaction_count:>6}  {record.digest[:18] + '..':<20} {record.wallet_address}"
        )

    summary = service.summarize(blockchain=chain.lower() if chain else None, wallet_address=address)
    click.echo("-" * 100)
    click.echo(f"Total: {summary['exports']} export(s), {summary['transactions']} transaction(s)")


def register_commands(cli):
    """Register history command with main CLI."""
    cli.add_command(show_history)
