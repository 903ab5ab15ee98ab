"""Supported chains command."""

import click

from chaintrack.domain.chains import list_chains


@click.command("chains")
def list_supported_chains():
    """List supported chain keys."""
    click.echo("\nSupported chains:")
    click.echo("-" * 70)
    for chain in list_chains():
        click.echo(
            f"{chain.key:<20} {chain.name:<22} {chain.native_symbol:<6} {chain.model.value}"
        )


def register_commands(cli):
    """Register chains command with main CLI."""
    cli.add_command(list_supported_chains)
