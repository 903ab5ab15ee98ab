"""CLI error handling helpers."""

import click

from chaintrack.domain.errors import DomainError
from chaintrack.logging_setup import get_logger

logger = get_logger(__name__)


def fail(ctx: click.Context, message: str) -> None:
    """Print ``Error: <message>`` to stderr and exit with status 1."""
    click.echo(f"Error: {message}", err=True)
    ctx.exit(1)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    logger.debug("%s in %s", type(error).__name__, ctx.info_name, exc_info=error)
    fail(ctx, str(error))
