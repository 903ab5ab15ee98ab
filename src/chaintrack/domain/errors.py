"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity or chain does not exist."""


class MissingIdentityError(DomainError):
    """Raw record has no transaction hash and cannot be identified."""


class OutpointLookupError(DomainError):
    """A UTXO input's originating output could not be fetched."""


def chain_not_found(chain_key: str, known: list[str]) -> str:
    """Return message for an unsupported chain key."""
    return f"Chain '{chain_key}' not found. Supported chains: {', '.join(known)}"


def missing_transaction_hash(chain_key: str) -> str:
    """Return message for a raw record without a hash."""
    return f"Raw {chain_key} record has no transaction hash"


def invalid_address(chain_key: str, address: str) -> str:
    """Return message for an address that does not match the chain's format."""
    return f"Invalid {chain_key} address format: {address}"


def export_not_found(export_id: int) -> str:
    """Return message for missing export history entry."""
    return f"Export {export_id} not found"
