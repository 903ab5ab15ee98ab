"""Batch normalization domain service."""

from typing import Any, Iterable, Mapping, Optional

from chaintrack.adapters import normalize_address, parse_record, validate_address
from chaintrack.domain.builder import build_transactions
from chaintrack.domain.chains import get_chain
from chaintrack.domain.direction import OutpointLookup, UtxoChangePolicy
from chaintrack.domain.entities import Transaction
from chaintrack.domain.errors import DomainError, ValidationError, invalid_address
from chaintrack.logging_setup import get_logger

logger = get_logger(__name__)


class NormalizationService:
    """Service for turning raw explorer records into canonical transactions."""

    def normalize(
        self,
        raw_records: Iterable[Mapping[str, Any]],
        chain_key: str,
        user_address: str,
        *,
        outpoint_lookup: Optional[OutpointLookup] = None,
        change_policy: UtxoChangePolicy = UtxoChangePolicy.COLLAPSE_TO_SEND,
    ) -> dict[str, Any]:
        """Normalize a batch of raw records for one chain and address.

        Each record is parsed and built independently. A record that fails
        with a DomainError (no hash, not an object) is skipped and reported;
        the rest of the batch continues.

        Args:
            raw_records: Decoded explorer items, oldest or newest first
            chain_key: Key of a supported chain (see ``chaintrack chains``)
            user_address: Address whose history is being normalized
            outpoint_lookup: Resolves spent UTXO outputs for fee computation
            change_policy: How UTXO change is reported

        Returns:
            Dict with normalization results:
            - transactions: list of Transaction entities, in input order
            - skipped: number of records skipped
            - errors: list of error messages

        Raises:
            NotFoundError: If the chain is not supported
            ValidationError: If the address does not match the chain's format
        """
        chain = get_chain(chain_key)
        if not validate_address(chain, user_address):
            raise ValidationError(invalid_address(chain.key, user_address))
        address = normalize_address(chain, user_address)

        transactions: list[Transaction] = []
        skipped = 0
        errors = []

        for index, raw in enumerate(raw_records):
            try:
                record = parse_record(chain, raw)
                transactions.extend(
                    build_transactions(
                        record,
                        address,
                        chain,
                        index=index,
                        outpoint_lookup=outpoint_lookup,
                        change_policy=change_policy,
                    )
                )
            except DomainError as e:
                logger.warning("Skipping %s record %d: %s", chain.key, index + 1, e)
                errors.append(f"Record {index + 1}: {e}")
                skipped += 1

        logger.info(
            "Normalized %d %s transactions for %s (%d skipped)",
            len(transactions),
            chain.key,
            address,
            skipped,
        )
        return {
            "transactions": transactions,
            "skipped": skipped,
            "errors": errors,
        }
