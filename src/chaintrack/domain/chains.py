"""Supported chains and their static settings."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from chaintrack.domain.entities import AccountingModel
from chaintrack.domain.errors import NotFoundError, chain_not_found
from chaintrack.domain.intent import (
    BASE_SELECTORS,
    CELO_SELECTORS,
    DEFI_SELECTORS,
    SUBSTRATE_EVM_SELECTORS,
    SelectorTable,
    build_selector_table,
)


@dataclass(frozen=True)
class ChainContext:
    """Static description of one chain/network."""

    key: str
    name: str
    model: AccountingModel
    native_symbol: str
    native_decimals: int
    explorer_tx_url: str
    selectors: SelectorTable = field(default_factory=lambda: BASE_SELECTORS)
    known_tokens: Mapping[str, str] = field(default_factory=dict)
    assume_success_without_receipt: bool = False
    base_asset_ids: frozenset[str] = frozenset()

    def link_for(self, tx_hash: str) -> str:
        """Explorer URL for a transaction hash."""
        return self.explorer_tx_url.format(hash=tx_hash)

    def known_token_symbol(self, contract_address: str | None) -> str | None:
        """Symbol of a well-known token contract on this chain, if any."""
        if not contract_address:
            return None
        return self.known_tokens.get(contract_address.lower())


_SUBSTRATE_EVM = build_selector_table(BASE_SELECTORS, DEFI_SELECTORS, SUBSTRATE_EVM_SELECTORS)
_CELO = build_selector_table(BASE_SELECTORS, CELO_SELECTORS)

# Asset ids of the native coin on Fuel networks (beta networks used all zeros)
_FUEL_BASE_ASSETS = frozenset(
    {
        "0xf8f8b6283d7fa5b672b530cbb84fcccb4ff8dc40f8176ef4544ddb1f1952ad07",
        "0x" + "0" * 64,
    }
)

_CELO_TOKENS = MappingProxyType(
    {
        "0x765de816845861e75d25f0df739d9e2430c2913e": "cUSD",
        "0xd8763cba276a3738e6df85e191d76a7714b68eb1": "cEUR",
    }
)

CHAINS: Mapping[str, ChainContext] = MappingProxyType(
    {
        chain.key: chain
        for chain in (
            ChainContext(
                key="creditcoin",
                name="Creditcoin",
                model=AccountingModel.ACCOUNT,
                native_symbol="CTC",
                native_decimals=18,
                explorer_tx_url="https://creditcoin.blockscout.com/tx/{hash}",
                selectors=_SUBSTRATE_EVM,
            ),
            ChainContext(
                key="creditcoin-testnet",
                name="Creditcoin Testnet",
                model=AccountingModel.ACCOUNT,
                native_symbol="CTC",
                native_decimals=18,
                explorer_tx_url="https://creditcoin-testnet.blockscout.com/tx/{hash}",
                selectors=_SUBSTRATE_EVM,
            ),
            ChainContext(
                key="humanity",
                name="Humanity Protocol",
                model=AccountingModel.ACCOUNT,
                native_symbol="HMT",
                native_decimals=18,
                explorer_tx_url="https://humanity-mainnet.explorer.alchemy.com/tx/{hash}",
                selectors=_SUBSTRATE_EVM,
            ),
            ChainContext(
                key="celo",
                name="Celo",
                model=AccountingModel.ACCOUNT,
                native_symbol="CELO",
                native_decimals=18,
                explorer_tx_url="https://explorer.celo.org/tx/{hash}",
                selectors=_CELO,
                known_tokens=_CELO_TOKENS,
                assume_success_without_receipt=True,
            ),
            ChainContext(
                key="celo-alfajores",
                name="Celo Alfajores",
                model=AccountingModel.ACCOUNT,
                native_symbol="CELO",
                native_decimals=18,
                explorer_tx_url="https://alfajores.explorer.celo.org/tx/{hash}",
                selectors=_CELO,
                known_tokens=_CELO_TOKENS,
                assume_success_without_receipt=True,
            ),
            ChainContext(
                key="kaspa",
                name="Kaspa",
                model=AccountingModel.UTXO,
                native_symbol="KAS",
                native_decimals=8,
                explorer_tx_url="https://explorer.kaspa.org/tx/{hash}",
            ),
            ChainContext(
                key="fuel",
                name="Fuel Network",
                model=AccountingModel.COIN,
                native_symbol="ETH",
                native_decimals=9,
                explorer_tx_url="https://app.fuel.network/transaction/{hash}",
                base_asset_ids=_FUEL_BASE_ASSETS,
            ),
            ChainContext(
                key="fuel-testnet",
                name="Fuel Testnet",
                model=AccountingModel.COIN,
                native_symbol="ETH",
                native_decimals=9,
                explorer_tx_url="https://app-testnet.fuel.network/transaction/{hash}",
                base_asset_ids=_FUEL_BASE_ASSETS,
            ),
        )
    }
)


def get_chain(chain_key: str) -> ChainContext:
    """Look up a chain by key (case-insensitive).

    Raises:
        NotFoundError: If the chain is not supported
    """
    chain = CHAINS.get(chain_key.strip().lower())
    if chain is None:
        raise NotFoundError(chain_not_found(chain_key, sorted(CHAINS)))
    return chain


def list_chains() -> list[ChainContext]:
    """Return all supported chains ordered by key."""
    return [CHAINS[key] for key in sorted(CHAINS)]
