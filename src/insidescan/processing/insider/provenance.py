"""Funding provenance: was this wallet first funded by a seed while empty?"""

from __future__ import annotations

from collections.abc import Sequence

from insidescan.config import Settings
from insidescan.ledger.models import TransactionRecord, lamports_to_sol
from insidescan.processing.insider.models import FundingEvidence


class ProvenanceDetector:
    """Finds the first qualifying seed funding event in a transaction window.

    A qualifying event is a transaction touching one of the seed addresses
    in which the subject's balance rose by an amount inside the funding band
    while its prior balance was below the fresh-wallet threshold. Only the
    earliest such event counts; a wallet is first funded once.
    """

    def __init__(self, settings: Settings) -> None:
        self._seeds = frozenset(settings.seed_addresses)
        self._settings = settings

    def detect(self, address: str, window: Sequence[TransactionRecord]) -> FundingEvidence:
        """Derive funding evidence from a newest-first window.

        Args:
            address: Subject wallet
            window: Transactions in retrieval order (newest first)

        Returns:
            FundingEvidence; ``source`` is None when nothing qualified
        """
        settings = self._settings
        observed: FundingEvidence | None = None

        # Chronological order: oldest first
        for tx in reversed(window):
            index = tx.index_of(address)
            if index is None:
                continue
            seed = self._funding_seed(address, tx)
            if seed is None:
                continue
            change = tx.balance_change(address)
            prior = tx.pre_balance(address)
            if change is None or prior is None or change <= 0:
                continue

            amount = lamports_to_sol(change)
            prior_sol = lamports_to_sol(prior)
            in_band = settings.min_funding_sol <= amount <= settings.max_funding_sol
            fresh = prior_sol < settings.fresh_wallet_max_balance_sol

            if in_band and fresh:
                return FundingEvidence(
                    source=seed,
                    source_label=settings.seed_label(seed),
                    amount=amount,
                    is_fresh_wallet=True,
                    signature=tx.signature,
                    funded_at=tx.block_time,
                )
            if observed is None:
                observed = FundingEvidence(
                    observed_source=seed,
                    observed_amount=amount,
                    observed_prior_balance=prior_sol,
                )

        return observed or FundingEvidence()

    def _funding_seed(self, address: str, tx: TransactionRecord) -> str | None:
        """Seed responsible for funds in ``tx``: an explicit transfer sender, else any seed touched."""
        for transfer in tx.transfers:
            if transfer.destination == address and transfer.source in self._seeds:
                return transfer.source
        for key in tx.account_keys:
            if key in self._seeds and key != address:
                return key
        return None
