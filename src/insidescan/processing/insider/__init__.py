"""Insider wallet detection.

This module contains:
- Provenance detection (first seed funding of a fresh wallet)
- Trade pattern analysis (quick round-trips, delayed profitable trades)
- The insider classifier and its verdict/reason rendering
- Discovery of candidate wallets from seed transfers
- Chunked batch classification and the deadline-bounded scan orchestrator
"""

from insidescan.processing.insider.analyzer import WalletAnalyzer
from insidescan.processing.insider.batch import BatchOutcome, BatchScheduler
from insidescan.processing.insider.classifier import InsiderClassifier
from insidescan.processing.insider.discovery import DiscoveryEngine, DiscoveryOutcome
from insidescan.processing.insider.models import (
    ClassificationResult,
    DiscoveryCandidate,
    FundingEvidence,
    ScanRequest,
    ScanResult,
    ScanState,
    TradeMetrics,
)
from insidescan.processing.insider.orchestrator import ScanOrchestrator, run_scan
from insidescan.processing.insider.patterns import TradePatternAnalyzer
from insidescan.processing.insider.provenance import ProvenanceDetector
from insidescan.processing.insider.window import TransactionWindow, fetch_window

__all__ = [
    "BatchOutcome",
    "BatchScheduler",
    "ClassificationResult",
    "DiscoveryCandidate",
    "DiscoveryEngine",
    "DiscoveryOutcome",
    "FundingEvidence",
    "InsiderClassifier",
    "ProvenanceDetector",
    "ScanOrchestrator",
    "ScanRequest",
    "ScanResult",
    "ScanState",
    "TradeMetrics",
    "TradePatternAnalyzer",
    "TransactionWindow",
    "WalletAnalyzer",
    "fetch_window",
    "run_scan",
]
