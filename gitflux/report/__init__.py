"""gitflux report — terminal rendering of derivation results."""

from gitflux.report.dashboard import DerivationReport

__all__ = ["DerivationReport"]
