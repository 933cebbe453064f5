"""Base classes and interfaces for labeled quotation sources."""

from abc import ABC, abstractmethod
import pandas as pd

# Columns every source must return from get_labeled_quotations()
QUOTATION_COLUMNS = [
    'verse_id', 'doc_id', 'match',
    'tokens', 'tfidf', 'proportion', 'runs_pval', 'sim_total', 'sim_mean',
    'version',
]

FEATURE_COLUMNS = ['tokens', 'tfidf', 'proportion', 'runs_pval', 'sim_total', 'sim_mean']


class DataProvider(ABC):
    """Base class for all data providers."""

    @abstractmethod
    def health_check(self) -> bool:
        """Check if the provider is accessible."""
        pass


class QuotationSource(DataProvider):
    """Abstract interface for sources of hand-labeled potential quotations."""

    @abstractmethod
    def get_labeled_quotations(self) -> pd.DataFrame:
        """
        Get labeled potential quotations joined with their Bible version.

        Returns:
            DataFrame with columns: verse_id, doc_id, match, tokens, tfidf,
            proportion, runs_pval, sim_total, sim_mean, version
        """
        pass

    def health_check(self) -> bool:
        """Default health check - can be overridden."""
        try:
            _ = self.get_labeled_quotations()
            return True
        except Exception:
            return False
