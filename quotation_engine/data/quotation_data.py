"""Labeled quotation source implementations."""

import logging
import sqlite3
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import pandas as pd

from .base import QuotationSource, QUOTATION_COLUMNS
from ..config import get_config

logger = logging.getLogger(__name__)

DEFAULT_TABLES = {
    'labels': 'labeled_quotations',
    'features': 'potential_quotations',
    'scriptures': 'scriptures',
}

_TRUE_STRINGS = {'true', 't', 'yes', 'y', '1'}


def coerce_match(values: pd.Series) -> pd.Series:
    """Convert 0/1, TRUE/FALSE or boolean match columns to bool."""
    if values.dtype == bool:
        return values
    if pd.api.types.is_numeric_dtype(values):
        return values.fillna(0).astype(int) != 0
    return values.astype(str).str.strip().str.lower().isin(_TRUE_STRINGS)


class SQLQuotationSource(QuotationSource):
    """Labeled quotations stored in a relational database."""

    def __init__(
        self,
        connect: Callable[[], Any],
        tables: Optional[Dict[str, str]] = None
    ):
        """
        Initialize SQL source.

        Args:
            connect: Zero-argument callable returning a DB-API connection
            tables: Mapping of 'labels', 'features', 'scriptures' to table names
        """
        self._connect = connect
        self.tables = {**DEFAULT_TABLES, **(tables or {})}

    @classmethod
    def from_sqlite(cls, db_path: str, tables: Optional[Dict[str, str]] = None) -> 'SQLQuotationSource':
        """Create a source backed by a SQLite database file."""
        if not Path(db_path).exists():
            raise FileNotFoundError(f"SQLite database not found: {db_path}")
        return cls(lambda: sqlite3.connect(db_path), tables)

    @classmethod
    def from_dsn(cls, dsn: str, tables: Optional[Dict[str, str]] = None) -> 'SQLQuotationSource':
        """Create a source backed by an ODBC data source name."""
        import pyodbc

        return cls(lambda: pyodbc.connect(f"DSN={dsn}"), tables)

    def _query(self) -> str:
        labels = self.tables['labels']
        features = self.tables['features']
        scriptures = self.tables['scriptures']
        return f"""
            SELECT l.verse_id, l.doc_id, l.match,
                   f.tokens, f.tfidf, f.proportion, f.runs_pval,
                   f.sim_total, f.sim_mean,
                   s.version
            FROM {labels} AS l
            LEFT JOIN {features} AS f
                ON l.verse_id = f.verse_id AND l.doc_id = f.doc_id
            LEFT JOIN {scriptures} AS s
                ON l.verse_id = s.verse_id
        """

    def get_labeled_quotations(self) -> pd.DataFrame:
        """Join labels, features and verse versions."""
        conn = self._connect()
        try:
            df = pd.read_sql_query(self._query(), conn)
        finally:
            conn.close()

        df['match'] = coerce_match(df['match'])
        logger.info("Loaded %d labeled quotations from database", len(df))
        return df[QUOTATION_COLUMNS]


class CSVQuotationSource(QuotationSource):
    """Labeled quotations exported to a single CSV file."""

    def __init__(self, path: str):
        self.path = Path(path)

    def get_labeled_quotations(self) -> pd.DataFrame:
        if not self.path.exists():
            raise FileNotFoundError(f"Quotation CSV not found: {self.path}")

        df = pd.read_csv(self.path)
        missing = set(QUOTATION_COLUMNS) - set(df.columns)
        if missing:
            raise ValueError(f"Quotation CSV {self.path} is missing columns: {sorted(missing)}")

        df['match'] = coerce_match(df['match'])
        logger.info("Loaded %d labeled quotations from %s", len(df), self.path)
        return df[QUOTATION_COLUMNS]


def get_quotation_source() -> QuotationSource:
    """
    Factory function to get the configured quotation source.

    Returns:
        QuotationSource instance
    """
    config = get_config()
    provider_name = config.database_provider
    tables = config.get('database.tables', {})

    if provider_name == 'sqlite':
        return SQLQuotationSource.from_sqlite(
            config.get('database.sqlite_path', 'data/apb.db'),
            tables
        )
    elif provider_name == 'odbc':
        dsn = config.get('database.dsn')
        if not dsn or dsn.startswith('${'):
            raise ValueError("ODBC provider selected but database.dsn is not set")
        return SQLQuotationSource.from_dsn(dsn, tables)
    elif provider_name == 'csv':
        return CSVQuotationSource(config.get('database.csv_path', 'data/labeled-quotations.csv'))
    else:
        raise ValueError(f"Unknown quotation source provider: {provider_name}")
