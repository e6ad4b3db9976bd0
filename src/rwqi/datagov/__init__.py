"""
data.gov.in Integration

Async datastore client and the tiered record retrieval chain used to find
water quality samples for a river.
"""

from .client import DataGovClient, extract_records
from .fetcher import (
    RecordFetcher,
    RetrievalStrategy,
    RiverDatasetStrategy,
    GlobalDatasetStrategy,
    CatalogSearchStrategy,
)

__all__ = [
    'DataGovClient',
    'extract_records',
    'RecordFetcher',
    'RetrievalStrategy',
    'RiverDatasetStrategy',
    'GlobalDatasetStrategy',
    'CatalogSearchStrategy',
]
