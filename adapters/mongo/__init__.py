from .client import MongoStoreClient
from .adapter import MongoStoreAdapter, bill_to_row

__all__ = ["MongoStoreClient", "MongoStoreAdapter", "bill_to_row"]
