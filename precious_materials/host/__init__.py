"""Host module - modele hosta, interfejs magazynu i host w pamięci."""

from .models import HostItem, HostActor, SubEntityRecord, ItemChange
from .store import HostStore
from .memory import InMemoryHostStore, Transaction, HOST_MATERIALS

__all__ = [
    "HostItem",
    "HostActor",
    "SubEntityRecord",
    "ItemChange",
    "HostStore",
    "InMemoryHostStore",
    "Transaction",
    "HOST_MATERIALS",
]
