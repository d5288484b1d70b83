"""
OTP Store
=========
In-memory record store keyed by (phone, purpose).
"""

from typing import Dict, Iterator, List, Optional, Tuple

from .models import OTPPurpose, OTPRecord

StoreKey = Tuple[str, OTPPurpose]


class OTPStore:
    """
    Process-local OTP record store.

    Holds at most one record per (phone, purpose). State is lost on restart
    and is not shared between processes.
    """

    def __init__(self):
        self._records: Dict[StoreKey, OTPRecord] = {}

    @staticmethod
    def key(phone: str, purpose: OTPPurpose) -> StoreKey:
        return (phone, OTPPurpose(purpose))

    def get(self, phone: str, purpose: OTPPurpose) -> Optional[OTPRecord]:
        return self._records.get(self.key(phone, purpose))

    def put(self, record: OTPRecord) -> None:
        """Store a record, replacing any record for the same key."""
        self._records[self.key(record.phone, record.purpose)] = record

    def delete(self, phone: str, purpose: OTPPurpose) -> bool:
        """Remove a record. Returns True if one existed."""
        return self._records.pop(self.key(phone, purpose), None) is not None

    def snapshot(self) -> List[Tuple[StoreKey, OTPRecord]]:
        """Copy of current entries, safe to iterate while mutating the store."""
        return list(self._records.items())

    def discard(self, key: StoreKey) -> None:
        self._records.pop(key, None)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[OTPRecord]:
        return iter(list(self._records.values()))
