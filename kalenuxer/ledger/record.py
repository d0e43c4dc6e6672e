"""Per-file ledger record."""
from dataclasses import dataclass


@dataclass
class FileRecord:
    """Processing and upload fingerprints for one file key.

    Attributes:
        processed_at: Fingerprint at the last successful processing
        uploaded_at: Fingerprint at the last successful upload
    """
    processed_at: str | None = None
    uploaded_at: str | None = None

    def to_dict(self) -> dict:
        """JSON form; absent fingerprints are omitted."""
        data = {}
        if self.processed_at is not None:
            data["processed_at"] = self.processed_at
        if self.uploaded_at is not None:
            data["uploaded_at"] = self.uploaded_at
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "FileRecord":
        """Restore record from its JSON form. Unknown fields are dropped."""
        return cls(
            processed_at=data.get("processed_at"),
            uploaded_at=data.get("uploaded_at"),
        )
