from src.standings_archive.snapshot_store import SnapshotStore

__all__ = ["SnapshotStore"]
