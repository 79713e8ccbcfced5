"""Services layer - backup building, restore reconciliation and background work."""

from manga_backup.services.backup_builder import BackupBuilder
from manga_backup.services.backup_manager import BackupManager
from manga_backup.services.backup_workers import (
    BackupWorker,
    RestoreWorker,
    StoreFactory,
    WorkerSignals,
)
from manga_backup.services.reconcilers import (
    CategoryMapping,
    CategoryReconciler,
    ChapterReconciler,
    MangaReconciler,
    MembershipReconciler,
    SyncReconciler,
)
from manga_backup.services.restore_orchestrator import RestoreOrchestrator, RestoreState
from manga_backup.services.settings_manager import SettingsManager
from manga_backup.services.transaction import run_in_transaction, transaction

__all__ = [
	"BackupBuilder",
	"BackupManager",
	"RestoreOrchestrator",
	"RestoreState",
	"CategoryMapping",
	"CategoryReconciler",
	"MangaReconciler",
	"ChapterReconciler",
	"SyncReconciler",
	"MembershipReconciler",
	"SettingsManager",
	"transaction",
	"run_in_transaction",
	"BackupWorker",
	"RestoreWorker",
	"StoreFactory",
	"WorkerSignals",
]
