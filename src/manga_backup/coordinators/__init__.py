"""Coordinators - Orchestration layer between triggers and the backup services."""

from .backup_coordinator import BackupCoordinator, OperationKind

__all__ = [
    "BackupCoordinator",
    "OperationKind",
]
