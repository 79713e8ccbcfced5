"""Reconcilers - one merge policy per entity kind."""

from .category_reconciler import CategoryMapping, CategoryReconciler
from .chapter_reconciler import ChapterReconciler
from .manga_reconciler import MangaReconciler
from .membership_reconciler import MembershipReconciler
from .natural_key_reconciler import MergeOutcome, NaturalKeyReconciler
from .sync_reconciler import SyncReconciler

__all__ = [
    "CategoryMapping",
    "CategoryReconciler",
    "MangaReconciler",
    "ChapterReconciler",
    "SyncReconciler",
    "MembershipReconciler",
    "NaturalKeyReconciler",
    "MergeOutcome",
]
