"""Injected stores for saved scholarships and user profiles."""

from scholarmatch.store.base import ProfileStore, SavedScholarshipStore
from scholarmatch.store.json_file import JsonFileSavedScholarshipStore
from scholarmatch.store.memory import InMemoryProfileStore, InMemorySavedScholarshipStore
from scholarmatch.store.profiles import merge_profile_patch, update_profile
from scholarmatch.store.tracker import SavedScholarshipTracker

__all__ = [
    "InMemoryProfileStore",
    "InMemorySavedScholarshipStore",
    "JsonFileSavedScholarshipStore",
    "ProfileStore",
    "SavedScholarshipStore",
    "SavedScholarshipTracker",
    "merge_profile_patch",
    "update_profile",
]
