"""Participant directory: listing, organization grouping, profile edits."""

from caseroom.directory.schemas import OTHERS_GROUP, OrganizationGroup, ProfileUpdate
from caseroom.directory.service import DirectoryService, group_by_organization

__all__ = [
    "OTHERS_GROUP",
    "DirectoryService",
    "OrganizationGroup",
    "ProfileUpdate",
    "group_by_organization",
]
