"""Compose two repositories: try the primary, fall back on failure."""

import logging

from repositories.base import GroupRepository, RepositoryUnavailable


logger = logging.getLogger(__name__)


class FallbackGroupRepository(GroupRepository):
    def __init__(self, primary: GroupRepository, fallback: GroupRepository):
        self.primary = primary
        self.fallback = fallback

    def get_members(self, group_id):
        try:
            return self.primary.get_members(group_id)
        except RepositoryUnavailable as e:
            logger.warning(f"Primary repository unavailable, using fallback for members: {e}")
            return self.fallback.get_members(group_id)

    def get_expenses(self, group_id):
        try:
            return self.primary.get_expenses(group_id)
        except RepositoryUnavailable as e:
            logger.warning(f"Primary repository unavailable, using fallback for expenses: {e}")
            return self.fallback.get_expenses(group_id)

    def get_snapshot(self, group_id):
        # Never mix members from one source with expenses from the other
        try:
            return self.primary.get_snapshot(group_id)
        except RepositoryUnavailable as e:
            logger.warning(f"Primary repository unavailable, using fallback snapshot: {e}")
            return self.fallback.get_snapshot(group_id)
