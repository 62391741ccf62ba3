"""Interface for the data sources that feed the settlement engine."""

from abc import ABC, abstractmethod

from utils.engine import Expense, Member


class RepositoryUnavailable(Exception):
    """The data source could not be reached or returned unusable data."""


class GroupRepository(ABC):
    """Supplies a snapshot of a group's members and expenses."""

    @abstractmethod
    def get_members(self, group_id) -> list[Member]:
        ...

    @abstractmethod
    def get_expenses(self, group_id) -> list[Expense]:
        ...

    def get_snapshot(self, group_id) -> tuple[list[Member], list[Expense]]:
        """Members and expenses of a group, read from the same source."""
        return self.get_members(group_id), self.get_expenses(group_id)
