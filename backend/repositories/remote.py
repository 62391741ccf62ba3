"""Repository that reads a group from a remote instance of this API."""

from typing import Optional
import requests

from repositories.base import GroupRepository, RepositoryUnavailable
from utils.engine import Expense, Member, SplitShare


class RemoteGroupRepository(GroupRepository):
    """
    Fetch members and expenses over HTTP.

    Any network failure, non-2xx response or unexpected payload is reported as
    RepositoryUnavailable so callers can fall back to another source.
    """

    def __init__(self, base_url: str, timeout: float = 5, token: Optional[str] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token = token

    def _get(self, path: str):
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        url = f"{self.base_url}{path}"
        try:
            response = requests.get(url, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            raise RepositoryUnavailable(f"GET {url} failed: {e}") from e

    def get_members(self, group_id) -> list[Member]:
        data = self._get(f"/groups/{group_id}")
        try:
            return [
                Member(id=m["user_id"], name=m.get("full_name"), email=m.get("email"))
                for m in data["members"]
            ]
        except (KeyError, TypeError) as e:
            raise RepositoryUnavailable(f"Unexpected group payload for group {group_id}") from e

    def get_expenses(self, group_id) -> list[Expense]:
        data = self._get(f"/groups/{group_id}/expenses")
        try:
            return [
                Expense(
                    id=e["id"],
                    description=e.get("description"),
                    amount=e["amount"],
                    payer_id=e["payer_id"],
                    split_type=e["split_type"],
                    participants=e.get("split_between") or [],
                    custom_splits=[
                        SplitShare(s["user_id"], s["amount"])
                        for s in e.get("custom_splits") or []
                    ],
                )
                for e in data
            ]
        except (KeyError, TypeError) as e:
            raise RepositoryUnavailable(f"Unexpected expenses payload for group {group_id}") from e
