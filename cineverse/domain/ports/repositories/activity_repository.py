from abc import ABC, abstractmethod
from typing import List

from cineverse.domain.models.activity import ActivityEvent


class ActivityRepository(ABC):
    @abstractmethod
    async def record_event(self, event: ActivityEvent) -> ActivityEvent:
        pass

    @abstractmethod
    async def query_recent(self, user_id: int, limit: int) -> List[ActivityEvent]:
        """Most recent events first."""
        pass
