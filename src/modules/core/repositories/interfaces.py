"""Read and delete contract shared by aggregate repositories.

Services are written against these abstract classes; the Django ORM only
appears in the concrete implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, List, Mapping, Optional, Tuple, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the domain entity managed by the
    repository.  Every read excludes soft-deleted entities.
    """

    @abstractmethod
    def find_by_id(self, id: str) -> Optional[T]:
        """Retrieve a live entity by its public identifier."""

    @abstractmethod
    def find_page(
        self,
        filters: Mapping[str, Any],
        sort_by: str,
        descending: bool,
        page: int,
        page_size: int,
    ) -> Tuple[List[T], int]:
        """Return one page of live entities and the total match count."""

    @abstractmethod
    def soft_delete(self, id: str) -> bool:
        """Mark an entity deleted; ``False`` if it does not exist."""

    @abstractmethod
    def hard_delete(self, id: str) -> bool:
        """Remove an entity physically; ``False`` if it does not exist."""
