"""
HostStore - interfejs hosta, którego potrzebuje silnik.

Odczyty są synchroniczne, zapisy akcji na aktorze - asynchroniczne
(host może je wykonywać z opóźnieniem). Błędy zapisu propagują się
do wywołującego.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Any

from .models import HostItem, HostActor, SubEntityRecord


class HostStore(ABC):
    """Abstrakcyjny magazyn hosta."""

    @abstractmethod
    def get_item(self, item_id: str) -> Optional[HostItem]:
        ...

    @abstractmethod
    def get_actor(self, actor_id: str) -> Optional[HostActor]:
        ...

    @abstractmethod
    def get_sub_entities(self, actor_id: str) -> List[SubEntityRecord]:
        """Zwraca wszystkie akcje aktora (również nienależące do modułu)."""

    @abstractmethod
    async def create_sub_entities(
        self,
        actor_id: str,
        payloads: List[Dict[str, Any]],
    ) -> List[SubEntityRecord]:
        """Tworzy akcje na aktorze (jedna operacja wsadowa)."""

    @abstractmethod
    async def delete_sub_entities(self, actor_id: str, ids: List[str]) -> List[str]:
        """Usuwa akcje aktora, zwraca ID faktycznie usuniętych."""
