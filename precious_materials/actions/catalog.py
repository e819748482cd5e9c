"""
ActionCatalog - katalog definicji akcji (sub-entities).

Każda definicja to szablon akcji tworzonej na aktorze, gdy item
o danym materiale/poziomie/kategorii daje tę akcję:

    soul-counter:
        name: Soul Counter
        action_type: reaction
        description: "<p>...</p>"

to_payload() zwraca dane w kształcie hosta (bez flag - flagi
powiązania dopisuje synchronizator przy tworzeniu).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Optional, Any, Tuple, Mapping, TYPE_CHECKING

if TYPE_CHECKING:
    from ..core.config_loader import ConfigLoader
    from ..events.event_logger import EventLogger


@dataclass(frozen=True)
class SubEntityDefinition:
    """
    Definicja akcji z katalogu.

    Attributes:
        key: Klucz akcji (np. "improved-soul-counter")
        name: Nazwa wyświetlana
        item_type: Typ dokumentu hosta (zwykle "action")
        img: Ikona
        description: Opis HTML
        action_type: action / reaction / free
        actions: Koszt w akcjach (None dla reakcji)
        traits: Cechy akcji
        source: Źródło (publikacja / moduł)
    """

    key: str
    name: str
    item_type: str = "action"
    img: str = ""
    description: str = ""
    action_type: str = "action"
    actions: Optional[int] = None
    traits: Tuple[str, ...] = ()
    source: str = ""

    @classmethod
    def from_dict(cls, key: str, data: Dict[str, Any]) -> "SubEntityDefinition":
        """Tworzy definicję z wyniku ConfigLoader.load_action()."""
        return cls(
            key=key,
            name=data.get("name", key),
            item_type=data.get("type", "action"),
            img=data.get("img", ""),
            description=(data.get("description") or "").strip(),
            action_type=data.get("action_type", "action"),
            actions=data.get("actions"),
            traits=tuple(data.get("traits", []) or []),
            source=data.get("source", ""),
        )

    def to_payload(self) -> Dict[str, Any]:
        """Zwraca świeży słownik danych akcji w formacie hosta."""
        return {
            "name": self.name,
            "type": self.item_type,
            "img": self.img,
            "system": {
                "description": {"value": self.description},
                "actionType": {"value": self.action_type},
                "actions": {"value": self.actions},
                "traits": {"value": list(self.traits)},
                "source": {"value": self.source},
            },
        }


class ActionCatalog:
    """
    Niezmienny katalog actionKey -> SubEntityDefinition.

    Nieznane klucze są logowane jako UNKNOWN_ACTION i pomijane.
    """

    def __init__(
        self,
        definitions: Dict[str, SubEntityDefinition],
        logger: Optional["EventLogger"] = None,
    ):
        self._definitions: Mapping[str, SubEntityDefinition] = MappingProxyType(dict(definitions))
        self.logger = logger

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Dict],
        logger: Optional["EventLogger"] = None,
    ) -> "ActionCatalog":
        return cls(
            {key: SubEntityDefinition.from_dict(key, entry) for key, entry in data.items()},
            logger=logger,
        )

    @classmethod
    def from_loader(
        cls,
        loader: "ConfigLoader",
        logger: Optional["EventLogger"] = None,
    ) -> "ActionCatalog":
        return cls.from_dict(loader.load_all_actions(), logger=logger)

    def resolve(self, key: str, item_id: Optional[str] = None) -> Optional[SubEntityDefinition]:
        """Zwraca definicję lub None (z ostrzeżeniem) dla nieznanego klucza."""
        definition = self._definitions.get(key)
        if definition is None and self.logger:
            self.logger.log_unknown_action(key, item_id)
        return definition

    def resolve_all(
        self,
        keys: Tuple[str, ...],
        item_id: Optional[str] = None,
    ) -> List[SubEntityDefinition]:
        """Rozwiązuje klucze w kolejności, pomijając nieznane."""
        result = []
        for key in keys:
            definition = self.resolve(key, item_id)
            if definition is not None:
                result.append(definition)
        return result

    def get(self, key: str) -> Optional[SubEntityDefinition]:
        """Jak resolve(), ale bez logowania."""
        return self._definitions.get(key)

    def keys(self) -> List[str]:
        return list(self._definitions.keys())

    def __contains__(self, key: object) -> bool:
        return key in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)
