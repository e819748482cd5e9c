"""
System logowania zdarzeń silnika materiałów.

Każda decyzja synchronizatora (wstrzyknięcie reguł, utworzenie akcji,
ostrzeżenie o niekompatybilności, prośba o wybór żywiołu etc.)
jest zapisywana jako zdarzenie z pełnym kontekstem. Ostrzeżenia nigdy
nie są rzucane jako wyjątki - trafiają do logu.

TYPY ZDARZEŃ:
═══════════════════════════════════════════════════════════════════

    ENGINE_INIT / ENGINE_SHUTDOWN
    ─────────────────────────────────────────────────────────────
    Start i koniec cyklu życia silnika.
    Data: materials (liczba materiałów)

    MATERIAL_REGISTERED / MATERIAL_UNREGISTERED
    ─────────────────────────────────────────────────────────────
    Rejestracja materiału własnego w dropdownie hosta.
    Data: slug, label

    RULES_INJECTED
    ─────────────────────────────────────────────────────────────
    Reguły modułu dopisane do itema.
    Data: material, grade, category, count

    RULES_CLEARED
    ─────────────────────────────────────────────────────────────
    Materiał usunięty - reguły modułu zdjęte.

    NO_EFFECTS
    ─────────────────────────────────────────────────────────────
    Kombinacja material/grade/category nie ma efektów.

    ACTIONS_CREATED / ACTIONS_REMOVED
    ─────────────────────────────────────────────────────────────
    Akcje utworzone / usunięte na aktorze.
    Data: ids, action_keys

    PROMPT_REQUESTED / PARAMETER_CHOSEN
    ─────────────────────────────────────────────────────────────
    Prośba o wybór parametru i wynik wyboru.

    WARNING (level = warning)
    ─────────────────────────────────────────────────────────────
    UNKNOWN_ACTION, UNRESOLVED_MARKER, INVALID_LABEL,
    COMPATIBILITY_WARNING, INVALID_PARAMETER, STORE_FAILURE

    SKIPPED_NOT_ORIGINATOR
    ─────────────────────────────────────────────────────────────
    Sesja nie jest autorem zmiany - brak efektów ubocznych.

FORMAT LOGU:
═══════════════════════════════════════════════════════════════════

{
    "metadata": {"version": "1.0", "module_id": "...", "timestamp": "..."},
    "events": [
        {"sequence": 0, "type": "RULES_INJECTED", "level": "info",
         "item_id": "item-1", "data": {...}},
        ...
    ]
}
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Deque, Dict, List, Optional
from collections import deque
from datetime import datetime
import json
from pathlib import Path


class EventType(Enum):
    """Typ zdarzenia silnika."""

    # Cykl życia
    ENGINE_INIT = auto()
    ENGINE_SHUTDOWN = auto()
    MATERIAL_REGISTERED = auto()
    MATERIAL_UNREGISTERED = auto()

    # Reguły
    RULES_INJECTED = auto()
    RULES_CLEARED = auto()
    NO_EFFECTS = auto()
    UNRESOLVED_MARKER = auto()
    INVALID_LABEL = auto()

    # Akcje
    ACTIONS_CREATED = auto()
    ACTIONS_REMOVED = auto()
    UNKNOWN_ACTION = auto()

    # Parametry dynamiczne
    PROMPT_REQUESTED = auto()
    PARAMETER_CHOSEN = auto()
    INVALID_PARAMETER = auto()

    # Pozostałe
    COMPATIBILITY_WARNING = auto()
    STORE_FAILURE = auto()
    SKIPPED_NOT_ORIGINATOR = auto()


WARNING_EVENTS = frozenset({
    EventType.UNRESOLVED_MARKER,
    EventType.INVALID_LABEL,
    EventType.UNKNOWN_ACTION,
    EventType.INVALID_PARAMETER,
    EventType.COMPATIBILITY_WARNING,
    EventType.STORE_FAILURE,
})


@dataclass
class SyncEvent:
    """
    Pojedyncze zdarzenie silnika.

    Attributes:
        sequence (int): Numer kolejny zdarzenia
        event_type (EventType): Typ zdarzenia
        item_id (Optional[str]): ID itema (jeśli dotyczy)
        actor_id (Optional[str]): ID aktora (jeśli dotyczy)
        data (Dict): Dodatkowe dane specyficzne dla typu zdarzenia
    """
    sequence: int
    event_type: EventType
    item_id: Optional[str] = None
    actor_id: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def level(self) -> str:
        return "warning" if self.event_type in WARNING_EVENTS else "info"

    def to_dict(self) -> Dict[str, Any]:
        """Serializuje zdarzenie do słownika."""
        result = {
            "sequence": self.sequence,
            "type": self.event_type.name,
            "level": self.level,
        }

        if self.item_id:
            result["item_id"] = self.item_id
        if self.actor_id:
            result["actor_id"] = self.actor_id
        if self.data:
            result["data"] = self.data

        return result


class EventLogger:
    """
    Logger zdarzeń silnika.

    Zbiera zdarzenia i może je zapisać do pliku JSON. Silnik żyje tak
    długo jak sesja hosta, więc log trzyma tylko ostatnie `max_events`
    zdarzeń (numeracja sequence jest ciągła).

    Attributes:
        events (Deque[SyncEvent]): Ostatnie zdarzenia
        max_events (Optional[int]): Limit zdarzeń (None = bez limitu)
        metadata (Dict): Metadane logu

    Example:
        >>> logger = EventLogger(module_id="precious-materials-rework")
        >>> logger.log_no_effects("item-1", "silver", "low", "weapon")
        >>> logger.get_event_count()
        1
    """

    def __init__(
        self,
        module_id: str = "precious-materials-rework",
        max_events: Optional[int] = 1000,
    ):
        self.max_events = max_events
        self.events: Deque[SyncEvent] = deque(maxlen=max_events)
        self._sequence = 0
        self.metadata: Dict[str, Any] = {
            "version": "1.0",
            "module_id": module_id,
            "timestamp": datetime.now().isoformat(),
        }

    # ─────────────────────────────────────────────────────────────────────────
    # LOGOWANIE OGÓLNE
    # ─────────────────────────────────────────────────────────────────────────

    def log(self, event: SyncEvent) -> None:
        """Dodaje zdarzenie do logu."""
        self.events.append(event)

    def log_event(
        self,
        event_type: EventType,
        item_id: Optional[str] = None,
        actor_id: Optional[str] = None,
        **data: Any,
    ) -> SyncEvent:
        """
        Tworzy i loguje zdarzenie.

        Args:
            event_type: Typ zdarzenia
            item_id: ID itema
            actor_id: ID aktora
            **data: Dodatkowe dane

        Returns:
            SyncEvent: Utworzone zdarzenie
        """
        event = SyncEvent(
            sequence=self._sequence,
            event_type=event_type,
            item_id=item_id,
            actor_id=actor_id,
            data=dict(data),
        )
        self._sequence += 1
        self.log(event)
        return event

    # ─────────────────────────────────────────────────────────────────────────
    # POMOCNICZE METODY LOGOWANIA
    # ─────────────────────────────────────────────────────────────────────────

    def log_engine_init(self, materials: int) -> None:
        self.log_event(EventType.ENGINE_INIT, materials=materials)

    def log_engine_shutdown(self) -> None:
        self.log_event(EventType.ENGINE_SHUTDOWN)

    def log_material_registered(self, slug: str, label: str) -> None:
        """Loguje rejestrację materiału własnego."""
        self.log_event(EventType.MATERIAL_REGISTERED, slug=slug, label=label)

    def log_material_unregistered(self, slug: str) -> None:
        self.log_event(EventType.MATERIAL_UNREGISTERED, slug=slug)

    def log_rules_injected(
        self,
        item_id: str,
        material: str,
        grade: str,
        category: str,
        count: int,
    ) -> None:
        """Loguje wstrzyknięcie reguł."""
        self.log_event(
            EventType.RULES_INJECTED,
            item_id=item_id,
            material=material,
            grade=grade,
            category=category,
            count=count,
        )

    def log_rules_cleared(self, item_id: str) -> None:
        """Loguje zdjęcie reguł po usunięciu materiału."""
        self.log_event(EventType.RULES_CLEARED, item_id=item_id)

    def log_no_effects(
        self,
        item_id: Optional[str],
        material: str,
        grade: str,
        category: str,
    ) -> None:
        """Loguje brak efektów dla kombinacji."""
        self.log_event(
            EventType.NO_EFFECTS,
            item_id=item_id,
            material=material,
            grade=grade,
            category=category,
        )

    def log_unresolved_marker(
        self,
        apply: str,
        parameter: str,
        item_id: Optional[str] = None,
    ) -> None:
        """Loguje marker, którego kompilator nie umie rozwiązać."""
        self.log_event(
            EventType.UNRESOLVED_MARKER,
            item_id=item_id,
            apply=apply,
            parameter=parameter,
        )

    def log_invalid_label(self, item_id: Optional[str], pattern: Any, error: str) -> None:
        """Loguje wzorzec etykiety, którego nie da się sformatować."""
        self.log_event(
            EventType.INVALID_LABEL,
            item_id=item_id,
            pattern=str(pattern),
            error=error,
        )

    def log_actions_created(
        self,
        item_id: str,
        actor_id: str,
        ids: List[str],
        action_keys: List[str],
    ) -> None:
        """Loguje utworzenie akcji na aktorze."""
        self.log_event(
            EventType.ACTIONS_CREATED,
            item_id=item_id,
            actor_id=actor_id,
            ids=ids,
            action_keys=action_keys,
        )

    def log_actions_removed(
        self,
        item_id: Optional[str],
        actor_id: str,
        ids: List[str],
    ) -> None:
        """Loguje usunięcie akcji z aktora."""
        self.log_event(
            EventType.ACTIONS_REMOVED,
            item_id=item_id,
            actor_id=actor_id,
            ids=ids,
        )

    def log_unknown_action(self, action_key: str, item_id: Optional[str] = None) -> None:
        """Loguje nieznany klucz akcji."""
        self.log_event(EventType.UNKNOWN_ACTION, item_id=item_id, action_key=action_key)

    def log_prompt_requested(self, item_id: str, parameter: str) -> None:
        self.log_event(EventType.PROMPT_REQUESTED, item_id=item_id, parameter=parameter)

    def log_parameter_chosen(self, item_id: str, parameter: str, value: str) -> None:
        self.log_event(
            EventType.PARAMETER_CHOSEN,
            item_id=item_id,
            parameter=parameter,
            value=value,
        )

    def log_invalid_parameter(
        self,
        item_id: Optional[str],
        parameter: str,
        value: Any,
    ) -> None:
        """Loguje wartość parametru spoza listy wyborów."""
        self.log_event(
            EventType.INVALID_PARAMETER,
            item_id=item_id,
            parameter=parameter,
            value=value,
        )

    def log_compatibility_warning(
        self,
        item_id: Optional[str],
        code: str,
        message: str,
    ) -> None:
        """Loguje ostrzeżenie o niekompatybilności materiału."""
        self.log_event(
            EventType.COMPATIBILITY_WARNING,
            item_id=item_id,
            code=code,
            message=message,
        )

    def log_store_failure(
        self,
        operation: str,
        actor_id: str,
        error: str,
        item_id: Optional[str] = None,
    ) -> None:
        """Loguje błąd operacji hosta (wyjątek propagowany dalej)."""
        self.log_event(
            EventType.STORE_FAILURE,
            item_id=item_id,
            actor_id=actor_id,
            operation=operation,
            error=error,
        )

    def log_skipped(self, item_id: str, hook: str) -> None:
        """Loguje pominięcie hooka przez sesję, która nie jest autorem zmiany."""
        self.log_event(EventType.SKIPPED_NOT_ORIGINATOR, item_id=item_id, hook=hook)

    # ─────────────────────────────────────────────────────────────────────────
    # SERIALIZACJA
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        """Serializuje cały log do słownika."""
        return {
            "metadata": self.metadata,
            "events": [e.to_dict() for e in self.events],
        }

    def save(self, filepath: str) -> None:
        """
        Zapisuje log do pliku JSON.

        Args:
            filepath: Ścieżka do pliku
        """
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Zwraca log jako string JSON."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    # ─────────────────────────────────────────────────────────────────────────
    # FILTRY
    # ─────────────────────────────────────────────────────────────────────────

    def get_event_count(self) -> int:
        """Zwraca liczbę zdarzeń."""
        return len(self.events)

    def get_events_by_type(self, event_type: EventType) -> List[SyncEvent]:
        """Filtruje zdarzenia po typie."""
        return [e for e in self.events if e.event_type == event_type]

    def get_events_for_item(self, item_id: str) -> List[SyncEvent]:
        """Filtruje zdarzenia dla itema."""
        return [e for e in self.events if e.item_id == item_id]

    def get_warnings(self) -> List[SyncEvent]:
        """Zwraca wszystkie ostrzeżenia."""
        return [e for e in self.events if e.level == "warning"]

    def clear(self) -> None:
        self.events.clear()
