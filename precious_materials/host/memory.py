"""
InMemoryHostStore - referencyjny host w pamięci.

Symuluje hosta z wieloma podłączonymi sesjami (klientami). Każda sesja
ma własnego listenera (zwykle PreciousMaterialsEngine). Powiadomienia:

    update_item():
        1. pre_commit      -> tylko sesja-autor (może zmienić change.rules)
        2. zapis zmiany
        3. post_commit     -> wszystkie sesje, is_originator tylko dla autora

    create_item()          -> on_created dla wszystkich sesji
    delete_item()          -> on_removed dla wszystkich sesji
    remove_from_actor()    -> on_removed dla wszystkich sesji

Listener musi mieć metody pre_commit / post_commit / on_created /
on_removed / resolve_prompt o sygnaturach jak LifecycleSynchronizer.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Tuple
import copy
import uuid

from .models import HostItem, HostActor, SubEntityRecord, ItemChange
from .store import HostStore


# Materiały znane hostowi (dropdown na karcie itema)
HOST_MATERIALS: Dict[str, str] = {
    "adamantine": "Adamantine",
    "cold-iron": "Cold Iron",
    "dawnsilver": "Dawnsilver",
    "djezet": "Djezet",
    "dragonhide": "Dragonhide",
    "duskwood": "Duskwood",
    "orichalcum": "Orichalcum",
    "silver": "Silver",
    "sovereign-steel": "Sovereign Steel",
}


def _new_id() -> str:
    return uuid.uuid4().hex[:16]


@dataclass
class Transaction:
    """Wynik update_item(): raport pre-commit i raporty post-commit per sesja."""

    item_id: str
    change: ItemChange
    pre_commit: Any = None
    post_commit: Dict[str, Any] = field(default_factory=dict)

    def originator_report(self, session_id: str) -> Any:
        return self.post_commit.get(session_id)


class InMemoryHostStore(HostStore):
    """
    Host w pamięci z wieloma sesjami.

    Attributes:
        items: item_id -> HostItem
        actors: actor_id -> HostActor
        material_labels: Dropdown materiałów hosta (slug -> etykieta)
        operations: Log zapisów akcji (operacja, actor_id, ids)
        prompt_queue: Prośby o parametry zebrane z post-commit / created
    """

    def __init__(self, module_id: str = "precious-materials-rework"):
        self.module_id = module_id
        self.items: Dict[str, HostItem] = {}
        self.actors: Dict[str, HostActor] = {}
        self.sub_entities: Dict[str, Dict[str, SubEntityRecord]] = {}
        self.material_labels: Dict[str, str] = dict(HOST_MATERIALS)
        self.sessions: Dict[str, Any] = {}
        self.operations: List[Tuple[str, str, List[str]]] = []
        self.prompt_queue: List[Any] = []

    # ─────────────────────────────────────────────────────────────────────────
    # SESJE I DANE
    # ─────────────────────────────────────────────────────────────────────────

    def connect(self, session_id: str, listener: Any) -> None:
        """Podłącza sesję z listenerem hooków."""
        self.sessions[session_id] = listener

    def disconnect(self, session_id: str) -> None:
        self.sessions.pop(session_id, None)

    def create_actor(self, name: str, actor_id: Optional[str] = None) -> HostActor:
        actor = HostActor(id=actor_id or _new_id(), name=name)
        self.actors[actor.id] = actor
        self.sub_entities.setdefault(actor.id, {})
        return actor

    # ─────────────────────────────────────────────────────────────────────────
    # HostStore
    # ─────────────────────────────────────────────────────────────────────────

    def get_item(self, item_id: str) -> Optional[HostItem]:
        return self.items.get(item_id)

    def get_actor(self, actor_id: str) -> Optional[HostActor]:
        return self.actors.get(actor_id)

    def get_sub_entities(self, actor_id: str) -> List[SubEntityRecord]:
        return list(self.sub_entities.get(actor_id, {}).values())

    async def create_sub_entities(
        self,
        actor_id: str,
        payloads: List[Dict[str, Any]],
    ) -> List[SubEntityRecord]:
        if actor_id not in self.actors:
            raise KeyError(f"Actor '{actor_id}' not found")

        created = []
        for payload in payloads:
            data = copy.deepcopy(payload)
            flags = data.pop("flags", {})
            record = SubEntityRecord(id=_new_id(), actor_id=actor_id, data=data, flags=flags)
            self.sub_entities[actor_id][record.id] = record
            created.append(record)

        self.operations.append(("create", actor_id, [r.id for r in created]))
        return created

    async def delete_sub_entities(self, actor_id: str, ids: List[str]) -> List[str]:
        if actor_id not in self.actors:
            raise KeyError(f"Actor '{actor_id}' not found")

        owned = self.sub_entities[actor_id]
        deleted = [i for i in ids if owned.pop(i, None) is not None]
        self.operations.append(("delete", actor_id, deleted))
        return deleted

    # ─────────────────────────────────────────────────────────────────────────
    # OPERACJE NA ITEMACH (z powiadomieniami)
    # ─────────────────────────────────────────────────────────────────────────

    async def create_item(self, item: HostItem, session_id: str) -> Dict[str, Any]:
        """Dodaje item i powiadamia sesje (hook D)."""
        if not item.id:
            item.id = _new_id()
        self.items[item.id] = item

        reports = {}
        for sid, listener in list(self.sessions.items()):
            report = await listener.on_created(item.snapshot(), is_originator=(sid == session_id))
            reports[sid] = report
            if sid == session_id:
                self.prompt_queue.extend(report.prompts)
        return reports

    async def update_item(
        self,
        item_id: str,
        change: ItemChange,
        session_id: str,
    ) -> Transaction:
        """
        Zapisuje zmianę itema (hooki A i B).

        Raises:
            KeyError: Jeśli item lub sesja nie istnieje
        """
        item = self.items[item_id]
        originator = self.sessions[session_id]

        transaction = Transaction(item_id=item_id, change=change)
        transaction.pre_commit = originator.pre_commit(item.snapshot(), change)

        change.apply_to(item, self.module_id)

        for sid, listener in list(self.sessions.items()):
            report = await listener.post_commit(
                item.snapshot(), change, is_originator=(sid == session_id)
            )
            transaction.post_commit[sid] = report
            if sid == session_id:
                self.prompt_queue.extend(report.prompts)
        return transaction

    async def delete_item(self, item_id: str, session_id: str) -> Dict[str, Any]:
        """Usuwa item i powiadamia sesje (hook C)."""
        item = self.items.pop(item_id)
        return await self._notify_removed(item, item.actor_id, session_id)

    async def remove_from_actor(self, item_id: str, session_id: str) -> Dict[str, Any]:
        """Zabiera item aktorowi (item zostaje w magazynie) - hook C."""
        item = self.items[item_id]
        actor_id = item.actor_id
        item.actor_id = None
        return await self._notify_removed(item, actor_id, session_id)

    async def answer_prompt(
        self,
        request: Any,
        choice: Optional[str],
        session_id: str,
    ) -> Transaction:
        """Odpowiedź na prompt - wraca przez zwykłe update_item()."""
        if request in self.prompt_queue:
            self.prompt_queue.remove(request)
        change = self.sessions[session_id].resolve_prompt(request, choice)
        return await self.update_item(request.item_id, change, session_id)

    async def _notify_removed(
        self,
        item: HostItem,
        actor_id: Optional[str],
        session_id: str,
    ) -> Dict[str, Any]:
        reports = {}
        for sid, listener in list(self.sessions.items()):
            reports[sid] = await listener.on_removed(
                item.snapshot(), actor_id, is_originator=(sid == session_id)
            )
        return reports
