"""
Precious Materials - silnik efektów materiałów szlachetnych.

Moduły:
- core: ConfigLoader (dane YAML)
- events: EventLogger (strukturalny log zdarzeń)
- materials: tabela efektów, szablony reguł, kompilator
- actions: katalog akcji tworzonych na aktorze
- items: klasyfikacja itemów, ostrzeżenia kompatybilności
- host: modele i interfejs hosta, host w pamięci
- sync: synchronizator cyklu życia (hooki A-D)

Użycie:
    from precious_materials import PreciousMaterialsEngine, InMemoryHostStore

    store = InMemoryHostStore()
    engine = PreciousMaterialsEngine(store)
    engine.initialize(store.material_labels)
    store.connect("gm", engine)
"""

from .engine import PreciousMaterialsEngine
from .core.config_loader import ConfigLoader
from .events.event_logger import EventLogger, EventType
from .host.models import HostItem, HostActor, ItemChange, SubEntityRecord
from .host.memory import InMemoryHostStore
from .sync.synchronizer import PromptRequest, SyncReport

__version__ = "1.0.0"

__all__ = [
    "PreciousMaterialsEngine",
    "ConfigLoader",
    "EventLogger",
    "EventType",
    "HostItem",
    "HostActor",
    "ItemChange",
    "SubEntityRecord",
    "InMemoryHostStore",
    "PromptRequest",
    "SyncReport",
]
