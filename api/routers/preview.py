"""
Preview router - podgląd reguł i akcji dla opisu itema.
"""

from fastapi import APIRouter
from pydantic import BaseModel
from typing import Dict, Any, Optional
from pathlib import Path

from precious_materials.core.config_loader import ConfigLoader
from precious_materials.engine import PreciousMaterialsEngine
from precious_materials.host.memory import InMemoryHostStore
from precious_materials.items.compatibility import ItemShapeHints


router = APIRouter()

DATA_PATH = Path(__file__).parent.parent.parent / "data"
_loader = ConfigLoader(str(DATA_PATH))
_engine = PreciousMaterialsEngine(InMemoryHostStore(_loader.get_module_id()), loader=_loader)


# ═══════════════════════════════════════════════════════════════════════════
# REQUEST MODELS
# ═══════════════════════════════════════════════════════════════════════════

class PreviewRequest(BaseModel):
    """Opis itema do podglądu."""
    item_type: str
    subtype: Optional[str] = None
    material: str
    grade: str
    parameters: Dict[str, str] = {}
    base_item: Optional[str] = None
    slug: Optional[str] = None
    group: Optional[str] = None


# ═══════════════════════════════════════════════════════════════════════════
# ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════

@router.post("/preview")
async def preview(request: PreviewRequest) -> Dict[str, Any]:
    """
    Zwraca skompilowane reguły, akcje i ostrzeżenia dla itema.

    Parametry dynamiczne bez wartości dostają wartość domyślną.
    Ostrzeżenia wracają w odpowiedzi, log silnika jest czyszczony.
    """
    try:
        plan = _engine.preview(
            item_type=request.item_type,
            subtype=request.subtype,
            material=request.material,
            grade=request.grade,
            parameters=request.parameters,
            hints=ItemShapeHints(
                base_item=request.base_item,
                slug=request.slug,
                group=request.group,
            ),
        )
    finally:
        _engine.logger.clear()
    return plan.to_dict()
