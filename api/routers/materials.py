"""
Materials router - lista materiałów i ich tabele efektów.
"""

from fastapi import APIRouter
from typing import List, Dict, Any
from pathlib import Path

from precious_materials.core.config_loader import ConfigLoader


router = APIRouter()

DATA_PATH = Path(__file__).parent.parent.parent / "data"
_loader = ConfigLoader(str(DATA_PATH))


@router.get("/materials")
async def get_materials() -> List[Dict[str, Any]]:
    """
    Zwraca listę materiałów z dostępnymi poziomami i kategoriami.
    """
    custom = _loader.get_custom_materials()

    result = []
    for slug, data in _loader.load_all_materials().items():
        result.append({
            "id": slug,
            "name": data.get("name", slug),
            "custom": slug in custom,
            "grades": {
                grade: sorted(categories.keys())
                for grade, categories in data.get("grades", {}).items()
            },
        })

    result.sort(key=lambda x: x["name"])
    return result


@router.get("/materials/{slug}")
async def get_material(slug: str) -> Dict[str, Any]:
    """
    Zwraca pełną tabelę efektów materiału.
    """
    try:
        return _loader.load_material(slug)
    except KeyError:
        return {"error": f"Material '{slug}' not found"}
