"""
Actions router - definicje akcji tworzonych na aktorze.
"""

from fastapi import APIRouter
from typing import List, Dict, Any
from pathlib import Path

from precious_materials.core.config_loader import ConfigLoader


router = APIRouter()

DATA_PATH = Path(__file__).parent.parent.parent / "data"
_loader = ConfigLoader(str(DATA_PATH))


@router.get("/actions")
async def get_actions() -> List[Dict[str, Any]]:
    """
    Zwraca listę akcji (bez opisów).
    """
    result = [
        {
            "id": key,
            "name": data.get("name", key),
            "action_type": data.get("action_type"),
            "actions": data.get("actions"),
            "traits": data.get("traits", []),
        }
        for key, data in _loader.load_all_actions().items()
    ]
    result.sort(key=lambda x: x["name"])
    return result


@router.get("/actions/{key}")
async def get_action(key: str) -> Dict[str, Any]:
    """
    Zwraca pełną definicję akcji.
    """
    try:
        return _loader.load_action(key)
    except KeyError:
        return {"error": f"Action '{key}' not found"}
