"""
Data management endpoints for API v1.

Export the complete lab data as a JSON document, import such a
document to replace everything, or load the illustrative seed
dataset into an empty store.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Response, status

from lab_manager_api.app.core.exceptions import ConflictError, InvalidRequestError
from lab_manager_api.app.core.store import EntityStore, get_store
from lab_manager_api.app.schemas.data import LabSnapshot
from lab_manager_api.app.services.data_service import DataService


router = APIRouter()


@router.get("/export", response_model=LabSnapshot)
async def export_data(response: Response, store: EntityStore = Depends(get_store)) -> LabSnapshot:
    """Download every collection, deleted records and audit logs included."""
    response.headers["Content-Disposition"] = "attachment; filename=lab-data.json"
    return await DataService.export_all(store)


@router.post("/import", response_model=Dict[str, Any])
async def import_data(snapshot: LabSnapshot, store: EntityStore = Depends(get_store)) -> Dict[str, Any]:
    """Replace all lab data with the uploaded document.

    Collections missing from the document end up empty.
    """
    try:
        counts = await DataService.import_all(store, snapshot)
    except InvalidRequestError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return {"message": "Data imported successfully", "counts": counts}


@router.post("/seed", response_model=Dict[str, Any])
async def load_seed_data(store: EntityStore = Depends(get_store)) -> Dict[str, Any]:
    """Load the illustrative dataset.  Only allowed while the lab has no members."""
    try:
        await DataService.load_seed_data(store)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    return {"message": "Seed data loaded successfully"}
