from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from shared.core.auth import allow_editor, allow_manager, validate_current_token
from shared.core.database import get_db
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.warehouse import locations_crud as crud
from ...schemas.warehouse.locations_schemas import (
    AisleCreate, AisleOut, AisleUpdate, BulkLocationRequest, BulkLocationResult, LocationOverview,
    ShelfCreate, ShelfOut, ShelfUpdate, SlotCreate, SlotOut, SlotSearchResult, SlotUpdate)
from ...schemas.warehouse.warehouses_schemas import ZoneStats

router = APIRouter(
    prefix="/api/locations",
    tags=["locations"],
    dependencies=[Depends(validate_current_token)]
)


# ---------------- Overview / search ----------------

@router.get("/overview", response_model=LocationOverview)
def location_overview(db: Session = Depends(get_db)):
    return crud.get_location_overview(db)


@router.get("/search", response_model=List[SlotSearchResult])
def search_slots(
        code: str = Query(..., min_length=1),
        limit: int = Query(50, ge=1, le=500),
        db: Session = Depends(get_db)):
    return crud.search_slots(db, code, limit)


@router.get("/zones", response_model=List[ZoneStats])
def zone_summary(warehouse_id: Optional[UUID] = None, db: Session = Depends(get_db)):
    return crud.get_zone_summary(db, warehouse_id)


@router.post("/bulk-create", response_model=BulkLocationResult, dependencies=[Depends(allow_manager)])
def bulk_create(req: BulkLocationRequest, db: Session = Depends(get_db)):
    try:
        return crud.bulk_create_locations(db, req)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ---------------- Aisles ----------------

@router.get("/aisles", response_model=List[AisleOut])
def get_aisles(warehouse_id: Optional[UUID] = None, db: Session = Depends(get_db)):
    return crud.get_aisles(db, warehouse_id)


@router.post("/aisles", dependencies=[Depends(allow_manager)])
def create_aisle(aisle: AisleCreate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.create_aisle(db, aisle),
        message="Aisle created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/aisles", dependencies=[Depends(allow_manager)])
def update_aisle(aisle: AisleUpdate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.update_aisle(db, aisle),
        message="Aisle updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/aisles/{aisle_id}", dependencies=[Depends(allow_manager)])
def delete_aisle(aisle_id: UUID, db: Session = Depends(get_db)):
    return crud.delete_aisle(db, aisle_id)


# ---------------- Shelves ----------------

@router.get("/shelves", response_model=List[ShelfOut])
def get_shelves(aisle_id: Optional[UUID] = None, db: Session = Depends(get_db)):
    return crud.get_shelves(db, aisle_id)


@router.post("/shelves", dependencies=[Depends(allow_manager)])
def create_shelf(shelf: ShelfCreate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.create_shelf(db, shelf),
        message="Shelf created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/shelves", dependencies=[Depends(allow_manager)])
def update_shelf(shelf: ShelfUpdate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.update_shelf(db, shelf),
        message="Shelf updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/shelves/{shelf_id}", dependencies=[Depends(allow_manager)])
def delete_shelf(shelf_id: UUID, db: Session = Depends(get_db)):
    return crud.delete_shelf(db, shelf_id)


# ---------------- Slots ----------------

@router.get("/slots", response_model=List[SlotOut])
def get_slots(
        shelf_id: Optional[UUID] = None,
        available_only: bool = False,
        db: Session = Depends(get_db)):
    return crud.get_slots(db, shelf_id, available_only)


@router.get("/slots/{slot_id}", response_model=SlotOut)
def get_slot(slot_id: UUID, db: Session = Depends(get_db)):
    return SlotOut.model_validate(crud.get_slot_by_id(db, slot_id))


@router.post("/slots", dependencies=[Depends(allow_manager)])
def create_slot(slot: SlotCreate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.create_slot(db, slot),
        message="Storage slot created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/slots", dependencies=[Depends(allow_editor)])
def update_slot(slot: SlotUpdate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.update_slot(db, slot),
        message="Storage slot updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/slots/{slot_id}", dependencies=[Depends(allow_manager)])
def delete_slot(slot_id: UUID, db: Session = Depends(get_db)):
    return crud.delete_slot(db, slot_id)
