from typing import List, Optional
from uuid import UUID
from sqlalchemy import String, case, cast, func, or_
from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode
from shared.utils.logger import get_logger

from ...enum.inventory_enum import DEFAULT_ZONE
from ...models.inventory.pallets import Pallet
from ...models.warehouse.aisles import Aisle
from ...models.warehouse.shelves import Shelf
from ...models.warehouse.storage_slots import StorageSlot
from ...models.warehouse.warehouses import Warehouse
from ...schemas.warehouse.locations_schemas import (
    MAX_BULK_SLOTS, AisleCreate, AisleOut, AisleUpdate, BulkLocationRequest,
    ShelfCreate, ShelfOut, ShelfUpdate, SlotCreate, SlotOut, SlotUpdate)
from .warehouses_crud import get_warehouse_by_id, occupancy_rate

logger = get_logger(__name__)


def slot_label(warehouse_code: str, aisle_code: str, shelf_code: str, position: int) -> str:
    return f"{warehouse_code}-{aisle_code}-{shelf_code}-{position:02d}"


def _not_found(entity: str):
    return error_response(
        message=f"{entity} not found",
        status_code=str(AppStatusCode.NOT_FOUND_ERROR),
        http_status=404
    )


def _duplicate(entity: str, code: str):
    return error_response(
        message=f"{entity} with code '{code}' already exists",
        status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR),
        http_status=400
    )


def _occupied_block(entity: str):
    return error_response(
        message=f"Cannot delete {entity} while it has occupied slots",
        status_code=str(AppStatusCode.DELETE_RESTRICTED),
        http_status=400
    )


# ----------------------------------------------------------------------
# AISLES
# ----------------------------------------------------------------------

def get_aisles(db: Session, warehouse_id: Optional[UUID] = None):
    query = db.query(Aisle)
    if warehouse_id:
        query = query.filter(Aisle.warehouse_id == warehouse_id)
    return [AisleOut.model_validate(a) for a in query.order_by(Aisle.code.asc()).all()]


def get_aisle_by_id(db: Session, aisle_id: UUID) -> Aisle:
    aisle = db.query(Aisle).filter(Aisle.id == aisle_id).first()
    if not aisle:
        return _not_found("Aisle")
    return aisle


def create_aisle(db: Session, aisle: AisleCreate):
    get_warehouse_by_id(db, aisle.warehouse_id)
    code = aisle.code.upper()
    if db.query(Aisle).filter(Aisle.warehouse_id == aisle.warehouse_id,
                              func.upper(Aisle.code) == code).first():
        return _duplicate("Aisle", code)

    db_aisle = Aisle(**aisle.model_dump())
    db_aisle.code = code
    db_aisle.name = aisle.name or f"Aisle {code}"
    db.add(db_aisle)
    db.commit()
    db.refresh(db_aisle)
    return AisleOut.model_validate(db_aisle)


def update_aisle(db: Session, aisle: AisleUpdate):
    db_aisle = get_aisle_by_id(db, aisle.id)
    update_data = aisle.model_dump(exclude_unset=True, exclude={"id"})

    if update_data.get("code"):
        code = update_data["code"].upper()
        if db.query(Aisle).filter(Aisle.warehouse_id == db_aisle.warehouse_id,
                                  func.upper(Aisle.code) == code,
                                  Aisle.id != db_aisle.id).first():
            return _duplicate("Aisle", code)
        update_data["code"] = code

    for key, value in update_data.items():
        setattr(db_aisle, key, value)
    db.commit()
    db.refresh(db_aisle)
    return AisleOut.model_validate(db_aisle)


def delete_aisle(db: Session, aisle_id: UUID):
    db_aisle = get_aisle_by_id(db, aisle_id)
    occupied = (
        db.query(func.count(StorageSlot.id))
        .join(Shelf, StorageSlot.shelf_id == Shelf.id)
        .filter(Shelf.aisle_id == aisle_id, StorageSlot.is_occupied == True)
        .scalar()
    )
    if occupied:
        return _occupied_block("aisle")

    db.delete(db_aisle)
    db.commit()
    return {"message": "Aisle deleted successfully"}


# ----------------------------------------------------------------------
# SHELVES
# ----------------------------------------------------------------------

def get_shelves(db: Session, aisle_id: Optional[UUID] = None):
    query = db.query(Shelf)
    if aisle_id:
        query = query.filter(Shelf.aisle_id == aisle_id)
    return [ShelfOut.model_validate(s) for s in query.order_by(Shelf.level_number.asc()).all()]


def get_shelf_by_id(db: Session, shelf_id: UUID) -> Shelf:
    shelf = db.query(Shelf).filter(Shelf.id == shelf_id).first()
    if not shelf:
        return _not_found("Shelf")
    return shelf


def create_shelf(db: Session, shelf: ShelfCreate):
    get_aisle_by_id(db, shelf.aisle_id)
    code = shelf.code.upper()
    if db.query(Shelf).filter(Shelf.aisle_id == shelf.aisle_id,
                              func.upper(Shelf.code) == code).first():
        return _duplicate("Shelf", code)

    db_shelf = Shelf(**shelf.model_dump())
    db_shelf.code = code
    db.add(db_shelf)
    db.commit()
    db.refresh(db_shelf)
    return ShelfOut.model_validate(db_shelf)


def update_shelf(db: Session, shelf: ShelfUpdate):
    db_shelf = get_shelf_by_id(db, shelf.id)
    update_data = shelf.model_dump(exclude_unset=True, exclude={"id"})

    if update_data.get("code"):
        code = update_data["code"].upper()
        if db.query(Shelf).filter(Shelf.aisle_id == db_shelf.aisle_id,
                                  func.upper(Shelf.code) == code,
                                  Shelf.id != db_shelf.id).first():
            return _duplicate("Shelf", code)
        update_data["code"] = code

    for key, value in update_data.items():
        setattr(db_shelf, key, value)
    db.commit()
    db.refresh(db_shelf)
    return ShelfOut.model_validate(db_shelf)


def delete_shelf(db: Session, shelf_id: UUID):
    db_shelf = get_shelf_by_id(db, shelf_id)
    occupied = (
        db.query(func.count(StorageSlot.id))
        .filter(StorageSlot.shelf_id == shelf_id, StorageSlot.is_occupied == True)
        .scalar()
    )
    if occupied:
        return _occupied_block("shelf")

    db.delete(db_shelf)
    db.commit()
    return {"message": "Shelf deleted successfully"}


# ----------------------------------------------------------------------
# SLOTS
# ----------------------------------------------------------------------

def get_slots(db: Session, shelf_id: Optional[UUID] = None, available_only: bool = False):
    query = db.query(StorageSlot)
    if shelf_id:
        query = query.filter(StorageSlot.shelf_id == shelf_id)
    if available_only:
        query = query.filter(StorageSlot.is_occupied == False,
                             StorageSlot.is_active == True)
    return [SlotOut.model_validate(s) for s in query.order_by(StorageSlot.code.asc()).all()]


def get_slot_by_id(db: Session, slot_id: UUID) -> StorageSlot:
    slot = db.query(StorageSlot).filter(StorageSlot.id == slot_id).first()
    if not slot:
        return _not_found("Storage slot")
    return slot


def create_slot(db: Session, slot: SlotCreate):
    get_shelf_by_id(db, slot.shelf_id)
    code = slot.code.upper()
    if db.query(StorageSlot).filter(StorageSlot.shelf_id == slot.shelf_id,
                                    func.upper(StorageSlot.code) == code).first():
        return _duplicate("Storage slot", code)

    db_slot = StorageSlot(**slot.model_dump())
    db_slot.code = code
    db_slot.zone = slot.zone or DEFAULT_ZONE
    db.add(db_slot)
    db.commit()
    db.refresh(db_slot)
    return SlotOut.model_validate(db_slot)


def update_slot(db: Session, slot: SlotUpdate):
    db_slot = get_slot_by_id(db, slot.id)
    update_data = slot.model_dump(exclude_unset=True, exclude={"id"})

    if update_data.get("code"):
        code = update_data["code"].upper()
        if db.query(StorageSlot).filter(StorageSlot.shelf_id == db_slot.shelf_id,
                                        func.upper(StorageSlot.code) == code,
                                        StorageSlot.id != db_slot.id).first():
            return _duplicate("Storage slot", code)
        update_data["code"] = code

    if update_data.get("is_active") is False and db_slot.is_occupied:
        return error_response(
            message="Cannot deactivate an occupied slot",
            status_code=str(AppStatusCode.OPERATION_ERROR),
            http_status=400
        )

    for key, value in update_data.items():
        setattr(db_slot, key, value)
    db.commit()
    db.refresh(db_slot)
    return SlotOut.model_validate(db_slot)


def delete_slot(db: Session, slot_id: UUID):
    db_slot = get_slot_by_id(db, slot_id)
    if db_slot.is_occupied:
        return _occupied_block("slot")

    db.delete(db_slot)
    db.commit()
    return {"message": "Storage slot deleted successfully"}


# ----------------------------------------------------------------------
# BULK CREATE
# ----------------------------------------------------------------------

def validate_bulk_request(req: BulkLocationRequest) -> int:
    """Return the number of slots the request would create. Raises ValueError when out of range."""
    if req.aisle_end < req.aisle_start:
        raise ValueError("aisle_end must be greater than or equal to aisle_start")

    aisle_count = req.aisle_end - req.aisle_start + 1
    slot_count = aisle_count * req.shelves_per_aisle * req.slots_per_shelf
    if slot_count > MAX_BULK_SLOTS:
        raise ValueError(f"Bulk create is limited to {MAX_BULK_SLOTS} slots per request")
    return slot_count


def bulk_create_locations(db: Session, req: BulkLocationRequest):
    validate_bulk_request(req)
    warehouse = get_warehouse_by_id(db, req.warehouse_id)

    existing_codes = {
        code for (code,) in db.query(Aisle.code).filter(Aisle.warehouse_id == warehouse.id).all()
    }
    slot_capacity = req.shelf_weight_capacity_kg // req.slots_per_shelf

    skipped: List[str] = []
    preview = []
    created_aisles = 0

    for aisle_number in range(req.aisle_start, req.aisle_end + 1):
        aisle_code = f"{req.aisle_prefix}{aisle_number:02d}".upper()
        if aisle_code in existing_codes:
            skipped.append(aisle_code)
            continue
        created_aisles += 1

        db_aisle = Aisle(
            warehouse_id=warehouse.id,
            code=aisle_code,
            name=f"Aisle {aisle_code}",
            description="Bulk created aisle",
        )
        for shelf_number in range(1, req.shelves_per_aisle + 1):
            shelf_code = f"{req.shelf_prefix}{shelf_number:02d}".upper()
            db_shelf = Shelf(
                code=shelf_code,
                level_number=shelf_number,
                height_cm=req.shelf_height_cm,
                weight_capacity_kg=req.shelf_weight_capacity_kg,
            )
            for slot_number in range(1, req.slots_per_shelf + 1):
                slot_code = f"{aisle_code}{shelf_code}{slot_number:02d}"
                preview.append({
                    "aisle_code": aisle_code,
                    "shelf_code": shelf_code,
                    "slot_code": slot_code,
                    "label": slot_label(warehouse.code, aisle_code, shelf_code, slot_number),
                })
                db_shelf.slots.append(StorageSlot(
                    code=slot_code,
                    position_number=slot_number,
                    weight_capacity_kg=slot_capacity,
                    zone=req.zone or DEFAULT_ZONE,
                    temperature_controlled=req.temperature_controlled,
                    hazmat_approved=req.hazmat_approved,
                ))
            db_aisle.shelves.append(db_shelf)

        if not req.preview_only:
            db.add(db_aisle)

    totals = {
        "aisles": created_aisles,
        "shelves": created_aisles * req.shelves_per_aisle,
        "slots": created_aisles * req.shelves_per_aisle * req.slots_per_shelf,
    }

    if not req.preview_only:
        db.commit()
        logger.info(
            f"Bulk created {totals['slots']} slots in warehouse {warehouse.code}")

    return {**totals, "skipped": skipped, "preview": preview, "created": not req.preview_only}


# ----------------------------------------------------------------------
# OVERVIEW / SEARCH
# ----------------------------------------------------------------------

def get_location_overview(db: Session):
    slot_counts = (
        db.query(
            func.count(StorageSlot.id).label("total"),
            func.count(case((StorageSlot.is_occupied == True, 1))).label("occupied"),
        )
        .filter(StorageSlot.is_active == True)
        .one()
    )
    return {
        "warehouses": db.query(func.count(Warehouse.id)).filter(Warehouse.is_active == True).scalar(),
        "aisles": db.query(func.count(Aisle.id)).filter(Aisle.is_active == True).scalar(),
        "shelves": db.query(func.count(Shelf.id)).filter(Shelf.is_active == True).scalar(),
        "slots": slot_counts.total,
        "occupied_slots": slot_counts.occupied,
        "available_slots": slot_counts.total - slot_counts.occupied,
        "occupancy_rate": occupancy_rate(slot_counts.occupied, slot_counts.total),
    }


def get_zone_summary(db: Session, warehouse_id: Optional[UUID] = None):
    zone_label = func.coalesce(StorageSlot.zone, DEFAULT_ZONE)
    query = (
        db.query(
            zone_label.label("zone"),
            func.count(StorageSlot.id).label("total"),
            func.count(case((StorageSlot.is_occupied == True, 1))).label("occupied"),
        )
        .filter(StorageSlot.is_active == True)
    )
    if warehouse_id:
        query = (
            query.join(Shelf, StorageSlot.shelf_id == Shelf.id)
            .join(Aisle, Shelf.aisle_id == Aisle.id)
            .filter(Aisle.warehouse_id == warehouse_id)
        )
    rows = query.group_by(zone_label).order_by(zone_label).all()
    return [{"zone": r.zone, "total": r.total, "occupied": r.occupied} for r in rows]


def search_slots(db: Session, code: str, limit: int = 50):
    needle = code.strip().upper()
    if not needle:
        return []

    position = cast(StorageSlot.position_number, String)
    label = (
        Warehouse.code + "-" + Aisle.code + "-" + Shelf.code + "-"
        + case((StorageSlot.position_number < 10, "0" + position), else_=position)
    )
    rows = (
        db.query(StorageSlot, Shelf.code, Aisle.code, Warehouse.id, Warehouse.code, Pallet.pallet_number)
        .join(Shelf, StorageSlot.shelf_id == Shelf.id)
        .join(Aisle, Shelf.aisle_id == Aisle.id)
        .join(Warehouse, Aisle.warehouse_id == Warehouse.id)
        .outerjoin(Pallet, Pallet.id == StorageSlot.current_pallet_id)
        .filter(or_(
            func.upper(StorageSlot.code).contains(needle, autoescape=True),
            func.upper(label).contains(needle, autoescape=True),
        ))
        .order_by(StorageSlot.code.asc())
        .limit(limit)
        .all()
    )

    results = []
    for slot, shelf_code, aisle_code, wh_id, wh_code, pallet_number in rows:
        results.append({
            "id": slot.id,
            "code": slot.code,
            "label": slot_label(wh_code, aisle_code, shelf_code, slot.position_number),
            "warehouse_id": wh_id,
            "warehouse_code": wh_code,
            "aisle_code": aisle_code,
            "shelf_code": shelf_code,
            "zone": slot.zone,
            "is_occupied": slot.is_occupied,
            "pallet_number": pallet_number,
        })
    return results
