from uuid import UUID
from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode

from ...enum.inventory_enum import DEFAULT_ZONE
from ...models.warehouse.aisles import Aisle
from ...models.warehouse.shelves import Shelf
from ...models.warehouse.storage_slots import StorageSlot
from ...models.warehouse.warehouses import Warehouse
from ...schemas.warehouse.warehouses_schemas import (
    WarehouseCreate, WarehouseOut, WarehouseRequest, WarehouseUpdate)


def occupancy_rate(occupied: int, total: int) -> int:
    return round(occupied / total * 100) if total else 0


def build_warehouse_filters(params: WarehouseRequest):
    filters = []

    if params.is_active is not None:
        filters.append(Warehouse.is_active == params.is_active)

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(Warehouse.name.ilike(search_term),
                           Warehouse.code.ilike(search_term)))

    return filters


def get_warehouses(db: Session, params: WarehouseRequest):
    query = db.query(Warehouse).filter(*build_warehouse_filters(params))
    total = query.count()
    warehouses = (
        query.order_by(Warehouse.name.asc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return {"warehouses": [WarehouseOut.model_validate(w) for w in warehouses], "total": total}


def get_warehouse_by_id(db: Session, warehouse_id: UUID) -> Warehouse:
    warehouse = db.query(Warehouse).filter(Warehouse.id == warehouse_id).first()
    if not warehouse:
        return error_response(
            message="Warehouse not found",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=404
        )
    return warehouse


def _check_duplicate_code(db: Session, code: str, exclude_id: UUID = None):
    query = db.query(Warehouse).filter(func.upper(Warehouse.code) == code.upper())
    if exclude_id:
        query = query.filter(Warehouse.id != exclude_id)
    if query.first():
        return error_response(
            message=f"Warehouse with code '{code.upper()}' already exists",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR),
            http_status=400
        )


def create_warehouse(db: Session, warehouse: WarehouseCreate):
    _check_duplicate_code(db, warehouse.code)

    db_warehouse = Warehouse(**warehouse.model_dump())
    db_warehouse.code = warehouse.code.upper()
    db.add(db_warehouse)
    db.commit()
    db.refresh(db_warehouse)
    return WarehouseOut.model_validate(db_warehouse)


def update_warehouse(db: Session, warehouse: WarehouseUpdate):
    db_warehouse = get_warehouse_by_id(db, warehouse.id)

    update_data = warehouse.model_dump(exclude_unset=True, exclude={"id"})
    if update_data.get("code"):
        _check_duplicate_code(db, update_data["code"], exclude_id=warehouse.id)
        update_data["code"] = update_data["code"].upper()

    for key, value in update_data.items():
        setattr(db_warehouse, key, value)

    db.commit()
    db.refresh(db_warehouse)
    return WarehouseOut.model_validate(db_warehouse)


def count_occupied_slots(db: Session, warehouse_id: UUID) -> int:
    return (
        db.query(func.count(StorageSlot.id))
        .join(Shelf, StorageSlot.shelf_id == Shelf.id)
        .join(Aisle, Shelf.aisle_id == Aisle.id)
        .filter(Aisle.warehouse_id == warehouse_id, StorageSlot.is_occupied == True)
        .scalar()
    )


def delete_warehouse(db: Session, warehouse_id: UUID):
    db_warehouse = get_warehouse_by_id(db, warehouse_id)

    if count_occupied_slots(db, warehouse_id):
        return error_response(
            message="Cannot deactivate a warehouse with occupied locations",
            status_code=str(AppStatusCode.DELETE_RESTRICTED),
            http_status=400
        )

    db_warehouse.is_active = False
    db.commit()
    return {"message": "Warehouse deactivated successfully"}


def get_warehouse_lookup(db: Session):
    rows = (
        db.query(Warehouse.id, Warehouse.name)
        .filter(Warehouse.is_active == True)
        .order_by(Warehouse.name.asc())
        .all()
    )
    return [{"id": r.id, "name": r.name} for r in rows]


def get_warehouse_stats(db: Session, warehouse_id: UUID):
    get_warehouse_by_id(db, warehouse_id)

    slot_scope = (
        db.query(StorageSlot)
        .join(Shelf, StorageSlot.shelf_id == Shelf.id)
        .join(Aisle, Shelf.aisle_id == Aisle.id)
        .filter(Aisle.warehouse_id == warehouse_id, StorageSlot.is_active == True)
    )

    aisle_rows = (
        db.query(
            Aisle.id, Aisle.code, Aisle.name,
            func.count(StorageSlot.id).label("total"),
            func.count(case((StorageSlot.is_occupied == True, 1))).label("occupied"),
        )
        .outerjoin(Shelf, Shelf.aisle_id == Aisle.id)
        .outerjoin(StorageSlot, (StorageSlot.shelf_id == Shelf.id) & (StorageSlot.is_active == True))
        .filter(Aisle.warehouse_id == warehouse_id, Aisle.is_active == True)
        .group_by(Aisle.id, Aisle.code, Aisle.name)
        .order_by(Aisle.code.asc())
        .all()
    )

    aisles = [
        {
            "aisle_id": row.id,
            "code": row.code,
            "name": row.name,
            "total_slots": row.total,
            "occupied_slots": row.occupied,
            "available_slots": row.total - row.occupied,
            "occupancy_rate": occupancy_rate(row.occupied, row.total),
        }
        for row in aisle_rows
    ]

    zone_label = func.coalesce(StorageSlot.zone, DEFAULT_ZONE)
    zone_rows = (
        slot_scope
        .with_entities(
            zone_label.label("zone"),
            func.count(StorageSlot.id).label("total"),
            func.count(case((StorageSlot.is_occupied == True, 1))).label("occupied"),
        )
        .group_by(zone_label)
        .order_by(zone_label)
        .all()
    )

    counts = slot_scope.with_entities(
        func.count(StorageSlot.id).label("total"),
        func.count(case((StorageSlot.is_occupied == True, 1))).label("occupied"),
        func.count(case((StorageSlot.temperature_controlled == True, 1))).label("temperature"),
        func.count(case((StorageSlot.hazmat_approved == True, 1))).label("hazmat"),
    ).one()

    total_shelves = (
        db.query(func.count(Shelf.id))
        .join(Aisle, Shelf.aisle_id == Aisle.id)
        .filter(Aisle.warehouse_id == warehouse_id, Shelf.is_active == True)
        .scalar()
    )

    return {
        "warehouse_id": warehouse_id,
        "total_aisles": len(aisles),
        "total_shelves": total_shelves,
        "total_slots": counts.total,
        "occupied_slots": counts.occupied,
        "available_slots": counts.total - counts.occupied,
        "occupancy_rate": occupancy_rate(counts.occupied, counts.total),
        "temperature_controlled": counts.temperature,
        "hazmat_approved": counts.hazmat,
        "aisles": aisles,
        "zones": [{"zone": z.zone, "total": z.total, "occupied": z.occupied} for z in zone_rows],
    }
