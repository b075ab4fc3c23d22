from datetime import timedelta
from uuid import UUID
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from shared.core.schemas import UserToken
from shared.helpers.datetime_helper import start_of_day
from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode
from shared.utils.logger import get_logger

from ...enum.inventory_enum import MovementType
from ...models.inventory.inventory_items import InventoryItem
from ...models.inventory.inventory_movements import InventoryMovement
from ...models.inventory.products import Product
from ...schemas.inventory.inventory_schemas import (
    AdjustRequest, InventoryOut, InventoryRequest, MovementOut, MovementRequest,
    PickRequest, ReceiveRequest)
from .pallets_crud import get_pallet_by_id, get_pallet_counts_by_status, new_pallet, record_movement
from .products_crud import get_low_stock_products, get_product_by_id

logger = get_logger(__name__)


def inventory_to_out(item: InventoryItem) -> InventoryOut:
    out = InventoryOut.model_validate(item)
    out.sku = item.product.sku if item.product else None
    out.product_name = item.product.name if item.product else None
    out.pallet_number = item.pallet.pallet_number if item.pallet else None
    return out


def get_inventory_item(db: Session, inventory_id: UUID) -> InventoryItem:
    item = db.query(InventoryItem).filter(InventoryItem.id == inventory_id).first()
    if not item:
        return error_response(
            message="Inventory record not found",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=404
        )
    return item


def receive_inventory(db: Session, req: ReceiveRequest, current_user: UserToken):
    get_product_by_id(db, req.product_id)

    if req.pallet_id:
        pallet = get_pallet_by_id(db, req.pallet_id)
    else:
        pallet = new_pallet(db, {"location_id": req.location_id}, current_user)

    item = InventoryItem(
        product_id=req.product_id,
        pallet_id=pallet.id,
        quantity=req.quantity,
        reserved_quantity=0,
        lot_number=req.lot_number,
        batch_number=req.batch_number,
        serial_numbers=req.serial_numbers,
        manufacture_date=req.manufacture_date,
        expiration_date=req.expiration_date,
        unit_cost=req.unit_cost,
        quality_status=req.quality_status,
    )
    item.recalculate()
    db.add(item)
    db.flush()

    movement = record_movement(
        db, MovementType.RECEIVE, current_user,
        product_id=req.product_id,
        pallet_id=pallet.id,
        inventory_id=item.id,
        quantity_before=0,
        quantity_change=req.quantity,
        quantity_after=req.quantity,
        to_location_id=pallet.current_location_id,
        reason="Initial receipt",
        notes=req.notes,
    )
    db.commit()
    logger.info(f"Received {req.quantity} of product {req.product_id} on pallet {pallet.pallet_number}")

    return {
        "pallet_id": pallet.id,
        "pallet_number": pallet.pallet_number,
        "inventory_id": item.id,
        "movement_id": movement.id,
    }


def adjust_inventory(db: Session, inventory_id: UUID, req: AdjustRequest, current_user: UserToken):
    item = get_inventory_item(db, inventory_id)
    before = item.quantity or 0
    after = before + req.quantity_change

    if after < 0:
        return error_response(
            message="Adjustment would result in negative inventory",
            status_code=str(AppStatusCode.INVALID_INPUT),
            http_status=400
        )
    if after < (item.reserved_quantity or 0):
        return error_response(
            message="Adjustment would leave less than the reserved quantity",
            status_code=str(AppStatusCode.INVALID_INPUT),
            http_status=400
        )

    item.quantity = after
    item.recalculate()
    record_movement(
        db, MovementType.ADJUST, current_user,
        product_id=item.product_id,
        pallet_id=item.pallet_id,
        inventory_id=item.id,
        quantity_before=before,
        quantity_change=req.quantity_change,
        quantity_after=after,
        reason=req.reason,
        notes=req.notes,
    )
    db.commit()
    db.refresh(item)
    return inventory_to_out(item)


def consume_inventory(db: Session, item: InventoryItem, quantity: float, current_user: UserToken,
                      reference_type: str = None, reference_id: str = None, notes: str = None,
                      reason: str = "Picked"):
    """Decrement an inventory line and record a pick movement. Does not commit."""
    available = item.available_quantity if item.available_quantity is not None else item.quantity
    if quantity > (available or 0):
        return error_response(
            message=f"Insufficient available quantity (available {available or 0}, requested {quantity})",
            status_code=str(AppStatusCode.INVALID_INPUT),
            http_status=400
        )

    before = item.quantity or 0
    item.quantity = before - quantity
    item.recalculate()

    pallet = item.pallet
    return record_movement(
        db, MovementType.PICK, current_user,
        product_id=item.product_id,
        pallet_id=item.pallet_id,
        inventory_id=item.id,
        quantity_before=before,
        quantity_change=-quantity,
        quantity_after=item.quantity,
        from_location_id=pallet.current_location_id if pallet else None,
        reference_type=reference_type,
        reference_id=reference_id,
        reason=reason,
        notes=notes,
    )


def pick_inventory(db: Session, req: PickRequest, current_user: UserToken):
    item = get_inventory_item(db, req.inventory_id)
    consume_inventory(db, item, req.quantity, current_user,
                      reference_type=req.reference_type,
                      reference_id=req.reference_id,
                      notes=req.notes)
    db.commit()
    db.refresh(item)
    return inventory_to_out(item)


def build_inventory_filters(params: InventoryRequest):
    filters = []

    if params.product_id:
        filters.append(InventoryItem.product_id == params.product_id)

    if params.quality_status:
        filters.append(InventoryItem.quality_status == params.quality_status)

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(Product.sku.ilike(search_term),
                           Product.name.ilike(search_term),
                           InventoryItem.lot_number.ilike(search_term)))

    return filters


def get_inventory(db: Session, params: InventoryRequest):
    query = (
        db.query(InventoryItem)
        .join(Product, InventoryItem.product_id == Product.id)
        .options(joinedload(InventoryItem.product), joinedload(InventoryItem.pallet))
        .filter(*build_inventory_filters(params))
    )
    total = query.count()
    items = (
        query.order_by(Product.sku.asc(), InventoryItem.received_date.asc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return {"inventory": [inventory_to_out(i) for i in items], "total": total}


def build_movement_filters(params: MovementRequest):
    filters = []

    if params.product_id:
        filters.append(InventoryMovement.product_id == params.product_id)

    if params.pallet_id:
        filters.append(InventoryMovement.pallet_id == params.pallet_id)

    if params.movement_type:
        filters.append(InventoryMovement.movement_type == params.movement_type)

    if params.date_from:
        filters.append(InventoryMovement.created_at >= start_of_day(params.date_from))

    if params.date_to:
        filters.append(InventoryMovement.created_at <
                       start_of_day(params.date_to) + timedelta(days=1))

    return filters


def get_movements(db: Session, params: MovementRequest):
    query = db.query(InventoryMovement).filter(*build_movement_filters(params))
    total = query.count()
    movements = (
        query.order_by(InventoryMovement.created_at.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return {"movements": [MovementOut.model_validate(m) for m in movements], "total": total}


def get_inventory_overview(db: Session):
    totals = (
        db.query(
            func.count(func.distinct(InventoryItem.product_id)).label("skus"),
            func.coalesce(func.sum(InventoryItem.quantity), 0).label("units"),
            func.coalesce(func.sum(InventoryItem.total_cost), 0).label("value"),
        )
        .filter(InventoryItem.quantity > 0)
        .one()
    )
    return {
        "total_skus": totals.skus,
        "total_units": float(totals.units or 0),
        "total_value": round(float(totals.value or 0), 2),
        "pallets_by_status": get_pallet_counts_by_status(db),
        "low_stock_count": len(get_low_stock_products(db)),
    }
