from typing import Optional
from uuid import UUID
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken
from shared.helpers.datetime_helper import utc_now
from shared.helpers.json_response_helper import error_response
from shared.helpers.sequence_helper import next_number
from shared.utils.app_status_code import AppStatusCode
from shared.utils.logger import get_logger

from ...enum.inventory_enum import MovementType, PalletStatus
from ...models.inventory.inventory_items import InventoryItem
from ...models.inventory.inventory_movements import InventoryMovement
from ...models.inventory.pallets import Pallet
from ...models.warehouse.aisles import Aisle
from ...models.warehouse.shelves import Shelf
from ...models.warehouse.storage_slots import StorageSlot
from ...schemas.inventory.inventory_schemas import MovementOut
from ...schemas.inventory.pallets_schemas import (
    PalletContent, PalletCreate, PalletMoveRequest, PalletOut, PalletRequest, PalletUpdate)
from ..warehouse.locations_crud import slot_label

logger = get_logger(__name__)


def user_uuid(current_user: Optional[UserToken]) -> Optional[UUID]:
    if current_user is None or not current_user.user_id:
        return None
    return UUID(current_user.user_id)


def record_movement(db: Session, movement_type: MovementType, current_user: UserToken = None, **fields) -> InventoryMovement:
    movement = InventoryMovement(
        movement_type=movement_type.value,
        performed_by=user_uuid(current_user),
        **fields
    )
    db.add(movement)
    return movement


def generate_pallet_number(db: Session) -> str:
    return next_number(db, Pallet.pallet_number, f"PLT-{utc_now():%Y%m%d}-", 4)


def location_code(slot: Optional[StorageSlot]) -> Optional[str]:
    if slot is None:
        return None
    aisle = slot.shelf.aisle
    return slot_label(aisle.warehouse.code, aisle.code, slot.shelf.code, slot.position_number)


def pallet_to_out(pallet: Pallet) -> PalletOut:
    data = {column.name: getattr(pallet, column.name) for column in Pallet.__table__.columns}
    data["location_code"] = location_code(pallet.current_location)
    data["contents"] = [
        PalletContent(
            inventory_id=item.id,
            product_id=item.product_id,
            sku=item.product.sku,
            product_name=item.product.name,
            quantity=item.quantity or 0,
            available_quantity=item.available_quantity or 0,
            lot_number=item.lot_number,
            quality_status=item.quality_status,
        )
        for item in pallet.contents
        if (item.quantity or 0) > 0
    ]
    return PalletOut.model_validate(data)


def get_slot_for_pallet(db: Session, slot_id: UUID, pallet_id: UUID = None) -> StorageSlot:
    slot = db.query(StorageSlot).filter(StorageSlot.id == slot_id).first()
    if not slot:
        return error_response(
            message="Target location not found",
            status_code=str(AppStatusCode.INVALID_INPUT),
            http_status=400
        )
    if not slot.is_active:
        return error_response(
            message="Target location is not active",
            status_code=str(AppStatusCode.INVALID_INPUT),
            http_status=400
        )
    if slot.is_occupied and slot.current_pallet_id != pallet_id:
        return error_response(
            message="Target location is already occupied",
            status_code=str(AppStatusCode.INVALID_INPUT),
            http_status=400
        )
    return slot


def free_slot(db: Session, slot_id: Optional[UUID]):
    if not slot_id:
        return
    slot = db.query(StorageSlot).filter(StorageSlot.id == slot_id).first()
    if slot:
        slot.is_occupied = False
        slot.current_pallet_id = None


def occupy_slot(slot: StorageSlot, pallet: Pallet):
    slot.is_occupied = True
    slot.current_pallet_id = pallet.id


def build_pallet_filters(params: PalletRequest):
    filters = []

    if params.status:
        filters.append(Pallet.status == params.status)

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(Pallet.pallet_number.ilike(search_term),
                           Pallet.qr_code.ilike(search_term)))

    return filters


def get_pallets(db: Session, params: PalletRequest):
    query = db.query(Pallet).filter(*build_pallet_filters(params))

    if params.warehouse_id:
        query = (
            query.join(StorageSlot, Pallet.current_location_id == StorageSlot.id)
            .join(Shelf, StorageSlot.shelf_id == Shelf.id)
            .join(Aisle, Shelf.aisle_id == Aisle.id)
            .filter(Aisle.warehouse_id == params.warehouse_id)
        )

    total = query.count()
    pallets = (
        query.order_by(Pallet.pallet_number.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return {"pallets": [pallet_to_out(p) for p in pallets], "total": total}


def get_pallet_by_id(db: Session, pallet_id: UUID) -> Pallet:
    pallet = db.query(Pallet).filter(Pallet.id == pallet_id).first()
    if not pallet:
        return error_response(
            message="Pallet not found",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=404
        )
    return pallet


def get_pallet(db: Session, pallet_id: UUID):
    return pallet_to_out(get_pallet_by_id(db, pallet_id))


def new_pallet(db: Session, data: dict, current_user: UserToken = None) -> Pallet:
    """Add a pallet to the session, placing it on `location_id` when given. Does not commit."""
    location_id = data.pop("location_id", None)
    if not data.get("pallet_number"):
        data["pallet_number"] = generate_pallet_number(db)
    elif db.query(Pallet).filter(Pallet.pallet_number == data["pallet_number"]).first():
        return error_response(
            message=f"Pallet '{data['pallet_number']}' already exists",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR),
            http_status=400
        )

    pallet = Pallet(**data, status=PalletStatus.RECEIVING.value,
                    created_by=user_uuid(current_user))
    db.add(pallet)
    db.flush()

    if location_id:
        slot = get_slot_for_pallet(db, location_id, pallet.id)
        occupy_slot(slot, pallet)
        pallet.current_location_id = slot.id
        pallet.status = PalletStatus.STORED.value
        pallet.last_moved = utc_now()

    return pallet


def create_pallet(db: Session, pallet: PalletCreate, current_user: UserToken):
    db_pallet = new_pallet(db, pallet.model_dump(), current_user)
    db.commit()
    db.refresh(db_pallet)
    logger.info(f"Pallet {db_pallet.pallet_number} created")
    return pallet_to_out(db_pallet)


def update_pallet(db: Session, pallet: PalletUpdate):
    db_pallet = get_pallet_by_id(db, pallet.id)
    update_data = pallet.model_dump(exclude_unset=True, exclude={"id"})

    for key, value in update_data.items():
        setattr(db_pallet, key, value)

    db.commit()
    db.refresh(db_pallet)
    return pallet_to_out(db_pallet)


def move_pallet(db: Session, pallet_id: UUID, move: PalletMoveRequest, current_user: UserToken):
    pallet = get_pallet_by_id(db, pallet_id)
    if pallet.status == PalletStatus.SHIPPED.value:
        return error_response(
            message="Shipped pallets cannot be moved",
            status_code=str(AppStatusCode.INVALID_STATUS_TRANSITION),
            http_status=400
        )

    target = get_slot_for_pallet(db, move.to_location_id, pallet.id)
    from_location_id = pallet.current_location_id

    if from_location_id and from_location_id != target.id:
        free_slot(db, from_location_id)
    occupy_slot(target, pallet)

    pallet.previous_location_id = from_location_id
    pallet.current_location_id = target.id
    pallet.status = PalletStatus.STORED.value
    pallet.last_moved = utc_now()

    lines = [item for item in pallet.contents if (item.quantity or 0) > 0]
    movement_fields = dict(
        pallet_id=pallet.id,
        from_location_id=from_location_id,
        to_location_id=target.id,
        reason="Manual pallet movement",
        notes=move.notes,
    )
    if lines:
        for item in lines:
            record_movement(
                db, MovementType.MOVE, current_user,
                product_id=item.product_id,
                inventory_id=item.id,
                quantity_before=item.quantity,
                quantity_change=0,
                quantity_after=item.quantity,
                **movement_fields
            )
    else:
        record_movement(db, MovementType.MOVE, current_user, **movement_fields)

    db.commit()
    db.refresh(pallet)
    logger.info(f"Pallet {pallet.pallet_number} moved to {target.code}")
    return pallet_to_out(pallet)


def ship_pallet(db: Session, pallet_id: UUID, current_user: UserToken, notes: str = None):
    pallet = get_pallet_by_id(db, pallet_id)
    if pallet.status == PalletStatus.SHIPPED.value:
        return error_response(
            message="Pallet has already been shipped",
            status_code=str(AppStatusCode.INVALID_STATUS_TRANSITION),
            http_status=400
        )

    from_location_id = pallet.current_location_id
    for item in pallet.contents:
        quantity = item.quantity or 0
        if quantity <= 0:
            continue
        record_movement(
            db, MovementType.SHIP, current_user,
            product_id=item.product_id,
            pallet_id=pallet.id,
            inventory_id=item.id,
            quantity_before=quantity,
            quantity_change=-quantity,
            quantity_after=0,
            from_location_id=from_location_id,
            reason="Pallet shipped",
            notes=notes,
        )
        item.quantity = 0
        item.reserved_quantity = 0
        item.recalculate()

    free_slot(db, from_location_id)
    pallet.previous_location_id = from_location_id
    pallet.current_location_id = None
    pallet.status = PalletStatus.SHIPPED.value
    pallet.last_moved = utc_now()

    db.commit()
    db.refresh(pallet)
    logger.info(f"Pallet {pallet.pallet_number} shipped")
    return pallet_to_out(pallet)


def get_pallet_history(db: Session, pallet_id: UUID):
    get_pallet_by_id(db, pallet_id)
    movements = (
        db.query(InventoryMovement)
        .filter(InventoryMovement.pallet_id == pallet_id)
        .order_by(InventoryMovement.created_at.desc())
        .all()
    )
    return [MovementOut.model_validate(m) for m in movements]


def get_pallet_counts_by_status(db: Session):
    rows = db.query(Pallet.status, func.count(Pallet.id)).group_by(Pallet.status).all()
    return {status: count for status, count in rows}
