from typing import List
from uuid import UUID
from sqlalchemy import or_
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response
from shared.helpers.sequence_helper import next_number
from shared.utils.app_status_code import AppStatusCode
from shared.utils.logger import get_logger

from ...enum.sales_enum import PO_LOCKED_STATUSES, PO_STATUS_TRANSITIONS, POStatus
from ...models.sales.customer_pos import CustomerPO, CustomerPOItem, CustomerPOStatusHistory
from ...schemas.sales.customer_pos_schemas import (
    CustomerPOCreate, CustomerPOOut, CustomerPORequest, CustomerPOUpdate, POItemCreate, POStatusUpdate)
from ..inventory.pallets_crud import user_uuid
from .customers_crud import get_customer_by_id

logger = get_logger(__name__)


def build_po_items(items: List[POItemCreate]) -> List[CustomerPOItem]:
    return [
        CustomerPOItem(
            line_number=index + 1,
            product_id=item.product_id,
            description=item.description,
            quantity=item.quantity,
            unit_price=item.unit_price,
            total_amount=round(item.quantity * item.unit_price, 2),
        )
        for index, item in enumerate(items)
    ]


def generate_po_number(db: Session) -> str:
    return next_number(db, CustomerPO.po_number, "PO-", 6)


def get_customer_pos(db: Session, params: CustomerPORequest):
    query = db.query(CustomerPO)

    if params.status and params.status != "all":
        query = query.filter(CustomerPO.production_status == params.status)

    if params.customer_id:
        query = query.filter(CustomerPO.customer_id == params.customer_id)

    if params.search:
        search_term = f"%{params.search}%"
        query = query.filter(or_(CustomerPO.po_number.ilike(search_term),
                                 CustomerPO.description.ilike(search_term)))

    pos = query.order_by(CustomerPO.created_at.desc(), CustomerPO.po_number.desc()).all()
    return [CustomerPOOut.model_validate(po) for po in pos]


def get_po_by_id(db: Session, po_id: UUID) -> CustomerPO:
    po = db.query(CustomerPO).filter(CustomerPO.id == po_id).first()
    if not po:
        return error_response(
            message="Purchase order not found",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=404
        )
    return po


def get_customer_po(db: Session, po_id: UUID):
    return CustomerPOOut.model_validate(get_po_by_id(db, po_id))


def create_customer_po(db: Session, po: CustomerPOCreate, current_user: UserToken):
    try:
        if po.customer_id:
            get_customer_by_id(db, po.customer_id)

        po_number = po.po_number or generate_po_number(db)
        if db.query(CustomerPO.id).filter(CustomerPO.po_number == po_number).first():
            return error_response(
                message=f"PO number '{po_number}' already exists",
                status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR),
                http_status=400
            )

        items = build_po_items(po.items)
        db_po = CustomerPO(
            po_number=po_number,
            customer_id=po.customer_id,
            description=po.description,
            due_date=po.due_date,
            production_notes=po.production_notes,
            production_status=POStatus.DRAFT.value,
            total_amount=round(sum(i.total_amount for i in items), 2),
            created_by=user_uuid(current_user),
            updated_by=user_uuid(current_user),
            items=items,
        )
        if po.po_date:
            db_po.po_date = po.po_date

        db.add(db_po)
        db.commit()
        db.refresh(db_po)
        logger.info(f"Customer PO {db_po.po_number} created")
        return CustomerPOOut.model_validate(db_po)

    except Exception:
        db.rollback()
        raise


def update_customer_po(db: Session, po_id: UUID, po: CustomerPOUpdate, current_user: UserToken):
    db_po = get_po_by_id(db, po_id)
    update_data = po.model_dump(exclude_unset=True, exclude={"items"})

    if update_data.get("customer_id"):
        get_customer_by_id(db, update_data["customer_id"])

    for key, value in update_data.items():
        setattr(db_po, key, value)

    if po.items is not None:
        db_po.items = build_po_items(po.items)
        db_po.total_amount = round(sum(i.total_amount for i in db_po.items), 2)

    db_po.updated_by = user_uuid(current_user)
    db.commit()
    db.refresh(db_po)
    return CustomerPOOut.model_validate(db_po)


def delete_customer_po(db: Session, po_id: UUID):
    db_po = get_po_by_id(db, po_id)

    if db_po.production_status in PO_LOCKED_STATUSES:
        return error_response(
            message=f"Cannot delete a purchase order that is {db_po.production_status.replace('_', ' ')}",
            status_code=str(AppStatusCode.DELETE_RESTRICTED),
            http_status=400
        )

    db.delete(db_po)
    db.commit()
    return {"message": "Purchase order deleted successfully"}


def apply_status_change(db: Session, db_po: CustomerPO, new_status: str, current_user: UserToken,
                        reason: str = None, notes: str = None):
    """Move a PO along its workflow and write a history row. Does not commit."""
    current = db_po.production_status
    allowed = PO_STATUS_TRANSITIONS.get(current, [])
    if new_status not in allowed:
        return error_response(
            message=f"Invalid status transition from {current} to {new_status}",
            status_code=str(AppStatusCode.INVALID_STATUS_TRANSITION),
            http_status=400,
            data={"valid_transitions": allowed}
        )

    db_po.production_status = new_status
    if new_status == POStatus.ON_HOLD.value:
        if reason:
            db_po.hold_reason = reason
    else:
        db_po.hold_reason = None
    if notes:
        db_po.production_notes = notes
    db_po.updated_by = user_uuid(current_user)

    db.add(CustomerPOStatusHistory(
        po_id=db_po.id,
        from_status=current,
        to_status=new_status,
        reason=reason,
        notes=notes,
        changed_by=user_uuid(current_user),
    ))


def update_po_status(db: Session, po_id: UUID, update: POStatusUpdate, current_user: UserToken):
    db_po = get_po_by_id(db, po_id)

    if not update.status:
        return error_response(
            message="Status is required",
            status_code=str(AppStatusCode.REQUIRED_VALIDATION_ERROR),
            http_status=400
        )

    apply_status_change(db, db_po, update.status, current_user, update.reason, update.notes)
    db.commit()
    db.refresh(db_po)
    logger.info(f"PO {db_po.po_number} moved to {update.status}")
    return CustomerPOOut.model_validate(db_po)
