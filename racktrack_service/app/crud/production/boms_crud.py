from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken
from shared.helpers.datetime_helper import utc_now
from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode
from shared.utils.logger import get_logger

from ...enum.production_enum import BOMAction, BOMStatus
from ...models.production.boms import BOMActivity, BOMApprovalHistory, BOMMaterial, ProductBOM
from ...schemas.production.boms_schemas import (
    BOMActivityCreate, BOMCreate, BOMDecision, BOMMaterialCreate, BOMOut)
from ..inventory.pallets_crud import user_uuid
from ..inventory.products_crud import get_product_by_id
from .activities_crud import get_activity_by_id
from .work_centers_crud import get_work_center_by_id

logger = get_logger(__name__)


def material_cost(bom: ProductBOM) -> float:
    return round(sum(m.line_cost for m in bom.materials), 2)


def bom_to_out(bom: ProductBOM) -> BOMOut:
    out = BOMOut.model_validate(bom)
    out.material_cost = material_cost(bom)
    return out


def get_bom_by_id(db: Session, bom_id: UUID) -> ProductBOM:
    bom = db.query(ProductBOM).filter(ProductBOM.id == bom_id).first()
    if not bom:
        return error_response(
            message="BOM not found",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=404
        )
    return bom


def get_bom(db: Session, bom_id: UUID):
    return bom_to_out(get_bom_by_id(db, bom_id))


def get_product_boms(db: Session, product_id: UUID):
    get_product_by_id(db, product_id)
    boms = (
        db.query(ProductBOM)
        .filter(ProductBOM.product_id == product_id)
        .order_by(ProductBOM.version_number.desc())
        .all()
    )
    return [bom_to_out(b) for b in boms]


def _require_draft(bom: ProductBOM):
    if bom.status != BOMStatus.DRAFT.value:
        return error_response(
            message="Only draft BOMs can be edited",
            status_code=str(AppStatusCode.INVALID_STATUS_TRANSITION),
            http_status=400
        )


def _validate_material(db: Session, product_id: UUID, material: BOMMaterialCreate):
    if material.material_product_id == product_id:
        return error_response(
            message="A product cannot be a material of its own BOM",
            status_code=str(AppStatusCode.INVALID_INPUT),
            http_status=400
        )
    get_product_by_id(db, material.material_product_id)


def _validate_activity(db: Session, activity: BOMActivityCreate):
    get_activity_by_id(db, activity.activity_id)
    get_work_center_by_id(db, activity.work_center_id)


def _log_action(db: Session, bom: ProductBOM, action: BOMAction, current_user: UserToken, comments: str = None):
    db.add(BOMApprovalHistory(
        bom_id=bom.id,
        action=action.value,
        performed_by=user_uuid(current_user),
        comments=comments,
    ))


def create_bom(db: Session, bom: BOMCreate, current_user: UserToken):
    get_product_by_id(db, bom.product_id)
    for material in bom.materials:
        _validate_material(db, bom.product_id, material)
    for activity in bom.activities:
        _validate_activity(db, activity)

    last_version = (
        db.query(func.max(ProductBOM.version_number))
        .filter(ProductBOM.product_id == bom.product_id)
        .scalar()
    )
    db_bom = ProductBOM(
        product_id=bom.product_id,
        version_number=(last_version or 0) + 1,
        status=BOMStatus.DRAFT.value,
        notes=bom.notes,
        created_by=user_uuid(current_user),
        materials=[BOMMaterial(**m.model_dump()) for m in bom.materials],
        activities=[BOMActivity(**a.model_dump()) for a in bom.activities],
    )
    db.add(db_bom)
    db.commit()
    db.refresh(db_bom)
    logger.info(f"BOM v{db_bom.version_number} created for product {bom.product_id}")
    return bom_to_out(db_bom)


def add_material(db: Session, bom_id: UUID, material: BOMMaterialCreate):
    bom = get_bom_by_id(db, bom_id)
    _require_draft(bom)
    _validate_material(db, bom.product_id, material)

    bom.materials.append(BOMMaterial(**material.model_dump()))
    db.commit()
    db.refresh(bom)
    return bom_to_out(bom)


def remove_material(db: Session, bom_id: UUID, material_id: UUID):
    bom = get_bom_by_id(db, bom_id)
    _require_draft(bom)

    material = next((m for m in bom.materials if m.id == material_id), None)
    if not material:
        return error_response(
            message="BOM material not found",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=404
        )

    bom.materials.remove(material)
    db.commit()
    db.refresh(bom)
    return bom_to_out(bom)


def add_activity(db: Session, bom_id: UUID, activity: BOMActivityCreate):
    bom = get_bom_by_id(db, bom_id)
    _require_draft(bom)
    _validate_activity(db, activity)

    bom.activities.append(BOMActivity(**activity.model_dump()))
    db.commit()
    db.refresh(bom)
    return bom_to_out(bom)


def remove_activity(db: Session, bom_id: UUID, bom_activity_id: UUID):
    bom = get_bom_by_id(db, bom_id)
    _require_draft(bom)

    activity = next((a for a in bom.activities if a.id == bom_activity_id), None)
    if not activity:
        return error_response(
            message="BOM activity not found",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=404
        )

    bom.activities.remove(activity)
    db.commit()
    db.refresh(bom)
    return bom_to_out(bom)


def submit_bom(db: Session, bom_id: UUID, current_user: UserToken, decision: BOMDecision = None):
    bom = get_bom_by_id(db, bom_id)
    if bom.status != BOMStatus.DRAFT.value:
        return error_response(
            message="Only draft BOMs can be submitted for approval",
            status_code=str(AppStatusCode.INVALID_STATUS_TRANSITION),
            http_status=400
        )

    bom.status = BOMStatus.PENDING_APPROVAL.value
    _log_action(db, bom, BOMAction.SUBMITTED, current_user,
                decision.comments if decision else None)
    db.commit()
    db.refresh(bom)
    return bom_to_out(bom)


def _make_active(db: Session, bom: ProductBOM, current_user: UserToken):
    today = utc_now().date()
    superseded = (
        db.query(ProductBOM)
        .filter(ProductBOM.product_id == bom.product_id,
                ProductBOM.status == BOMStatus.ACTIVE.value,
                ProductBOM.id != bom.id)
        .all()
    )
    for previous in superseded:
        previous.status = BOMStatus.OBSOLETE.value
        previous.obsolete_date = today

    bom.status = BOMStatus.ACTIVE.value
    bom.effective_date = today
    bom.obsolete_date = None
    bom.approved_by = user_uuid(current_user)
    bom.approved_at = utc_now()


def approve_bom(db: Session, bom_id: UUID, decision: BOMDecision, current_user: UserToken):
    bom = get_bom_by_id(db, bom_id)
    if bom.status != BOMStatus.PENDING_APPROVAL.value:
        return error_response(
            message="Only BOMs pending approval can be approved",
            status_code=str(AppStatusCode.INVALID_STATUS_TRANSITION),
            http_status=400
        )

    _make_active(db, bom, current_user)
    _log_action(db, bom, BOMAction.APPROVED, current_user, decision.comments)
    db.commit()
    db.refresh(bom)
    logger.info(f"BOM v{bom.version_number} approved for product {bom.product_id}")
    return bom_to_out(bom)


def reject_bom(db: Session, bom_id: UUID, decision: BOMDecision, current_user: UserToken):
    bom = get_bom_by_id(db, bom_id)
    if bom.status != BOMStatus.PENDING_APPROVAL.value:
        return error_response(
            message="Only BOMs pending approval can be rejected",
            status_code=str(AppStatusCode.INVALID_STATUS_TRANSITION),
            http_status=400
        )

    bom.status = BOMStatus.DRAFT.value
    _log_action(db, bom, BOMAction.REJECTED, current_user, decision.comments)
    db.commit()
    db.refresh(bom)
    return bom_to_out(bom)


def activate_bom(db: Session, bom_id: UUID, current_user: UserToken, decision: BOMDecision = None):
    bom = get_bom_by_id(db, bom_id)
    if bom.status == BOMStatus.ACTIVE.value:
        return error_response(
            message="BOM is already active",
            status_code=str(AppStatusCode.INVALID_STATUS_TRANSITION),
            http_status=400
        )

    _make_active(db, bom, current_user)
    _log_action(db, bom, BOMAction.ACTIVATED, current_user,
                decision.comments if decision else None)
    db.commit()
    db.refresh(bom)
    return bom_to_out(bom)


def count_pending_approvals(db: Session) -> int:
    return (
        db.query(func.count(ProductBOM.id))
        .filter(ProductBOM.status == BOMStatus.PENDING_APPROVAL.value)
        .scalar()
    )
