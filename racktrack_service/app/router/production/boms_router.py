from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_editor, allow_manager, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.production import boms_crud as crud
from ...schemas.production.boms_schemas import (
    BOMActivityCreate, BOMCreate, BOMDecision, BOMMaterialCreate, BOMOut)

router = APIRouter(
    prefix="/api/boms",
    tags=["bills of materials"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/pending-count")
def pending_approvals(db: Session = Depends(get_db)):
    return {"pending": crud.count_pending_approvals(db)}


@router.get("/{bom_id}", response_model=BOMOut)
def get_bom(bom_id: UUID, db: Session = Depends(get_db)):
    return crud.get_bom(db, bom_id)


@router.post("/")
def create_bom(
        bom: BOMCreate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_editor)):
    return success_response(
        data=crud.create_bom(db, bom, current_user),
        message="BOM created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


# ---------------- Draft editing ----------------

@router.post("/{bom_id}/materials", dependencies=[Depends(allow_editor)])
def add_material(bom_id: UUID, material: BOMMaterialCreate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.add_material(db, bom_id, material),
        message="Material added successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/{bom_id}/materials/{material_id}", dependencies=[Depends(allow_editor)])
def remove_material(bom_id: UUID, material_id: UUID, db: Session = Depends(get_db)):
    return success_response(
        data=crud.remove_material(db, bom_id, material_id),
        message="Material removed successfully",
        status_code=AppStatusCode.DELETED_SUCCESSFULLY
    )


@router.post("/{bom_id}/activities", dependencies=[Depends(allow_editor)])
def add_activity(bom_id: UUID, activity: BOMActivityCreate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.add_activity(db, bom_id, activity),
        message="Activity added successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/{bom_id}/activities/{bom_activity_id}", dependencies=[Depends(allow_editor)])
def remove_activity(bom_id: UUID, bom_activity_id: UUID, db: Session = Depends(get_db)):
    return success_response(
        data=crud.remove_activity(db, bom_id, bom_activity_id),
        message="Activity removed successfully",
        status_code=AppStatusCode.DELETED_SUCCESSFULLY
    )


# ---------------- Approval workflow ----------------

@router.post("/{bom_id}/submit")
def submit_bom(
        bom_id: UUID,
        decision: BOMDecision = None,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_editor)):
    return success_response(
        data=crud.submit_bom(db, bom_id, current_user, decision),
        message="BOM submitted for approval",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.post("/{bom_id}/approve")
def approve_bom(
        bom_id: UUID,
        decision: BOMDecision,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_manager)):
    return success_response(
        data=crud.approve_bom(db, bom_id, decision, current_user),
        message="BOM approved successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.post("/{bom_id}/reject")
def reject_bom(
        bom_id: UUID,
        decision: BOMDecision,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_manager)):
    return success_response(
        data=crud.reject_bom(db, bom_id, decision, current_user),
        message="BOM rejected",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.post("/{bom_id}/activate")
def activate_bom(
        bom_id: UUID,
        decision: BOMDecision = None,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_manager)):
    return success_response(
        data=crud.activate_bom(db, bom_id, current_user, decision),
        message="BOM activated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )
