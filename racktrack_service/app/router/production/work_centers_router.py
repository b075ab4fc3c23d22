from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_manager, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import Lookup
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.production import work_centers_crud as crud
from ...schemas.production.work_centers_schemas import (
    WorkCenterActivityCreate, WorkCenterActivityUpdate, WorkCenterCreate, WorkCenterListResponse,
    WorkCenterOut, WorkCenterRequest, WorkCenterUpdate)

router = APIRouter(
    prefix="/api/work-centers",
    tags=["work centers"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/all", response_model=WorkCenterListResponse)
def get_work_centers(
        params: WorkCenterRequest = Depends(),
        db: Session = Depends(get_db)):
    return crud.get_work_centers(db, params)


@router.get("/lookup", response_model=List[Lookup])
def work_center_lookup(db: Session = Depends(get_db)):
    return crud.get_work_center_lookup(db)


@router.get("/{work_center_id}")
def get_work_center(work_center_id: UUID, db: Session = Depends(get_db)):
    return crud.get_work_center_detail(db, work_center_id)


@router.post("/", dependencies=[Depends(allow_manager)])
def create_work_center(work_center: WorkCenterCreate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.create_work_center(db, work_center),
        message="Work center created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/", dependencies=[Depends(allow_manager)])
def update_work_center(work_center: WorkCenterUpdate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.update_work_center(db, work_center),
        message="Work center updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/{work_center_id}", dependencies=[Depends(allow_manager)])
def delete_work_center(work_center_id: UUID, db: Session = Depends(get_db)):
    return crud.delete_work_center(db, work_center_id)


# ---------------- Activity assignments ----------------

@router.post("/{work_center_id}/activities", dependencies=[Depends(allow_manager)])
def assign_activity(
        work_center_id: UUID,
        assignment: WorkCenterActivityCreate,
        db: Session = Depends(get_db)):
    return success_response(
        data=crud.assign_activity(db, work_center_id, assignment),
        message="Activity assigned successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/{work_center_id}/activities/{assignment_id}", dependencies=[Depends(allow_manager)])
def update_assignment(
        work_center_id: UUID,
        assignment_id: UUID,
        assignment: WorkCenterActivityUpdate,
        db: Session = Depends(get_db)):
    return success_response(
        data=crud.update_assignment(db, work_center_id, assignment_id, assignment),
        message="Activity assignment updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/{work_center_id}/activities/{activity_id}", dependencies=[Depends(allow_manager)])
def unassign_activity(work_center_id: UUID, activity_id: UUID, db: Session = Depends(get_db)):
    return crud.unassign_activity(db, work_center_id, activity_id)
