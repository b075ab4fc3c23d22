from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_manager, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import Lookup
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.production import activities_crud as crud
from ...schemas.production.work_centers_schemas import (
    ActivityCreate, ActivityListResponse, ActivityOut, ActivityRequest, ActivityUpdate)

router = APIRouter(
    prefix="/api/activities",
    tags=["activities"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/all", response_model=ActivityListResponse)
def get_activities(
        params: ActivityRequest = Depends(),
        db: Session = Depends(get_db)):
    return crud.get_activities(db, params)


@router.get("/lookup", response_model=List[Lookup])
def activity_lookup(db: Session = Depends(get_db)):
    return crud.get_activity_lookup(db)


@router.get("/{activity_id}", response_model=ActivityOut)
def get_activity(activity_id: UUID, db: Session = Depends(get_db)):
    return ActivityOut.model_validate(crud.get_activity_by_id(db, activity_id))


@router.post("/", dependencies=[Depends(allow_manager)])
def create_activity(activity: ActivityCreate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.create_activity(db, activity),
        message="Activity created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/", dependencies=[Depends(allow_manager)])
def update_activity(activity: ActivityUpdate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.update_activity(db, activity),
        message="Activity updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/{activity_id}", dependencies=[Depends(allow_manager)])
def delete_activity(activity_id: UUID, db: Session = Depends(get_db)):
    return crud.delete_activity(db, activity_id)
