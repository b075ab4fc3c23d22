from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_editor, allow_manager, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.production import jobs_crud as crud
from ...schemas.production.jobs_schemas import (
    JobCreate, JobListResponse, JobOut, JobRequest, JobRouteCreate, JobUpdate)

router = APIRouter(
    prefix="/api/jobs",
    tags=["jobs"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/all", response_model=JobListResponse)
def get_jobs(
        params: JobRequest = Depends(),
        db: Session = Depends(get_db)):
    return crud.get_jobs(db, params)


@router.get("/{job_id}", response_model=JobOut)
def get_job(job_id: UUID, db: Session = Depends(get_db)):
    return crud.get_job(db, job_id)


@router.get("/{job_id}/materials")
def get_material_consumption(job_id: UUID, db: Session = Depends(get_db)):
    return crud.get_material_consumption(db, job_id)


@router.post("/")
def create_job(
        job: JobCreate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_editor)):
    return success_response(
        data=crud.create_job(db, job, current_user),
        message="Job created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/", dependencies=[Depends(allow_editor)])
def update_job(job: JobUpdate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.update_job(db, job),
        message="Job updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/{job_id}", dependencies=[Depends(allow_manager)])
def delete_job(job_id: UUID, db: Session = Depends(get_db)):
    return crud.delete_job(db, job_id)


@router.post("/{job_id}/generate-routes", dependencies=[Depends(allow_editor)])
def generate_routes(job_id: UUID, db: Session = Depends(get_db)):
    return success_response(
        data=crud.generate_routes(db, job_id),
        message="Job routes generated successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.post("/{job_id}/routes", dependencies=[Depends(allow_editor)])
def add_route(job_id: UUID, route: JobRouteCreate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.add_route(db, job_id, route),
        message="Job route added successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )
