from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_editor, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.production import production_issues_crud as crud
from ...schemas.production.production_issues_schemas import (
    IssueCommentCreate, IssueCreate, IssueListResponse, IssueOut, IssueOverview, IssueRequest,
    IssueUpdate)

router = APIRouter(
    prefix="/api/production-issues",
    tags=["production issues"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/all", response_model=IssueListResponse)
def get_issues(
        params: IssueRequest = Depends(),
        db: Session = Depends(get_db)):
    return crud.get_issues(db, params)


@router.get("/overview", response_model=IssueOverview)
def issue_overview(db: Session = Depends(get_db)):
    return crud.get_issue_overview(db)


@router.get("/{issue_id}", response_model=IssueOut)
def get_issue(issue_id: UUID, db: Session = Depends(get_db)):
    return crud.get_issue(db, issue_id)


@router.post("/")
def create_issue(
        issue: IssueCreate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_editor)):
    return success_response(
        data=crud.create_issue(db, issue, current_user),
        message="Production issue reported successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/")
def update_issue(
        issue: IssueUpdate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_editor)):
    return success_response(
        data=crud.update_issue(db, issue, current_user),
        message="Production issue updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.post("/{issue_id}/comments")
def add_comment(
        issue_id: UUID,
        comment: IssueCommentCreate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_editor)):
    return success_response(
        data=crud.add_comment(db, issue_id, comment, current_user),
        message="Comment added successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )
