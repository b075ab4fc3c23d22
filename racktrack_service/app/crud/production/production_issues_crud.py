from uuid import UUID
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken
from shared.helpers.datetime_helper import utc_now
from shared.helpers.json_response_helper import error_response
from shared.helpers.sequence_helper import next_number
from shared.utils.app_status_code import AppStatusCode
from shared.utils.logger import get_logger

from ...enum.inventory_enum import ProductType
from ...enum.production_enum import IssueSeverity, IssueStatus
from ...models.production.production_issues import ProductionIssue, ProductionIssueComment
from ...schemas.production.production_issues_schemas import (
    IssueCommentCreate, IssueCommentOut, IssueCreate, IssueOut, IssueRequest, IssueUpdate)
from ..inventory.pallets_crud import user_uuid
from ..inventory.products_crud import get_product_by_id

logger = get_logger(__name__)

OPEN_ISSUE_STATUSES = [IssueStatus.OPEN.value, IssueStatus.INVESTIGATING.value]


def generate_issue_number(db: Session) -> str:
    return next_number(db, ProductionIssue.issue_number, "ISS-", 5)


def build_issue_filters(params: IssueRequest):
    filters = []

    if params.status:
        filters.append(ProductionIssue.status == params.status)

    if params.severity:
        filters.append(ProductionIssue.severity == params.severity)

    if params.issue_type:
        filters.append(ProductionIssue.issue_type == params.issue_type)

    if params.work_center_id:
        filters.append(ProductionIssue.work_center_id == params.work_center_id)

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(ProductionIssue.title.ilike(search_term),
                           ProductionIssue.issue_number.ilike(search_term)))

    return filters


def get_issues(db: Session, params: IssueRequest):
    query = db.query(ProductionIssue).filter(*build_issue_filters(params))
    total = query.count()
    issues = (
        query.order_by(ProductionIssue.issue_number.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return {"issues": [IssueOut.model_validate(i) for i in issues], "total": total}


def get_issue_by_id(db: Session, issue_id: UUID) -> ProductionIssue:
    issue = db.query(ProductionIssue).filter(ProductionIssue.id == issue_id).first()
    if not issue:
        return error_response(
            message="Production issue not found",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=404
        )
    return issue


def get_issue(db: Session, issue_id: UUID):
    return IssueOut.model_validate(get_issue_by_id(db, issue_id))


def create_issue(db: Session, issue: IssueCreate, current_user: UserToken):
    if issue.material_product_id:
        material = get_product_by_id(db, issue.material_product_id)
        if material.product_type != ProductType.RAW_MATERIAL.value:
            return error_response(
                message="Only raw materials can be linked to a production issue",
                status_code=str(AppStatusCode.INVALID_INPUT),
                http_status=400
            )

    db_issue = ProductionIssue(
        **issue.model_dump(),
        issue_number=generate_issue_number(db),
        status=IssueStatus.OPEN.value,
        reported_by=user_uuid(current_user),
    )
    db.add(db_issue)
    db.commit()
    db.refresh(db_issue)

    level = logger.warning if issue.severity == IssueSeverity.CRITICAL.value else logger.info
    level(f"Production issue {db_issue.issue_number} reported: {db_issue.title}")
    return IssueOut.model_validate(db_issue)


def update_issue(db: Session, issue: IssueUpdate, current_user: UserToken):
    db_issue = get_issue_by_id(db, issue.id)
    update_data = issue.model_dump(exclude_unset=True, exclude={"id"})

    for key, value in update_data.items():
        setattr(db_issue, key, value)

    new_status = update_data.get("status")
    if new_status == IssueStatus.RESOLVED.value:
        db_issue.resolved_by = user_uuid(current_user)
        db_issue.resolved_at = utc_now()
    elif new_status in OPEN_ISSUE_STATUSES:
        db_issue.resolved_by = None
        db_issue.resolved_at = None

    db.commit()
    db.refresh(db_issue)
    return IssueOut.model_validate(db_issue)


def add_comment(db: Session, issue_id: UUID, comment: IssueCommentCreate, current_user: UserToken):
    get_issue_by_id(db, issue_id)

    db_comment = ProductionIssueComment(
        issue_id=issue_id,
        comment=comment.comment,
        created_by=user_uuid(current_user),
    )
    db.add(db_comment)
    db.commit()
    db.refresh(db_comment)
    return IssueCommentOut.model_validate(db_comment)


def get_issue_overview(db: Session):
    rows = (
        db.query(ProductionIssue.status, func.count(ProductionIssue.id))
        .group_by(ProductionIssue.status)
        .all()
    )
    by_status = {status: count for status, count in rows}
    critical_open = (
        db.query(func.count(ProductionIssue.id))
        .filter(ProductionIssue.severity == IssueSeverity.CRITICAL.value,
                ProductionIssue.status.in_(OPEN_ISSUE_STATUSES))
        .scalar()
    )
    return {
        "total": sum(by_status.values()),
        "open": by_status.get(IssueStatus.OPEN.value, 0),
        "investigating": by_status.get(IssueStatus.INVESTIGATING.value, 0),
        "resolved": by_status.get(IssueStatus.RESOLVED.value, 0),
        "closed": by_status.get(IssueStatus.CLOSED.value, 0),
        "critical_open": critical_open,
    }
