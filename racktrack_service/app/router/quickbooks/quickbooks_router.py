import secrets
from typing import List, Optional
from urllib.parse import urlencode
from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from shared.core.auth import allow_admin, allow_manager, validate_current_token
from shared.core.config import settings
from shared.core.database import get_db
from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.quickbooks import quickbooks_crud as crud
from ...schemas.quickbooks.quickbooks_schemas import (
    CustomerSyncResult, DisconnectRequest, ItemSyncResult, QBConnectionOut, TokenRefreshResponse)

router = APIRouter(prefix="/api/quickbooks", tags=["quickbooks"])


@router.get("/connect", dependencies=[Depends(allow_admin)])
def connect():
    url, state = crud.start_connect()
    response = RedirectResponse(url, status_code=307)
    response.set_cookie(
        crud.STATE_COOKIE,
        state,
        max_age=crud.STATE_COOKIE_MAX_AGE,
        httponly=True,
        secure=not settings.is_sandbox,
        samesite="lax",
    )
    return response


@router.get("/callback")
def callback(
        request: Request,
        code: Optional[str] = None,
        state: Optional[str] = None,
        realm_id: Optional[str] = Query(None, alias="realmId"),
        error: Optional[str] = None,
        db: Session = Depends(get_db)):
    params = crud.handle_callback(
        db, code, state, realm_id, error,
        expected_state=request.cookies.get(crud.STATE_COOKIE),
    )
    response = RedirectResponse(
        f"{settings.APP_BASE_URL}/admin/quickbooks?{urlencode(params)}", status_code=307)
    if "success" in params:
        response.delete_cookie(crud.STATE_COOKIE)
    return response


@router.get("/status", response_model=List[QBConnectionOut],
            dependencies=[Depends(validate_current_token)])
def connection_status(db: Session = Depends(get_db)):
    return crud.get_connection_status(db)


@router.post("/disconnect", dependencies=[Depends(allow_admin)])
def disconnect(req: DisconnectRequest, db: Session = Depends(get_db)):
    return crud.disconnect(db, req)


@router.post("/refresh-token", response_model=TokenRefreshResponse)
def refresh_tokens(
        authorization: Optional[str] = Header(None),
        db: Session = Depends(get_db)):
    expected = f"Bearer {settings.CRON_SECRET}"
    if not settings.CRON_SECRET or not authorization or not secrets.compare_digest(authorization, expected):
        return error_response(
            message="Unauthorized",
            status_code=str(AppStatusCode.AUTHENTICATION_UNAUTHORIZED_ACCESS),
            http_status=401
        )
    return crud.refresh_all_tokens(db)


@router.post("/sync/customers", response_model=CustomerSyncResult, dependencies=[Depends(allow_manager)])
def sync_customers(
        max_results: int = Query(20, ge=1, le=1000),
        db: Session = Depends(get_db)):
    return crud.sync_customers(db, max_results)


@router.post("/sync/items", response_model=ItemSyncResult, dependencies=[Depends(allow_manager)])
def sync_items(
        max_results: int = Query(20, ge=1, le=1000),
        db: Session = Depends(get_db)):
    return crud.sync_items(db, max_results)
