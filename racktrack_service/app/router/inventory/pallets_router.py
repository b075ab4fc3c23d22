from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_editor, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.inventory import pallets_crud as crud
from ...schemas.inventory.inventory_schemas import MovementOut
from ...schemas.inventory.pallets_schemas import (
    PalletCreate, PalletListResponse, PalletMoveRequest, PalletOut, PalletRequest, PalletUpdate)

router = APIRouter(
    prefix="/api/pallets",
    tags=["pallets"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/all", response_model=PalletListResponse)
def get_pallets(
        params: PalletRequest = Depends(),
        db: Session = Depends(get_db)):
    return crud.get_pallets(db, params)


@router.get("/{pallet_id}", response_model=PalletOut)
def get_pallet(pallet_id: UUID, db: Session = Depends(get_db)):
    return crud.get_pallet(db, pallet_id)


@router.get("/{pallet_id}/history", response_model=List[MovementOut])
def get_pallet_history(pallet_id: UUID, db: Session = Depends(get_db)):
    return crud.get_pallet_history(db, pallet_id)


@router.post("/")
def create_pallet(
        pallet: PalletCreate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_editor)):
    return success_response(
        data=crud.create_pallet(db, pallet, current_user),
        message="Pallet created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/", dependencies=[Depends(allow_editor)])
def update_pallet(pallet: PalletUpdate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.update_pallet(db, pallet),
        message="Pallet updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.post("/{pallet_id}/move")
def move_pallet(
        pallet_id: UUID,
        move: PalletMoveRequest,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_editor)):
    return success_response(
        data=crud.move_pallet(db, pallet_id, move, current_user),
        message="Pallet moved successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.post("/{pallet_id}/ship")
def ship_pallet(
        pallet_id: UUID,
        notes: Optional[str] = Body(None, embed=True),
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_editor)):
    return success_response(
        data=crud.ship_pallet(db, pallet_id, current_user, notes),
        message="Pallet shipped successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )
