from uuid import UUID
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode

from ...enum.production_enum import BOMStatus
from ...models.inventory.inventory_items import InventoryItem
from ...models.inventory.products import Product
from ...models.production.boms import ProductBOM
from ...schemas.inventory.products_schemas import (
    ProductCreate, ProductOut, ProductRequest, ProductUpdate)


def _on_hand_subquery(db: Session):
    return (
        db.query(
            InventoryItem.product_id.label("product_id"),
            func.coalesce(func.sum(InventoryItem.quantity), 0).label("on_hand"),
        )
        .group_by(InventoryItem.product_id)
        .subquery()
    )


def _to_out(product: Product, on_hand, active_bom_id=None) -> ProductOut:
    out = ProductOut.model_validate(product)
    out.quantity_on_hand = float(on_hand or 0)
    out.active_bom_id = active_bom_id
    return out


def get_quantity_on_hand(db: Session, product_id: UUID) -> float:
    total = (
        db.query(func.coalesce(func.sum(InventoryItem.quantity), 0))
        .filter(InventoryItem.product_id == product_id)
        .scalar()
    )
    return float(total or 0)


def build_product_filters(params: ProductRequest):
    filters = []

    if params.category:
        filters.append(Product.category == params.category)

    if params.product_type:
        filters.append(Product.product_type == params.product_type)

    if params.is_active is not None:
        filters.append(Product.is_active == params.is_active)

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(Product.sku.ilike(search_term),
                           Product.name.ilike(search_term),
                           Product.barcode.ilike(search_term)))

    return filters


def get_products(db: Session, params: ProductRequest):
    on_hand = _on_hand_subquery(db)
    query = (
        db.query(Product, on_hand.c.on_hand)
        .outerjoin(on_hand, on_hand.c.product_id == Product.id)
        .filter(*build_product_filters(params))
    )
    total = query.count()
    rows = (
        query.order_by(Product.name.asc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return {"products": [_to_out(p, qty) for p, qty in rows], "total": total}


def get_product_by_id(db: Session, product_id: UUID) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        return error_response(
            message="Product not found",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=404
        )
    return product


def get_product_detail(db: Session, product_id: UUID):
    product = get_product_by_id(db, product_id)
    active_bom = (
        db.query(ProductBOM.id)
        .filter(ProductBOM.product_id == product_id,
                ProductBOM.status == BOMStatus.ACTIVE.value)
        .first()
    )
    return _to_out(product, get_quantity_on_hand(db, product_id),
                   active_bom.id if active_bom else None)


def _check_duplicate_sku(db: Session, sku: str, exclude_id: UUID = None):
    query = db.query(Product).filter(func.lower(Product.sku) == sku.lower())
    if exclude_id:
        query = query.filter(Product.id != exclude_id)
    if query.first():
        return error_response(
            message=f"Product with SKU '{sku}' already exists",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR),
            http_status=400
        )


def create_product(db: Session, product: ProductCreate):
    _check_duplicate_sku(db, product.sku)

    db_product = Product(**product.model_dump())
    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    return _to_out(db_product, 0)


def update_product(db: Session, product: ProductUpdate):
    db_product = get_product_by_id(db, product.id)
    update_data = product.model_dump(exclude_unset=True, exclude={"id"})

    if update_data.get("sku"):
        _check_duplicate_sku(db, update_data["sku"], exclude_id=db_product.id)

    for key, value in update_data.items():
        setattr(db_product, key, value)

    db.commit()
    db.refresh(db_product)
    return _to_out(db_product, get_quantity_on_hand(db, db_product.id))


def delete_product(db: Session, product_id: UUID):
    db_product = get_product_by_id(db, product_id)

    if get_quantity_on_hand(db, product_id) > 0:
        return error_response(
            message="Cannot delete product while stock is on hand",
            status_code=str(AppStatusCode.DELETE_RESTRICTED),
            http_status=400
        )

    db_product.is_active = False
    db.commit()
    return {"message": "Product deleted successfully"}


def get_product_lookup(db: Session, product_type: str = None):
    query = db.query(Product.id, Product.name).filter(Product.is_active == True)
    if product_type:
        query = query.filter(Product.product_type == product_type)
    return query.order_by(Product.name.asc()).all()


def get_low_stock_products(db: Session):
    on_hand = _on_hand_subquery(db)
    quantity = func.coalesce(on_hand.c.on_hand, 0)
    rows = (
        db.query(Product, quantity)
        .outerjoin(on_hand, on_hand.c.product_id == Product.id)
        .filter(Product.is_active == True,
                Product.min_stock_level.isnot(None),
                quantity < Product.min_stock_level)
        .order_by(Product.name.asc())
        .all()
    )
    return [_to_out(p, qty) for p, qty in rows]


def get_categories(db: Session):
    rows = (
        db.query(Product.category)
        .filter(Product.category.isnot(None), Product.category != "")
        .distinct()
        .order_by(Product.category.asc())
        .all()
    )
    return [category for (category,) in rows]
