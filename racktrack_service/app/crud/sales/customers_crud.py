from uuid import UUID
from sqlalchemy import or_
from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode

from ...models.sales.customer_pos import CustomerPO
from ...models.sales.customers import Customer
from ...schemas.sales.customers_schemas import (
    CustomerCreate, CustomerOut, CustomerRequest, CustomerUpdate)


def build_customer_filters(params: CustomerRequest):
    filters = [Customer.is_deleted == False]

    if params.is_active is not None:
        filters.append(Customer.is_active == params.is_active)

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(Customer.name.ilike(search_term),
                           Customer.company_name.ilike(search_term),
                           Customer.email.ilike(search_term)))

    return filters


def get_customers(db: Session, params: CustomerRequest):
    query = db.query(Customer).filter(*build_customer_filters(params))
    total = query.count()
    customers = (
        query.order_by(Customer.name.asc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return {"customers": [CustomerOut.model_validate(c) for c in customers], "total": total}


def get_customer_by_id(db: Session, customer_id: UUID) -> Customer:
    customer = (
        db.query(Customer)
        .filter(Customer.id == customer_id, Customer.is_deleted == False)
        .first()
    )
    if not customer:
        return error_response(
            message="Customer not found",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=404
        )
    return customer


def create_customer(db: Session, customer: CustomerCreate):
    db_customer = Customer(**customer.model_dump())
    db.add(db_customer)
    db.commit()
    db.refresh(db_customer)
    return CustomerOut.model_validate(db_customer)


def update_customer(db: Session, customer: CustomerUpdate):
    db_customer = get_customer_by_id(db, customer.id)

    for key, value in customer.model_dump(exclude_unset=True, exclude={"id"}).items():
        setattr(db_customer, key, value)

    db.commit()
    db.refresh(db_customer)
    return CustomerOut.model_validate(db_customer)


def delete_customer(db: Session, customer_id: UUID):
    db_customer = get_customer_by_id(db, customer_id)

    if db.query(CustomerPO.id).filter(CustomerPO.customer_id == customer_id).first():
        return error_response(
            message="Cannot delete customer with purchase orders",
            status_code=str(AppStatusCode.DELETE_RESTRICTED),
            http_status=400
        )

    db_customer.is_deleted = True
    db_customer.is_active = False
    db.commit()
    return {"message": "Customer deleted successfully"}


def get_customer_lookup(db: Session):
    return (
        db.query(Customer.id, Customer.name)
        .filter(Customer.is_deleted == False, Customer.is_active == True)
        .order_by(Customer.name.asc())
        .all()
    )
