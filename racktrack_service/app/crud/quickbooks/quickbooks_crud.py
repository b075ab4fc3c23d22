import secrets
from datetime import timedelta
from typing import Optional
from uuid import UUID
from dateutil import parser as date_parser
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken
from shared.helpers.datetime_helper import as_utc, utc_now
from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode
from shared.utils.logger import get_logger

from racktrack_service.util import quickbooks_client
from racktrack_service.util.quickbooks_client import QuickBooksApi, QuickBooksApiError, QuickBooksConfigError
from ...enum.inventory_enum import ProductType
from ...models.inventory.products import Product
from ...models.quickbooks.qb_connections import QBConnection
from ...models.sales.customers import Customer
from ...schemas.quickbooks.quickbooks_schemas import DisconnectRequest, QBConnectionOut
from ..inventory.pallets_crud import user_uuid
from ..sales.customer_pos_crud import get_po_by_id
from ..sales.invoices_crud import get_invoice_by_id

logger = get_logger(__name__)

STATE_COOKIE = "qb_oauth_state"
STATE_COOKIE_MAX_AGE = 600
# cron refresh leaves tokens alone while they have longer than this to live
REFRESH_WINDOW = timedelta(minutes=30)
SYNCED_ITEM_TYPES = ["Inventory", "NonInventory"]


def config_error(e: QuickBooksConfigError):
    return error_response(
        message=str(e),
        status_code=str(AppStatusCode.QUICKBOOKS_CONFIG_ERROR),
        http_status=500
    )


def api_error(e: QuickBooksApiError):
    http_status = e.status_code if 400 <= e.status_code < 600 else 502
    return error_response(
        message=e.message,
        status_code=str(AppStatusCode.QUICKBOOKS_API_ERROR),
        http_status=http_status
    )


# ----------------------------------------------------------------------
# CONNECTION
# ----------------------------------------------------------------------

def start_connect():
    """Return the Intuit authorization URL and the state value to remember in a cookie."""
    state = secrets.token_urlsafe(32)
    try:
        url = quickbooks_client.get_authorization_url(state)
    except QuickBooksConfigError as e:
        return config_error(e)
    return url, state


def handle_callback(db: Session, code: Optional[str], state: Optional[str], realm_id: Optional[str],
                    error: Optional[str], expected_state: Optional[str]) -> dict:
    """Finish the OAuth flow. Returns the query parameters for the redirect back to the app."""
    if error:
        logger.warning(f"QuickBooks OAuth error: {error}")
        return {"error": "oauth_error"}

    if not code or not state or not realm_id:
        return {"error": "missing_params"}

    if not expected_state or not secrets.compare_digest(state, expected_state):
        return {"error": "invalid_state"}

    try:
        tokens = quickbooks_client.exchange_code_for_tokens(code)
        company = quickbooks_client.get_company_info(tokens.access_token, realm_id)
    except (QuickBooksApiError, QuickBooksConfigError) as e:
        logger.error(f"QuickBooks connection failed: {e}")
        return {"error": "connection_failed"}

    connection = db.query(QBConnection).filter(QBConnection.company_id == realm_id).first()
    if connection is None:
        connection = QBConnection(company_id=realm_id)
        db.add(connection)

    connection.company_name = company.company_name
    connection.realm_id = realm_id
    connection.base_url = quickbooks_client.get_base_url()
    connection.access_token = tokens.access_token
    connection.refresh_token = tokens.refresh_token
    connection.token_expires_at = tokens.expires_at
    connection.last_error = None
    connection.error_count = 0
    db.commit()

    logger.info(f"QuickBooks company {company.company_name} ({realm_id}) connected")
    return {"success": "connected"}


def connection_to_out(connection: QBConnection) -> QBConnectionOut:
    out = QBConnectionOut.model_validate(connection)
    out.is_token_expired = quickbooks_client.is_token_expired(connection.token_expires_at)
    return out


def get_connection_status(db: Session):
    connections = db.query(QBConnection).order_by(QBConnection.created_at.desc()).all()
    return [connection_to_out(c) for c in connections]


def disconnect(db: Session, req: DisconnectRequest):
    if not req.connection_id:
        return error_response(
            message="connection_id is required",
            status_code=str(AppStatusCode.REQUIRED_VALIDATION_ERROR),
            http_status=400
        )

    connection = db.query(QBConnection).filter(QBConnection.id == req.connection_id).first()
    if not connection:
        return error_response(
            message="QuickBooks connection not found",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=404
        )

    db.delete(connection)
    db.commit()
    logger.info(f"QuickBooks company {connection.company_name} disconnected")
    return {"message": "QuickBooks disconnected successfully"}


def refresh_all_tokens(db: Session):
    results = []
    now = utc_now()

    for connection in db.query(QBConnection).all():
        expires_at = as_utc(connection.token_expires_at)
        if expires_at and expires_at - now > REFRESH_WINDOW:
            results.append({
                "connection_id": connection.id,
                "company_name": connection.company_name,
                "status": "skipped",
                "message": "Token still valid",
            })
            continue

        try:
            tokens = quickbooks_client.refresh_access_token(connection.refresh_token)
        except (QuickBooksApiError, QuickBooksConfigError) as e:
            connection.error_count = (connection.error_count or 0) + 1
            connection.last_error = str(e)
            db.commit()
            logger.error(f"Token refresh failed for {connection.company_name}: {e}")
            results.append({
                "connection_id": connection.id,
                "company_name": connection.company_name,
                "status": "error",
                "message": str(e),
            })
            continue

        connection.access_token = tokens.access_token
        connection.refresh_token = tokens.refresh_token
        connection.token_expires_at = tokens.expires_at
        connection.last_sync_at = now
        connection.last_error = None
        connection.error_count = 0
        db.commit()
        results.append({
            "connection_id": connection.id,
            "company_name": connection.company_name,
            "status": "success",
            "message": "Token refreshed",
        })

    return {"results": results}


def get_active_connection(db: Session) -> QBConnection:
    connection = db.query(QBConnection).order_by(QBConnection.created_at.desc()).first()
    if not connection:
        return error_response(
            message="No QuickBooks connection found",
            status_code=str(AppStatusCode.QUICKBOOKS_NOT_CONNECTED),
            http_status=404
        )
    return connection


def api_for(db: Session, connection: QBConnection) -> QuickBooksApi:
    def persist_tokens(conn, tokens):
        db.commit()

    return QuickBooksApi(connection, on_tokens_refreshed=persist_tokens)


# ----------------------------------------------------------------------
# CUSTOMERS / ITEMS
# ----------------------------------------------------------------------

def _qb_time(value: Optional[str]):
    return date_parser.isoparse(value) if value else None


def map_address(address: Optional[dict]) -> Optional[dict]:
    if not address:
        return None
    return {
        "line1": address.get("Line1"),
        "line2": address.get("Line2"),
        "city": address.get("City"),
        "state": address.get("CountrySubDivisionCode"),
        "postal_code": address.get("PostalCode"),
        "country": address.get("Country"),
    }


def map_customer(record: dict) -> dict:
    full_name = f"{record.get('GivenName') or ''} {record.get('FamilyName') or ''}".strip()
    meta = record.get("MetaData") or {}
    return {
        "name": record.get("DisplayName") or record.get("CompanyName") or full_name,
        "display_name": record.get("DisplayName"),
        "company_name": record.get("CompanyName"),
        "email": (record.get("PrimaryEmailAddr") or {}).get("Address"),
        "phone": (record.get("PrimaryPhone") or {}).get("FreeFormNumber"),
        "mobile": (record.get("Mobile") or {}).get("FreeFormNumber"),
        "billing_address": map_address(record.get("BillAddr")),
        "shipping_address": map_address(record.get("ShipAddr")),
        "is_active": bool(record.get("Active", True)),
        "qb_created_time": _qb_time(meta.get("CreateTime")),
        "qb_last_updated_time": _qb_time(meta.get("LastUpdatedTime")),
        "qb_sync_token": record.get("SyncToken"),
    }


def map_item(record: dict) -> dict:
    return {
        "sku": record.get("Sku") or f"QB-{record['Id']}",
        "name": record.get("Name"),
        "description": record.get("Description"),
        "unit_of_measure": "Each",
        "cost_per_unit": record.get("PurchaseCost"),
        "sell_price": record.get("UnitPrice"),
        "min_stock_level": record.get("ReorderPoint"),
        "product_type": (ProductType.RAW_MATERIAL.value if record.get("Type") == "Inventory"
                         else ProductType.FINISHED_GOOD.value),
        "is_active": bool(record.get("Active", True)),
    }


def sync_customers(db: Session, max_results: int = 20):
    connection = get_active_connection(db)
    api = api_for(db, connection)
    try:
        result = api.query(f"select * from Customer maxresults {max_results}")
    except QuickBooksApiError as e:
        return api_error(e)
    except QuickBooksConfigError as e:
        return config_error(e)

    records = result.get("Customer", [])
    synced = 0
    errors = []
    now = utc_now()

    for record in records:
        qb_id = str(record.get("Id"))
        try:
            with db.begin_nested():
                data = map_customer(record)
                customer = db.query(Customer).filter(Customer.qb_customer_id == qb_id).first()
                if customer is None:
                    customer = Customer(qb_customer_id=qb_id)
                    db.add(customer)
                for key, value in data.items():
                    setattr(customer, key, value)
                customer.last_synced_at = now
            synced += 1
        except Exception as e:
            logger.error(f"Failed to sync QuickBooks customer {qb_id}: {e}")
            errors.append(f"Customer {qb_id}: {e}")

    connection.last_sync_at = now
    db.commit()
    logger.info(f"Synced {synced} of {len(records)} QuickBooks customers")
    return {"synced": synced, "total": len(records), "errors": errors}


def sync_items(db: Session, max_results: int = 20):
    connection = get_active_connection(db)
    api = api_for(db, connection)
    try:
        result = api.query(f"select * from Item maxresults {max_results}")
    except QuickBooksApiError as e:
        return api_error(e)
    except QuickBooksConfigError as e:
        return config_error(e)

    records = result.get("Item", [])
    created = updated = skipped = 0
    errors = []

    for record in records:
        if record.get("Type") not in SYNCED_ITEM_TYPES:
            skipped += 1
            continue

        qb_id = str(record.get("Id"))
        try:
            with db.begin_nested():
                data = map_item(record)
                product = db.query(Product).filter(Product.qb_item_id == qb_id).first()
                if product is None:
                    product = db.query(Product).filter(Product.sku == data["sku"]).first()
                is_new = product is None
                if is_new:
                    db.add(Product(qb_item_id=qb_id, **data))
                else:
                    for key, value in data.items():
                        setattr(product, key, value)
                    product.qb_item_id = qb_id
            # counted only once the savepoint has flushed
            if is_new:
                created += 1
            else:
                updated += 1
        except Exception as e:
            logger.error(f"Failed to sync QuickBooks item {qb_id}: {e}")
            errors.append(f"Item {qb_id}: {e}")

    connection.last_sync_at = utc_now()
    db.commit()
    logger.info(f"QuickBooks items: {created} created, {updated} updated, {skipped} skipped")
    return {"created": created, "updated": updated, "skipped": skipped,
            "total": len(records), "errors": errors}


# ----------------------------------------------------------------------
# ESTIMATES / INVOICES
# ----------------------------------------------------------------------

def _require_synced_customer(customer: Optional[Customer]) -> str:
    if customer is None or not customer.qb_customer_id:
        return error_response(
            message="Customer must be synced to QuickBooks first",
            status_code=str(AppStatusCode.QUICKBOOKS_NOT_SYNCED),
            http_status=400
        )
    return customer.qb_customer_id


def _sales_line(index: int, description: str, amount, quantity, unit_price, product: Optional[Product]) -> dict:
    return {
        "Id": str(index),
        "LineNum": index,
        "Description": description or (product.name if product else None),
        "Amount": amount,
        "DetailType": "SalesItemLineDetail",
        "SalesItemLineDetail": {
            "ItemRef": {"value": (product.qb_item_id if product and product.qb_item_id else "1")},
            "Qty": quantity,
            "UnitPrice": unit_price,
        },
    }


def _custom_field(definition_id: str, name: str, value: str) -> dict:
    return {"DefinitionId": definition_id, "Name": name, "Type": "StringType", "StringValue": value}


def build_estimate_payload(po, qb_customer_id: str) -> dict:
    payload = {
        "CustomerRef": {"value": qb_customer_id},
        "TxnDate": po.po_date.isoformat() if po.po_date else None,
        "ExpirationDate": po.due_date.isoformat() if po.due_date else None,
        "DocNumber": po.po_number,
        "Line": [
            _sales_line(index, item.description, item.total_amount, item.quantity,
                        item.unit_price, item.product)
            for index, item in enumerate(po.items, start=1)
        ],
        "CustomField": [
            _custom_field("1", "PO Number", po.po_number),
            _custom_field("2", "Production Status",
                          po.production_status.replace("_", " ").upper()),
            _custom_field("3", "Production Due",
                          po.due_date.isoformat() if po.due_date else ""),
        ],
    }

    notes = []
    if po.description:
        notes.append(po.description)
    if po.production_notes:
        notes.append(f"Production Notes: {po.production_notes}")
    if notes:
        payload["PrivateNote"] = "\n".join(notes)
    return payload


def build_invoice_payload(invoice, qb_customer_id: str) -> dict:
    payload = {
        "CustomerRef": {"value": qb_customer_id},
        "TxnDate": invoice.invoice_date.isoformat() if invoice.invoice_date else None,
        "DueDate": invoice.due_date.isoformat() if invoice.due_date else None,
        "DocNumber": invoice.invoice_number,
        "Line": [
            _sales_line(index, line.description, line.amount, line.quantity,
                        line.unit_price, line.product)
            for index, line in enumerate(invoice.lines, start=1)
        ],
    }
    if invoice.notes:
        payload["PrivateNote"] = invoice.notes
    return payload


def _push(api: QuickBooksApi, entity: str, payload: dict, existing_id: Optional[str]) -> dict:
    """Create or sparse-update a QuickBooks sales document; returns the saved entity."""
    key = entity.capitalize()
    if existing_id:
        current = api.get(f"/{entity}/{existing_id}").get(key, {})
        payload = {**payload, "Id": existing_id, "SyncToken": current.get("SyncToken", "0")}
    return api.post(f"/{entity}", payload).get(key, {})


def sync_estimate(db: Session, po_id: UUID, current_user: UserToken = None):
    po = get_po_by_id(db, po_id)
    qb_customer_id = _require_synced_customer(po.customer)
    connection = get_active_connection(db)
    api = api_for(db, connection)

    try:
        estimate = _push(api, "estimate", build_estimate_payload(po, qb_customer_id), po.qb_estimate_id)
    except QuickBooksApiError as e:
        return api_error(e)
    except QuickBooksConfigError as e:
        return config_error(e)

    po.qb_estimate_id = str(estimate.get("Id"))
    po.qb_estimate_number = estimate.get("DocNumber")
    po.qb_sync_token = estimate.get("SyncToken")
    po.qb_customer_id = qb_customer_id
    if current_user:
        po.updated_by = user_uuid(current_user)
    db.commit()

    logger.info(f"PO {po.po_number} synced to QuickBooks estimate {po.qb_estimate_id}")
    return {"success": True, "estimate_id": po.qb_estimate_id,
            "estimate_number": po.qb_estimate_number}


def sync_invoice(db: Session, invoice_id: UUID):
    invoice = get_invoice_by_id(db, invoice_id)
    qb_customer_id = _require_synced_customer(invoice.customer)
    connection = get_active_connection(db)
    api = api_for(db, connection)

    try:
        saved = _push(api, "invoice", build_invoice_payload(invoice, qb_customer_id), invoice.qb_invoice_id)
    except QuickBooksApiError as e:
        return api_error(e)
    except QuickBooksConfigError as e:
        return config_error(e)

    invoice.qb_invoice_id = str(saved.get("Id"))
    invoice.qb_sync_token = saved.get("SyncToken")
    db.commit()

    logger.info(f"Invoice {invoice.invoice_number} synced to QuickBooks invoice {invoice.qb_invoice_id}")
    return {"success": True, "invoice_id": invoice.qb_invoice_id, "doc_number": saved.get("DocNumber")}
