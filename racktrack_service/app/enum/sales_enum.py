from enum import Enum


class POStatus(str, Enum):
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    SENT_TO_PRODUCTION = "sent_to_production"
    IN_PRODUCTION = "in_production"
    ON_HOLD = "on_hold"
    QUALITY_CHECK = "quality_check"
    READY_FOR_INVOICE = "ready_for_invoice"
    INVOICED = "invoiced"
    CANCELLED = "cancelled"


PO_STATUS_TRANSITIONS = {
    "draft": ["pending_approval", "cancelled"],
    "pending_approval": ["approved", "cancelled"],
    "approved": ["sent_to_production", "cancelled"],
    "sent_to_production": ["in_production", "on_hold", "cancelled"],
    "in_production": ["quality_check", "on_hold", "cancelled"],
    "on_hold": ["in_production", "cancelled"],
    "quality_check": ["ready_for_invoice", "in_production"],
    "ready_for_invoice": ["invoiced"],
    "invoiced": [],
    "cancelled": [],
}

# a PO in one of these states cannot be deleted
PO_LOCKED_STATUSES = ["in_production", "invoiced"]


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    VIEWED = "viewed"
    PAID = "paid"
    OVERDUE = "overdue"
    VOID = "void"
