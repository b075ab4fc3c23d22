from enum import Enum


class PalletStatus(str, Enum):
    RECEIVING = "receiving"
    IN_TRANSIT = "in_transit"
    STORED = "stored"
    PICKING = "picking"
    STAGED = "staged"
    SHIPPED = "shipped"


class MovementType(str, Enum):
    RECEIVE = "receive"
    MOVE = "move"
    PICK = "pick"
    SHIP = "ship"
    ADJUST = "adjust"
    TRANSFER = "transfer"
    RETURN = "return"


class QualityStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    QUARANTINE = "quarantine"


class ProductType(str, Enum):
    RAW_MATERIAL = "raw_material"
    FINISHED_GOOD = "finished_good"


DEFAULT_ZONE = "storage"
