from enum import Enum


class CartStatusType(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class OrderStatusType(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class InboundMessageType(str, Enum):
    SCAN = "scan"
    HARDWARE_STATUS = "hardware_status"
    PING = "ping"
    UPDATE_BUDGET = "update_budget"


class OutboundMessageType(str, Enum):
    CONNECTION_STATUS = "connection_status"
    ERROR = "error"
    SCAN_SUCCESS = "scan_success"
    PRODUCT_SCANNED = "product_scanned"
    HARDWARE_STATUS = "hardware_status"
    PONG = "pong"
    HEARTBEAT = "heartbeat"
    BUDGET_UPDATED = "budget_updated"
