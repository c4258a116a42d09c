from .auth_store import AuthStore
from .config import ClientConfig, ConfigError, load_config
from .exceptions import (
    ApiError,
    ClientValidationError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    SessionRequiredError,
    TransportError,
    UnauthorizedError,
    ValidationError,
    ValidationIssue,
)
from .http_client import HttpClient
from .models import (
    InventoryActionType,
    LoginResponse,
    PurchaseOrderStatus,
    SessionData,
    SessionUser,
    TaxType,
    UserRole,
)
from .models_catalog import CategoryRead, ProductCreate, ProductRead, ProductUpdate, UnitRead
from .models_purchasing import (
    PurchaseOrderCreate,
    PurchaseOrderItemCreate,
    PurchaseOrderItemRead,
    PurchaseOrderRead,
    PurchaseOrderUpdate,
    ReceiveStockCreate,
    SupplierRead,
)
from .purchasing import (
    build_receive_payload,
    line_total,
    order_total,
    remaining_to_receive,
    validate_receive_quantity,
)
from .session import ApiSession
from .tracing import TraceContext

__all__ = [
    "ApiError",
    "ApiSession",
    "AuthStore",
    "CategoryRead",
    "ClientConfig",
    "ClientValidationError",
    "ConfigError",
    "ConflictError",
    "ForbiddenError",
    "HttpClient",
    "InventoryActionType",
    "LoginResponse",
    "NotFoundError",
    "ProductCreate",
    "ProductRead",
    "ProductUpdate",
    "PurchaseOrderCreate",
    "PurchaseOrderItemCreate",
    "PurchaseOrderItemRead",
    "PurchaseOrderRead",
    "PurchaseOrderStatus",
    "PurchaseOrderUpdate",
    "ReceiveStockCreate",
    "SessionData",
    "SessionRequiredError",
    "SessionUser",
    "SupplierRead",
    "TaxType",
    "TraceContext",
    "TransportError",
    "UnauthorizedError",
    "UnitRead",
    "UserRole",
    "ValidationError",
    "ValidationIssue",
    "build_receive_payload",
    "line_total",
    "load_config",
    "order_total",
    "remaining_to_receive",
    "validate_receive_quantity",
]
