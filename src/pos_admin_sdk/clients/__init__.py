from .auth import AuthClient
from .base import BaseClient, ResourceClient
from .catalog_client import CategoriesClient, ProductsClient, ProductUnitConversionsClient, UnitsClient
from .purchasing_client import PurchaseOrdersClient, StockReceivesClient, SuppliersClient
from .settings_client import (
    AuthLogsClient,
    BusinessProfileClient,
    CountersClient,
    DiscountSettingsClient,
    ReceiptSettingsClient,
    UsersClient,
    VatSettingsClient,
)
from .stock_client import BadOrdersClient, InventoryTransactionsClient, StockAdjustmentsClient

__all__ = [
    "AuthClient",
    "AuthLogsClient",
    "BadOrdersClient",
    "BaseClient",
    "BusinessProfileClient",
    "CategoriesClient",
    "CountersClient",
    "DiscountSettingsClient",
    "InventoryTransactionsClient",
    "ProductUnitConversionsClient",
    "ProductsClient",
    "PurchaseOrdersClient",
    "ReceiptSettingsClient",
    "ResourceClient",
    "StockAdjustmentsClient",
    "StockReceivesClient",
    "SuppliersClient",
    "UnitsClient",
    "UsersClient",
    "VatSettingsClient",
]
