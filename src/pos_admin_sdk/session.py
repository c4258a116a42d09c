from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from .auth_store import AuthStore
from .clients.auth import AuthClient
from .clients.catalog_client import CategoriesClient, ProductsClient, ProductUnitConversionsClient, UnitsClient
from .clients.purchasing_client import PurchaseOrdersClient, StockReceivesClient, SuppliersClient
from .clients.settings_client import (
    AuthLogsClient,
    BusinessProfileClient,
    CountersClient,
    DiscountSettingsClient,
    ReceiptSettingsClient,
    UsersClient,
    VatSettingsClient,
)
from .clients.stock_client import BadOrdersClient, InventoryTransactionsClient, StockAdjustmentsClient
from .config import ClientConfig
from .exceptions import SessionRequiredError
from .http_client import HttpClient
from .models import LoginResponse, SessionData, SessionUser, role_label
from .tracing import TraceContext


@dataclass
class ApiSession:
    config: ClientConfig
    auth_store: AuthStore | None = None
    trace: TraceContext | None = None
    token: str | None = None
    user: SessionUser | None = None
    _http_client: HttpClient | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.auth_store = self.auth_store or AuthStore()
        self.trace = self.trace or TraceContext()
        stored = self.auth_store.load()
        if stored and not self.token:
            self.token = stored.token
            self.user = stored.user

    @property
    def http(self) -> HttpClient:
        # shared by every resource client below
        if self._http_client is None:
            self._http_client = HttpClient(config=self.config, trace=self.trace)
        return self._http_client

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def role(self) -> str | None:
        return role_label(self.user.role) if self.user else None

    def is_expired(self, now: datetime | None = None) -> bool:
        if not self.user or not self.user.expires:
            return False
        expires = self.user.expires
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        current = now or datetime.now(timezone.utc)
        if current.tzinfo is None:
            current = current.replace(tzinfo=timezone.utc)
        return current >= expires

    def require_token(self) -> str:
        if not self.token:
            raise SessionRequiredError.missing()
        return self.token

    def login(self, email: str, password: str) -> LoginResponse:
        response = AuthClient(http=self.http).login(email, password)
        self.establish(response)
        return response

    def establish(self, response: LoginResponse) -> None:
        self.token = response.token
        self.user = SessionUser(
            email=response.email,
            role=response.role,
            user_id=response.user_id,
            expires=response.expires,
        )
        self.auth_store.save(SessionData(token=self.token, user=self.user, env_name=self.config.env_name))
        self.http.clear_cache()

    def logout(self) -> None:
        self.token = None
        self.user = None
        if self.auth_store:
            self.auth_store.clear()
        self.http.clear_cache()

    def products(self) -> ProductsClient:
        return ProductsClient(http=self.http, access_token=self.token)

    def categories(self) -> CategoriesClient:
        return CategoriesClient(http=self.http, access_token=self.token)

    def units(self) -> UnitsClient:
        return UnitsClient(http=self.http, access_token=self.token)

    def unit_conversions(self) -> ProductUnitConversionsClient:
        return ProductUnitConversionsClient(http=self.http, access_token=self.token)

    def suppliers(self) -> SuppliersClient:
        return SuppliersClient(http=self.http, access_token=self.token)

    def purchase_orders(self) -> PurchaseOrdersClient:
        return PurchaseOrdersClient(http=self.http, access_token=self.token)

    def stock_receives(self) -> StockReceivesClient:
        return StockReceivesClient(http=self.http, access_token=self.token)

    def stock_adjustments(self) -> StockAdjustmentsClient:
        return StockAdjustmentsClient(http=self.http, access_token=self.token)

    def bad_orders(self) -> BadOrdersClient:
        return BadOrdersClient(http=self.http, access_token=self.token)

    def inventory_transactions(self) -> InventoryTransactionsClient:
        return InventoryTransactionsClient(http=self.http, access_token=self.token)

    def users(self) -> UsersClient:
        return UsersClient(http=self.http, access_token=self.token)

    def vat_settings(self) -> VatSettingsClient:
        return VatSettingsClient(http=self.http, access_token=self.token)

    def discount_settings(self) -> DiscountSettingsClient:
        return DiscountSettingsClient(http=self.http, access_token=self.token)

    def receipt_settings(self) -> ReceiptSettingsClient:
        return ReceiptSettingsClient(http=self.http, access_token=self.token)

    def counters(self) -> CountersClient:
        return CountersClient(http=self.http, access_token=self.token)

    def business_profile(self) -> BusinessProfileClient:
        return BusinessProfileClient(http=self.http, access_token=self.token)

    def auth_logs(self) -> AuthLogsClient:
        return AuthLogsClient(http=self.http, access_token=self.token)
