from __future__ import annotations

import argparse
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Callable

from pydantic import ValidationError as PydanticValidationError

from .config import ConfigError, load_config
from .csv_exporter import export_purchase_order_items, export_received_stock
from .exceptions import ApiError, ClientValidationError, raise_issue
from .feedback import Notice, Notifier, success_message
from .listing import (
    PRODUCT_SORT_MODES,
    filter_logs,
    filter_products,
    filter_purchase_orders,
    filter_stock_receives,
    is_low_stock,
    matches_term,
    paginate,
    sort_rows,
)
from .logging_utils import get_logger, log_action
from .models import (
    PURCHASE_ORDER_STATUS_LABELS,
    TAX_TYPE_LABELS,
    USER_ROLE_LABELS,
    InventoryActionType,
    PurchaseOrderStatus,
    parse_enum,
)
from .permissions import check_access
from .purchasing import (
    build_receive_payload,
    format_money,
    is_overdue,
    line_total,
    order_total,
    remaining_to_receive,
)
from .session import ApiSession
from .table_printer import print_table

logger = get_logger("pos_admin")

Handler = Callable[[ApiSession, argparse.Namespace, Notifier], None]


def _status_arg(value: str) -> PurchaseOrderStatus:
    return parse_enum(PurchaseOrderStatus, value)


def _action_arg(value: str) -> InventoryActionType:
    return parse_enum(InventoryActionType, value)


def _quantity_arg(value: str) -> Decimal:
    try:
        quantity = Decimal(value)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"invalid quantity: {value!r}") from exc
    if not quantity.is_finite():
        raise argparse.ArgumentTypeError(f"invalid quantity: {value!r}")
    return quantity


def _run(args: argparse.Namespace, handler: Handler, notifier: Notifier | None = None) -> None:
    config = load_config(args.env_file)
    logger.setLevel(config.log_level)
    session = ApiSession(config)
    notifier = notifier or Notifier()
    module, _, action = args.operation.partition(".")

    if args.screen:
        decision = check_access(session, args.screen)
        if not decision.allowed:
            notifier.notify(Notice("error", decision.reason))
            log_action(logger, module, action, session.role, None, "denied")
            raise SystemExit(1)

    try:
        handler(session, args, notifier)
    except (ApiError, ClientValidationError, PydanticValidationError, ValueError) as exc:
        notifier.error(exc, args.operation)
        log_action(logger, module, action, session.role, session.trace.trace_id, "error")
        raise SystemExit(1) from exc
    log_action(logger, module, action, session.role, session.trace.trace_id, "success")


def cmd_login(session: ApiSession, args: argparse.Namespace, notifier: Notifier) -> None:
    response = session.login(args.email, args.password)
    notifier.success(f"Signed in as {response.email} ({session.role})")


def cmd_logout(session: ApiSession, args: argparse.Namespace, notifier: Notifier) -> None:
    session.logout()
    notifier.success(success_message("auth.logout"))


def cmd_whoami(session: ApiSession, args: argparse.Namespace, notifier: Notifier) -> None:
    if not session.is_authenticated or session.user is None:
        notifier.info("Not signed in.")
        return
    row = {
        "email": session.user.email,
        "role": session.role,
        "expires": session.user.expires,
        "state": "expired" if session.is_expired() else "active",
    }
    print_table("Session", [row], [("email", "Email"), ("role", "Role"), ("expires", "Expires"), ("state", "State")])


def cmd_products_list(session: ApiSession, args: argparse.Namespace, notifier: Notifier) -> None:
    session.require_token()
    products = session.products().get_all()
    rows = filter_products(
        products,
        args.search,
        category_id=args.category,
        low_stock_only=args.low_stock,
        sort_by=args.sort,
    )
    print_table(
        "Products",
        [
            {
                "id": product.id,
                "name": product.name,
                "category": product.category_name,
                "unit": product.unit_name,
                "price": format_money(product.price),
                "tax": TAX_TYPE_LABELS.get(product.tax_type),
                "on_hand": product.on_hand,
                "reorder": product.reorder_level,
                "low": "LOW" if is_low_stock(product) else "",
                "is_active": product.is_active,
            }
            for product in rows
        ],
        [
            ("id", "ID"),
            ("name", "Name"),
            ("category", "Category"),
            ("unit", "Unit"),
            ("price", "Price"),
            ("tax", "Tax"),
            ("on_hand", "On hand"),
            ("reorder", "Reorder"),
            ("low", "Stock"),
            ("is_active", "Status"),
        ],
    )


def cmd_products_deactivate(session: ApiSession, args: argparse.Namespace, notifier: Notifier) -> None:
    session.require_token()
    session.products().deactivate(args.id)
    notifier.success(f"{success_message('products.deactivate')}: #{args.id}", session.trace.trace_id)


def cmd_categories_list(session: ApiSession, args: argparse.Namespace, notifier: Notifier) -> None:
    session.require_token()
    categories = session.categories().get_all()
    print_table(
        "Categories",
        [category.model_dump() for category in categories],
        [("id", "ID"), ("name", "Name"), ("description", "Description"), ("is_active", "Status")],
    )


def cmd_units_list(session: ApiSession, args: argparse.Namespace, notifier: Notifier) -> None:
    session.require_token()
    units = session.units().get_all()
    print_table(
        "Units",
        [
            {**unit.model_dump(), "decimals": "yes" if unit.allows_decimal else "no"}
            for unit in units
        ],
        [("id", "ID"), ("name", "Name"), ("abbreviation", "Abbr."), ("unit_type", "Type"), ("decimals", "Decimals")],
    )


def cmd_suppliers_list(session: ApiSession, args: argparse.Namespace, notifier: Notifier) -> None:
    session.require_token()
    suppliers = [
        supplier
        for supplier in session.suppliers().get_all()
        if matches_term(args.search, supplier.name, supplier.contact_person, supplier.email, supplier.phone)
    ]
    print_table(
        "Suppliers",
        [supplier.model_dump() for supplier in suppliers],
        [
            ("id", "ID"),
            ("name", "Name"),
            ("contact_person", "Contact"),
            ("email", "Email"),
            ("phone", "Phone"),
            ("is_active", "Status"),
        ],
    )


def cmd_purchase_orders_list(session: ApiSession, args: argparse.Namespace, notifier: Notifier) -> None:
    session.require_token()
    orders = filter_purchase_orders(
        session.purchase_orders().get_all(),
        args.search,
        supplier_id=args.supplier,
        status=args.status,
        pending_only=args.pending,
    )
    page = paginate(orders, args.page, args.page_size)
    print_table(
        "Purchase orders",
        [
            {
                "id": order.id,
                "number": order.purchase_order_number,
                "supplier": order.supplier_name,
                "ordered": order.order_date,
                "expected": order.expected_delivery_date,
                "status": PURCHASE_ORDER_STATUS_LABELS.get(order.status) if order.status is not None else None,
                "total": format_money(order_total(order.items)),
                "overdue": "OVERDUE" if order.status != PurchaseOrderStatus.RECEIVED and is_overdue(order.expected_delivery_date) else "",
            }
            for order in page.items
        ],
        [
            ("id", "ID"),
            ("number", "PO #"),
            ("supplier", "Supplier"),
            ("ordered", "Order date"),
            ("expected", "Expected"),
            ("status", "Status"),
            ("total", "Total"),
            ("overdue", "Delivery"),
        ],
    )
    notifier.info(f"Page {page.page}/{page.total_pages} ({page.range_label})")


def cmd_purchase_orders_show(session: ApiSession, args: argparse.Namespace, notifier: Notifier) -> None:
    session.require_token()
    order = session.purchase_orders().get_by_id(args.id)
    status = PURCHASE_ORDER_STATUS_LABELS.get(order.status) if order.status is not None else None
    print_table(
        f"Purchase order {order.purchase_order_number}",
        [
            {
                "supplier": order.supplier_name,
                "status": status,
                "expected": order.expected_delivery_date,
                "remarks": order.remarks,
                "total": format_money(order_total(order.items)),
            }
        ],
        [("supplier", "Supplier"), ("status", "Status"), ("expected", "Expected"), ("remarks", "Remarks"), ("total", "Total")],
    )
    print_table(
        "Items",
        [
            {
                "id": item.id,
                "product": item.product_name or f"#{item.product_id}",
                "ordered": item.quantity_ordered,
                "received": item.quantity_received,
                "remaining": remaining_to_receive(item),
                "unit_cost": format_money(item.unit_cost),
                "line_total": f"{line_total(item):.2f}",
            }
            for item in order.items
        ],
        [
            ("id", "Item"),
            ("product", "Product"),
            ("ordered", "Ordered"),
            ("received", "Received"),
            ("remaining", "Remaining"),
            ("unit_cost", "Unit cost"),
            ("line_total", "Line total"),
        ],
    )


def cmd_purchase_orders_receive(session: ApiSession, args: argparse.Namespace, notifier: Notifier) -> None:
    session.require_token()
    client = session.purchase_orders()
    order = client.get_by_id(args.id)
    payload = build_receive_payload(
        order,
        args.item,
        args.quantity,
        received_date=datetime.now(timezone.utc),
        reference_number=args.reference,
        notes=args.notes,
    )
    client.receive_stock(payload, order=order)
    notifier.success(success_message("purchase_orders.received.add"), session.trace.trace_id)


def cmd_purchase_orders_export(session: ApiSession, args: argparse.Namespace, notifier: Notifier) -> None:
    session.require_token()
    order = session.purchase_orders().get_by_id(args.id)
    if args.received:
        path = export_received_stock(order, args.output)
        if path is None:
            notifier.info("No received records to export")
            return
    else:
        path = export_purchase_order_items(order, args.output)
    notifier.success(f"{success_message('purchase_orders.export')}: {path}")


def cmd_stock_receives_from_po(session: ApiSession, args: argparse.Namespace, notifier: Notifier) -> None:
    session.require_token()
    receive = session.stock_receives().create_from_purchase_order(args.id, allow_over_receive=args.allow_over_receive)
    notifier.success(success_message("stock_receives.create_from_po"), session.trace.trace_id)
    if receive is not None:
        print_table(
            f"Stock receive #{receive.id}",
            [
                {"product": item.product_name or f"#{item.product_id}", "quantity": item.quantity, "batch": item.batch_number}
                for item in receive.items
            ],
            [("product", "Product"), ("quantity", "Quantity"), ("batch", "Batch")],
        )


def cmd_stock_receives_list(session: ApiSession, args: argparse.Namespace, notifier: Notifier) -> None:
    session.require_token()
    receives = filter_stock_receives(session.stock_receives().get_all(), args.search)
    page = paginate(receives, args.page, args.page_size)
    print_table(
        "Stock receiving history",
        [
            {
                "id": receive.id,
                "number": receive.purchase_order_number or f"#{receive.purchase_order_id}",
                "received": receive.received_date,
                "by": receive.received_by_user_name,
                "reference": receive.reference_number,
                "items": len(receive.items),
                "quantity": receive.total_quantity,
            }
            for receive in page.items
        ],
        [
            ("id", "ID"),
            ("number", "PO #"),
            ("received", "Received"),
            ("by", "Received by"),
            ("reference", "Reference"),
            ("items", "Items"),
            ("quantity", "Total qty"),
        ],
    )
    notifier.info(f"Page {page.page}/{page.total_pages} ({page.range_label})")


def cmd_transactions_list(session: ApiSession, args: argparse.Namespace, notifier: Notifier) -> None:
    session.require_token()
    transactions = session.inventory_transactions().search(
        product_id=args.product,
        action_type=args.action,
        from_date=args.from_date,
        to_date=args.to_date,
    )
    print_table(
        "Inventory transactions",
        [
            {
                "id": row.id,
                "date": row.transaction_date,
                "product": row.product_name or f"#{row.product_id}",
                "action": row.action_type,
                "quantity": row.quantity,
                "reference": row.reference_number,
                "by": row.performed_by_user_name,
            }
            for row in transactions
        ],
        [
            ("id", "ID"),
            ("date", "Date"),
            ("product", "Product"),
            ("action", "Action"),
            ("quantity", "Qty"),
            ("reference", "Reference"),
            ("by", "By"),
        ],
    )


def cmd_users_list(session: ApiSession, args: argparse.Namespace, notifier: Notifier) -> None:
    session.require_token()
    users = session.users().get_all()
    print_table(
        "Users",
        [
            {
                "name": user.full_name or " ".join(part for part in (user.first_name, user.last_name) if part),
                "email": user.email,
                "role": USER_ROLE_LABELS.get(user.role),
                "is_active": user.is_active,
            }
            for user in users
        ],
        [("name", "Name"), ("email", "Email"), ("role", "Role"), ("is_active", "Status")],
    )


SETTINGS_VIEWS = {
    "vat": (
        "vat_settings",
        "VAT settings",
        [("id", "ID"), ("name", "Name"), ("rate", "Rate %"), ("tax", "Tax type"), ("is_active", "Status")],
    ),
    "discounts": (
        "discount_settings",
        "Discounts",
        [("id", "ID"), ("name", "Name"), ("discount_percent", "Percent"), ("approval", "Approval"), ("is_active", "Status")],
    ),
    "receipt": (
        "receipt_settings",
        "Receipt settings",
        [("id", "ID"), ("header_message", "Header"), ("footer_message", "Footer"), ("receipt_size", "Size"), ("is_active", "Status")],
    ),
    "counters": (
        "counters",
        "Counters",
        [("id", "ID"), ("name", "Name"), ("terminal_identifier", "Terminal"), ("is_active", "Status")],
    ),
}

SETTINGS_SCREENS = {
    "vat": "settings/vat",
    "discounts": "settings/discount",
    "receipt": "settings/receipt",
    "counters": "settings/counters",
}


def cmd_settings_list(session: ApiSession, args: argparse.Namespace, notifier: Notifier) -> None:
    session.require_token()
    factory_name, title, columns = SETTINGS_VIEWS[args.resource]
    records = getattr(session, factory_name)().get_all()
    rows = []
    for record in records:
        row = record.model_dump()
        if "tax_type" in row:
            row["tax"] = TAX_TYPE_LABELS.get(record.tax_type)
        if "requires_approval" in row:
            row["approval"] = "required" if record.requires_approval else "no"
        rows.append(row)
    print_table(title, rows, columns)


LOG_VIEWS = {
    "login-attempts": (
        "login_attempts",
        "Login attempts",
        [
            ("attempted_at", "When"),
            ("username_or_email", "User"),
            ("was_successful", "Result"),
            ("failure_reason", "Reason"),
            ("ip_address", "IP"),
            ("terminal_name", "Terminal"),
        ],
    ),
    "system": (
        "system_logs",
        "System logs",
        [
            ("timestamp", "When"),
            ("module", "Module"),
            ("action_type", "Action"),
            ("description", "Description"),
            ("performed_by", "By"),
            ("ip_address", "IP"),
        ],
    ),
    "sessions": (
        "user_sessions",
        "User sessions",
        [
            ("user_full_name", "User"),
            ("login_time", "Login"),
            ("logout_time", "Logout"),
            ("terminal_name", "Terminal"),
            ("ip_address", "IP"),
        ],
    ),
}


def cmd_logs_list(session: ApiSession, args: argparse.Namespace, notifier: Notifier) -> None:
    session.require_token()
    method, title, columns = LOG_VIEWS[args.view]
    keys = [key for key, _ in columns]
    if args.sort and args.sort not in keys:
        raise_issue("sort", f"Unknown sort column {args.sort!r}; expected one of {', '.join(keys)}")
    rows = filter_logs([record.model_dump() for record in getattr(session.auth_logs(), method)()], args.search)
    if args.sort:
        rows = sort_rows(rows, args.sort, "desc" if args.desc else "asc")
    for row in rows:
        if "was_successful" in row:
            row["was_successful"] = "Success" if row["was_successful"] else "Failed"
    print_table(title, rows, columns)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pos-admin", description="POS back-office admin console")
    parser.add_argument("--env-file", default=None)
    subparsers = parser.add_subparsers(dest="command", required=True)

    def command(sub, name: str, handler: Handler, operation: str, screen: str | None = None, **kwargs):
        cmd_parser = sub.add_parser(name, **kwargs)
        cmd_parser.set_defaults(func=handler, operation=operation, screen=screen)
        return cmd_parser

    login_parser = command(subparsers, "login", cmd_login, "auth.login")
    login_parser.add_argument("--email", required=True)
    login_parser.add_argument("--password", required=True)
    command(subparsers, "logout", cmd_logout, "auth.logout")
    command(subparsers, "whoami", cmd_whoami, "auth.whoami")

    products = subparsers.add_parser("products").add_subparsers(dest="subcommand", required=True)
    products_list = command(products, "list", cmd_products_list, "products.list", "products")
    products_list.add_argument("--search", default="")
    products_list.add_argument("--category", type=int, default=None)
    products_list.add_argument("--low-stock", action="store_true")
    products_list.add_argument("--sort", choices=PRODUCT_SORT_MODES, default="all")
    products_deactivate = command(products, "deactivate", cmd_products_deactivate, "products.deactivate", "products")
    products_deactivate.add_argument("id", type=int)

    categories = subparsers.add_parser("categories").add_subparsers(dest="subcommand", required=True)
    command(categories, "list", cmd_categories_list, "categories.list", "categories")

    units = subparsers.add_parser("units").add_subparsers(dest="subcommand", required=True)
    command(units, "list", cmd_units_list, "units.list", "inventory/units")

    suppliers = subparsers.add_parser("suppliers").add_subparsers(dest="subcommand", required=True)
    suppliers_list = command(suppliers, "list", cmd_suppliers_list, "suppliers.list", "suppliers")
    suppliers_list.add_argument("--search", default="")

    orders = subparsers.add_parser("purchase-orders").add_subparsers(dest="subcommand", required=True)
    orders_list = command(orders, "list", cmd_purchase_orders_list, "purchase_orders.list", "purchase-orders")
    orders_list.add_argument("--search", default="")
    orders_list.add_argument("--supplier", type=int, default=None)
    orders_list.add_argument("--status", type=_status_arg, default=None)
    orders_list.add_argument("--pending", action="store_true")
    orders_list.add_argument("--page", type=int, default=1)
    orders_list.add_argument("--page-size", type=int, default=10)
    orders_show = command(orders, "show", cmd_purchase_orders_show, "purchase_orders.get", "purchase-orders")
    orders_show.add_argument("id", type=int)
    orders_receive = command(
        orders, "receive", cmd_purchase_orders_receive, "purchase_orders.received.add", "inventory/receive"
    )
    orders_receive.add_argument("id", type=int)
    orders_receive.add_argument("--item", type=int, required=True)
    orders_receive.add_argument("--quantity", type=_quantity_arg, required=True)
    orders_receive.add_argument("--reference", default=None)
    orders_receive.add_argument("--notes", default=None)
    orders_export = command(orders, "export", cmd_purchase_orders_export, "purchase_orders.export", "purchase-orders")
    orders_export.add_argument("id", type=int)
    orders_export.add_argument("--received", action="store_true")
    orders_export.add_argument("--output", default="exports")

    receives = subparsers.add_parser("stock-receives").add_subparsers(dest="subcommand", required=True)
    from_po = command(receives, "from-po", cmd_stock_receives_from_po, "stock_receives.create_from_po", "inventory/receive")
    from_po.add_argument("id", type=int)
    from_po.add_argument("--allow-over-receive", action="store_true")

    receives_list = command(receives, "list", cmd_stock_receives_list, "stock_receives.list", "inventory/receive")
    receives_list.add_argument("--search", default="")
    receives_list.add_argument("--page", type=int, default=1)
    receives_list.add_argument("--page-size", type=int, default=10)

    transactions = subparsers.add_parser("transactions").add_subparsers(dest="subcommand", required=True)
    transactions_list = command(transactions, "list", cmd_transactions_list, "inventory.list", "inventory/transactions")
    transactions_list.add_argument("--product", type=int, default=None)
    transactions_list.add_argument("--action", dest="action", type=_action_arg, default=None)
    transactions_list.add_argument("--from", dest="from_date", type=date.fromisoformat, default=None)
    transactions_list.add_argument("--to", dest="to_date", type=date.fromisoformat, default=None)

    users = subparsers.add_parser("users").add_subparsers(dest="subcommand", required=True)
    command(users, "list", cmd_users_list, "users.list", "settings/users")

    logs_parser = command(subparsers, "logs", cmd_logs_list, "auth_logs.list", "settings/logs")
    logs_parser.add_argument("view", choices=list(LOG_VIEWS))
    logs_parser.add_argument("verb", choices=["list"])
    logs_parser.add_argument("--search", default="")
    logs_parser.add_argument("--sort", default=None)
    logs_parser.add_argument("--desc", action="store_true")

    settings_parser = command(subparsers, "settings", cmd_settings_list, "settings.list")
    settings_parser.add_argument("resource", choices=sorted(SETTINGS_VIEWS))
    settings_parser.add_argument("verb", choices=["list"])

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "settings":
        args.screen = SETTINGS_SCREENS[args.resource]
        args.operation = f"settings.{args.resource}.list"
    elif args.command == "logs":
        args.operation = f"auth_logs.{LOG_VIEWS[args.view][0]}"
    try:
        _run(args, args.func)
    except ConfigError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
