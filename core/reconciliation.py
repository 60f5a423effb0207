"""Sales-stock sync verification: compares sold quantities in sales against the stock ledger."""

from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Tuple

from .normalization import (
    make_product_key,
    resolve_brand_name,
    resolve_series,
    to_number,
    validate_sold_count,
)

STOCK_UNDERCOUNTED = "stock-undercounted"
STOCK_OVERCOUNTED = "stock-overcounted"
MISSING_IN_STOCK = "missing-in-stock"
MISSING_IN_SALES = "missing-in-sales"

SEVERITY_HIGH = "high"
SEVERITY_MEDIUM = "medium"

DEFAULT_HIGH_SEVERITY_THRESHOLD = 5

ISSUE_DESCRIPTIONS = {
    STOCK_UNDERCOUNTED: "Stock undercounted",
    STOCK_OVERCOUNTED: "Stock overcounted",
    MISSING_IN_STOCK: "Product in sales but missing from stock",
    MISSING_IN_SALES: "Product in stock with soldCount but no sales records",
}


def _warning(product, field, value, message) -> Dict:
    return {"product": product, "field": field, "value": value, "message": message}


def _serializable_date(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def build_stock_index(stock: Iterable[Dict], separator: str = "-") -> Tuple[Dict[str, Dict], List[Dict]]:
    """
        Index stock ledger rows by product key.

        Negative soldCount values are clamped to 0 and reported as warnings.
        Later rows for the same key replace earlier ones.
    """
    index: Dict[str, Dict] = {}
    warnings: List[Dict] = []

    for stock_doc in stock:
        series_rows = stock_doc.get("seriesStock")
        if not isinstance(series_rows, list):
            continue

        brand_name = resolve_brand_name(stock_doc)
        for row in series_rows:
            if not isinstance(row, dict):
                continue

            series = resolve_series(row)
            key = make_product_key(brand_name, series, separator)
            if key is None:
                warnings.append(_warning(
                    f"{brand_name}{separator}{series}",
                    "series" if brand_name else "brandName",
                    series if brand_name else brand_name,
                    "Stock row without brand or series skipped",
                ))
                continue

            sold_count, clamped = validate_sold_count(row.get("soldCount"))
            if clamped:
                warnings.append(_warning(
                    key,
                    "soldCount",
                    row.get("soldCount"),
                    f"Negative soldCount detected: {row.get('soldCount')}, setting to 0",
                ))

            index[key] = {
                "brand_name": brand_name,
                "series": series,
                "stock_sold_count": sold_count,
                "in_stock": to_number(row.get("inStock")),
                "unit_cost": to_number(row.get("productCost")),
            }

    return index, warnings


def build_sales_index(
    sales: Iterable[Dict], separator: str = "-"
) -> Tuple[Dict[str, Any], Dict[str, Tuple[str, str]], List[Dict]]:
    """
        Total sold quantities per product key from sale line items.

        Returns the totals, the brand/series behind each key, and one detail
        row per counted line item.
    """
    totals: Dict[str, Any] = {}
    labels: Dict[str, Tuple[str, str]] = {}
    sales_details: List[Dict] = []

    for sale in sales:
        products = sale.get("products")
        if not isinstance(products, list):
            continue

        for product in products:
            if not isinstance(product, dict):
                continue

            brand_name = resolve_brand_name(product)
            series = resolve_series(product)
            key = make_product_key(brand_name, series, separator)
            if key is None:
                continue

            quantity = to_number(product.get("quantity"))
            totals[key] = totals.get(key, 0) + quantity
            labels.setdefault(key, (brand_name, series))

            sales_details.append({
                "product": key,
                "brand_name": brand_name,
                "series": series,
                "quantity": quantity,
                "sale_date": _serializable_date(sale.get("date")),
                "invoice_id": sale.get("invoiceId"),
                "customer_name": sale.get("customerName"),
            })

    return totals, labels, sales_details


def _severity(difference, threshold) -> str:
    return SEVERITY_HIGH if abs(difference) > threshold else SEVERITY_MEDIUM


def _issue(key, kind, severity, brand_name, series, stock_sold_count, actual_sales, stock_item=None) -> Dict:
    issue = {
        "product": key,
        "brand_name": brand_name,
        "series": series,
        "stock_sold_count": stock_sold_count,
        "actual_sales": actual_sales,
        "difference": actual_sales - stock_sold_count,
        "issue_kind": kind,
        "severity": severity,
        "description": ISSUE_DESCRIPTIONS[kind],
    }
    if stock_item is not None:
        issue["in_stock"] = stock_item["in_stock"]
        issue["unit_cost"] = stock_item["unit_cost"]
    return issue


def compare_indices(
    stock_index: Dict[str, Dict],
    sales_totals: Dict[str, Any],
    sales_labels: Dict[str, Tuple[str, str]],
    high_severity_threshold=DEFAULT_HIGH_SEVERITY_THRESHOLD,
) -> Tuple[Dict[str, int], List[Dict]]:
    """
        Cross-compare the two indices and classify every discrepancy.

        Issues come out in a fixed order: stock keys first, then keys only
        seen in sales, then stock keys with a sold count but no sales.
    """
    summary = {
        "total_products": 0,
        "synced_products": 0,
        "mismatched_products": 0,
        "missing_in_stock": 0,
        "missing_in_sales": 0,
    }
    issues: List[Dict] = []

    for key, stock_item in stock_index.items():
        summary["total_products"] += 1
        actual_sales = sales_totals.get(key, 0)
        stock_sold_count = stock_item["stock_sold_count"]

        if actual_sales == stock_sold_count:
            summary["synced_products"] += 1
            continue

        summary["mismatched_products"] += 1
        kind = STOCK_UNDERCOUNTED if actual_sales > stock_sold_count else STOCK_OVERCOUNTED
        issues.append(_issue(
            key,
            kind,
            _severity(actual_sales - stock_sold_count, high_severity_threshold),
            stock_item["brand_name"],
            stock_item["series"],
            stock_sold_count,
            actual_sales,
            stock_item,
        ))

    for key, actual_sales in sales_totals.items():
        if key in stock_index:
            continue
        summary["missing_in_stock"] += 1
        brand_name, series = sales_labels.get(key, (None, None))
        issues.append(_issue(key, MISSING_IN_STOCK, SEVERITY_HIGH, brand_name, series, 0, actual_sales))

    for key, stock_item in stock_index.items():
        if key in sales_totals or stock_item["stock_sold_count"] <= 0:
            continue
        summary["missing_in_sales"] += 1
        issues.append(_issue(
            key,
            MISSING_IN_SALES,
            SEVERITY_MEDIUM,
            stock_item["brand_name"],
            stock_item["series"],
            stock_item["stock_sold_count"],
            0,
            stock_item,
        ))

    return summary, issues


def verify_sales_stock_sync(
    sales: List[Dict],
    stock: List[Dict],
    high_severity_threshold=DEFAULT_HIGH_SEVERITY_THRESHOLD,
    separator: str = "-",
) -> Dict:
    """
        Verify that the stock ledger's soldCount agrees with recorded sales.

        Neither input is modified. Apart from verification_date the result
        depends only on the inputs.
    """
    stock_index, warnings = build_stock_index(stock, separator)
    sales_totals, sales_labels, sales_details = build_sales_index(sales, separator)

    summary, issues = compare_indices(stock_index, sales_totals, sales_labels, high_severity_threshold)
    summary["total_sales_records"] = len(sales)
    summary["total_stock_records"] = len(stock)

    return {
        "sync_summary": summary,
        "sync_issues": issues,
        "sales_details": sales_details,
        "warnings": warnings,
        "is_fully_synced": len(issues) == 0,
        "verification_date": datetime.now(timezone.utc).isoformat(),
    }
