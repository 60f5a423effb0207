"""Sync verification handler: fetches sales and stock, runs the reconciliation and wraps the report."""

from datetime import datetime, time
from typing import Dict, Optional, Tuple
import logging

from pymongo.errors import PyMongoError

from config.settings import settings
from core.reconciliation import verify_sales_stock_sync
from integrations.mongo_handler import fetch_sales_and_stock

logger = logging.getLogger(__name__)

DATE_RANGE = "Date Range"
ALL_TIME = "All Time"


class DatabaseUnavailableError(RuntimeError):
    """Sales or stock records could not be fetched."""


def parse_date_range(
    start_date: Optional[str],
    end_date: Optional[str]
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """
        Parse ISO-8601 start/end strings. Both are required for a range;
        a date-only end date covers the whole day.
    """
    if not (start_date and end_date):
        return None, None

    start = datetime.fromisoformat(start_date)
    end = datetime.fromisoformat(end_date)
    if len(end_date.strip()) == 10:
        end = datetime.combine(end.date(), time.max)

    if (start.tzinfo is None) != (end.tzinfo is None):
        raise ValueError("startDate and endDate must both include or both omit a UTC offset")
    if start > end:
        raise ValueError(f"startDate {start_date} is after endDate {end_date}")
    return start, end


def verify_sync(start_date: Optional[str] = None, end_date: Optional[str] = None) -> Dict:
    """Run a sales-stock sync verification, optionally limited to sales within a date range."""
    start, end = parse_date_range(start_date, end_date)

    try:
        sales, stock = fetch_sales_and_stock(
            settings.MONGO_URI,
            settings.DB_NAME,
            settings.SALES_COLLECTION,
            settings.STOCK_COLLECTION,
            start,
            end,
            settings.SERVER_SELECTION_TIMEOUT_MS,
        )
    except PyMongoError as exc:
        logger.error(f"Failed to fetch sales and stock data: {exc}")
        raise DatabaseUnavailableError("Database unavailable") from exc

    report = verify_sales_stock_sync(
        sales,
        stock,
        high_severity_threshold=settings.HIGH_SEVERITY_THRESHOLD,
        separator=settings.PRODUCT_KEY_SEPARATOR,
    )
    _log_report(report)

    has_range = start is not None
    report["date_range"] = {"start_date": start_date, "end_date": end_date} if has_range else None
    report["verification_type"] = DATE_RANGE if has_range else ALL_TIME
    return report


def handle_sync_verification_request(params: Dict) -> Tuple[Dict, int]:
    """Build the response body and status code for a sync verification query."""
    try:
        report = verify_sync(params.get("startDate"), params.get("endDate"))
    except ValueError as exc:
        return {"success": False, "error": f"Invalid date range: {exc}"}, 400
    except DatabaseUnavailableError as exc:
        return {"success": False, "error": str(exc)}, 500

    if report["is_fully_synced"]:
        message = "All sales and stock data are perfectly synchronized!"
    else:
        message = (
            f"Found {len(report['sync_issues'])} synchronization issues that need attention."
        )

    return {"success": True, "data": report, "message": message}, 200


def _log_report(report: Dict) -> None:
    for warning in report["warnings"]:
        logger.warning(f"{warning['product']}: {warning['message']}")

    for issue in report["sync_issues"]:
        logger.info(
            f"{issue['issue_kind']}: {issue['product']} - Stock: {issue['stock_sold_count']}, "
            f"Sales: {issue['actual_sales']}, Diff: {issue['difference']}"
        )

    summary = report["sync_summary"]
    logger.info("=" * 70)
    logger.info("SALES-STOCK SYNC SUMMARY")
    logger.info("=" * 70)
    logger.info(f"Sales Records Scanned:       {summary['total_sales_records']}")
    logger.info(f"Stock Records Scanned:       {summary['total_stock_records']}")
    logger.info(f"Products Compared:           {summary['total_products']}")
    logger.info(f"  - Synced:                  {summary['synced_products']}")
    logger.info(f"  - Mismatched:              {summary['mismatched_products']}")
    logger.info(f"  - Missing in Stock:        {summary['missing_in_stock']}")
    logger.info(f"  - Missing in Sales:        {summary['missing_in_sales']}")
    logger.info(f"Issues Found:                {len(report['sync_issues'])}")
    logger.info("=" * 70)
