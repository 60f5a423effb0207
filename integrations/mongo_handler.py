from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pymongo import MongoClient
from typing import Dict, List, Optional, Tuple
from contextlib import contextmanager
import uuid
import logging

logger = logging.getLogger(__name__)


@contextmanager
def get_mongo_connection(mongo_uri: str, timeout_ms: int = 5000):
    client = None
    try:
        client = MongoClient(mongo_uri, serverSelectionTimeoutMS=timeout_ms)
        yield client
    finally:
        if client:
            client.close()


def build_sales_query(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None
) -> Dict:
    if start_date and end_date:
        return {"date": {"$gte": start_date, "$lte": end_date}}
    return {}


def fetch_sales_and_stock(
    mongo_uri: str,
    db_name: str,
    sales_collection: str,
    stock_collection: str,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    timeout_ms: int = 5000
) -> Tuple[List[Dict], List[Dict]]:
    """Fetch sales (optionally date-filtered) and the full stock ledger in parallel."""
    with get_mongo_connection(mongo_uri, timeout_ms) as client:
        db = client[db_name]
        sales_query = build_sales_query(start_date, end_date)

        if sales_query:
            logger.info(f"Filtering sales by date range: {start_date} to {end_date}")
        else:
            logger.info("No date range specified - checking all-time sync")

        with ThreadPoolExecutor(max_workers=2) as executor:
            sales_future = executor.submit(lambda: list(db[sales_collection].find(sales_query)))
            stock_future = executor.submit(lambda: list(db[stock_collection].find({})))
            sales, stock = sales_future.result(), stock_future.result()

        logger.info(f"Fetched {len(sales)} sales records and {len(stock)} stock records")
        return sales, stock


def store_verification_report(
    mongo_uri: str,
    db_name: str,
    verification_collection: str,
    report: Dict
) -> Dict:
    with get_mongo_connection(mongo_uri) as client:
        collection = client[db_name][verification_collection]

        run_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc)

        document = dict(report)
        document.update({
            "verification_run_id": run_id,
            "created_at": now,
        })
        collection.insert_one(document)

        _log_summary(run_id, report, db_name, verification_collection)

        return {"run_id": run_id, "total_issues": len(report["sync_issues"])}


def _log_summary(
    run_id: str,
    report: Dict,
    db_name: str,
    collection_name: str
) -> None:
    summary = report["sync_summary"]
    logger.info("=" * 70)
    logger.info("SYNC VERIFICATION STORED")
    logger.info("=" * 70)
    logger.info(f"Run ID:                      {run_id}")
    logger.info(f"Total Issues:                {len(report['sync_issues'])}")
    logger.info(f"  - Synced:                  {summary['synced_products']}")
    logger.info(f"  - Mismatched:              {summary['mismatched_products']}")
    logger.info(f"  - Missing in Stock:        {summary['missing_in_stock']}")
    logger.info(f"  - Missing in Sales:        {summary['missing_in_sales']}")
    logger.info(f"Collection:                  {db_name}.{collection_name}")
    logger.info("=" * 70)
