"""Sales-Stock Sync DAG - Daily verification of stock soldCount against recorded sales."""

from airflow import DAG
from airflow.sdk.definitions.decorators import task
from datetime import datetime, timedelta

from config.settings import settings
from integrations.mongo_handler import store_verification_report
from services.sync_verification import verify_sync


@task
def verify():
    """Compare the stock ledger against all-time sales."""
    return verify_sync()


@task
def store(report):
    """Store the verification report to MongoDB."""
    return store_verification_report(
        settings.MONGO_URI,
        settings.DB_NAME,
        settings.VERIFICATION_COLLECTION,
        report,
    )


with DAG(
    dag_id="sales_stock_sync",
    start_date=datetime(2024, 1, 1),
    schedule="@daily",
    catchup=False,
    default_args={
        "owner": "inventory",
        "retries": 3,
        "retry_delay": timedelta(seconds=10),
    },
) as dag:

    report = verify()
    store(report)
