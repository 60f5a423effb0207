"""
Generate test data for the sales and stock collections in MongoDB.

This script creates:
- Stock: 4 brand documents with 9 series rows
- Sales: invoices whose line items total to the expected sold counts

Final sync verification results:
- Synced: 4
- Mismatched: 5 (2 undercounted, one from a negative soldCount; 3 overcounted)
- Missing in stock: 1
- Missing in sales: 2 (also counted among the overcounted)

Installation:
    pip install pymongo

Usage:
    python generate_test_data.py
"""

from datetime import datetime, timedelta
import random
from pymongo import MongoClient


# Each entry has: (brand, series, stock_sold_count, actual_sales)

SYNCED_RECORDS = [
    ("Osaka", "IPS-700", 10, 10),
    ("Osaka", "IPS-1000", 4, 4),
    ("AGS", "N50", 6, 6),
    ("Exide", "N100", 0, 0),
]

MISMATCHED_RECORDS = [
    ("AGS", "N70", 5, 12),       # undercounted, high severity
    ("Exide", "N150", 9, 6),     # overcounted, medium severity
    ("Fujika", "FX100", -3, 2),  # negative soldCount clamped to 0
]

MISSING_IN_SALES_RECORDS = [
    ("Fujika", "FX200", 4),
    ("AGS", "N200", 1),
]

MISSING_IN_STOCK_RECORDS = [
    ("Exide", "DIN66", 3),
]

CUSTOMERS = ["Ali Traders", "Rehman Autos", "City Motors", "Walk-in Customer"]


def generate_stock():
    """Generate one stock document per brand."""

    brands = {}
    rows = (
        [(b, s, sold) for b, s, sold, _ in SYNCED_RECORDS + MISMATCHED_RECORDS]
        + MISSING_IN_SALES_RECORDS
    )
    for brand, series, sold in rows:
        brands.setdefault(brand, []).append({
            "series": series,
            "soldCount": sold,
            "inStock": random.randint(0, 40),
            "productCost": random.randint(8000, 45000),
        })

    stock = [{"brandName": brand, "seriesStock": series} for brand, series in brands.items()]
    print(f"Generated {len(stock)} stock documents")
    return stock


def generate_sales():
    """Generate invoices whose line items sum to the target sales per product."""

    line_items = []
    targets = (
        [(b, s, sales) for b, s, _, sales in SYNCED_RECORDS + MISMATCHED_RECORDS]
        + MISSING_IN_STOCK_RECORDS
    )
    for brand, series, total in targets:
        remaining = total
        while remaining > 0:
            quantity = random.randint(1, remaining)
            # Older invoices nest product identity under batteryDetails
            if random.choice([True, False]):
                line_items.append({"brandName": brand, "series": series, "quantity": quantity})
            else:
                line_items.append({
                    "batteryDetails": {"brandName": brand, "name": series},
                    "quantity": str(quantity),
                })
            remaining -= quantity

    random.shuffle(line_items)

    sales = []
    for i in range(0, len(line_items), 3):
        sales.append({
            "invoiceId": f"INV-{1000 + len(sales)}",
            "customerName": random.choice(CUSTOMERS),
            "date": datetime.now() - timedelta(days=random.randint(1, 365)),
            "products": line_items[i:i + 3],
        })

    print(f"Generated {len(sales)} sales with {len(line_items)} line items")
    return sales


def insert_documents(sales, stock, db_name="PrismStore"):
    """Replace the sales and stock collections in MongoDB."""

    mongo_urls = [
        "mongodb://localhost:27017",
        "mongodb://host.docker.internal:27017"
    ]

    client = None
    for url in mongo_urls:
        try:
            client = MongoClient(url, serverSelectionTimeoutMS=5000)
            client.admin.command('ping')
            print(f"Connected to MongoDB at {url}")
            break
        except Exception as e:
            print(f"Could not connect to {url}: {e}")
            client = None
            continue

    if client is None:
        raise Exception("Could not connect to MongoDB on any available host")

    db = client[db_name]
    for name, documents in (("sales", sales), ("stock", stock)):
        db[name].delete_many({})
        db[name].insert_many(documents)
        print(f"Inserted {len(documents)} documents into {db_name}.{name}")

    client.close()


def main():
    """Main function to generate all test data."""

    print("=" * 70)
    print("GENERATING TEST DATA FOR SALES-STOCK SYNC VERIFICATION")
    print("=" * 70)
    print()

    print("1. Generating stock ledger...")
    stock = generate_stock()
    print()

    print("2. Generating sales...")
    sales = generate_sales()
    print()

    print("3. Inserting into MongoDB...")
    insert_documents(sales, stock)
    print()

    print("=" * 70)
    print("EXPECTED SYNC VERIFICATION RESULTS:")
    print("=" * 70)
    print(f"Total products compared: 9")
    print(f"Synced: 4")
    print(f"Mismatched: 5 (2 undercounted, 3 overcounted)")
    print(f"Missing in stock: 1")
    print(f"Missing in sales: 2")
    print(f"Negative soldCount warnings: 1")
    print("=" * 70)


if __name__ == "__main__":
    main()
