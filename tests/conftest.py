from datetime import datetime

import pytest


@pytest.fixture
def stock_doc():
    return {
        "brandName": "Osaka",
        "seriesStock": [
            {"series": "IPS-700", "soldCount": 10, "inStock": 7, "productCost": 32000},
        ],
    }


@pytest.fixture
def sale_doc():
    return {
        "invoiceId": "INV-1001",
        "customerName": "Ali Traders",
        "date": datetime(2024, 12, 15, 10, 30),
        "products": [
            {"brandName": "Osaka", "series": "IPS-700", "quantity": 10},
        ],
    }


@pytest.fixture
def mock_mongo_factory():
    """Build a MongoClient stand-in whose collections are looked up by name."""

    def factory(collections, closed=None):
        class MockCollection:
            def __init__(self, name):
                self.name = name
                self.queries = []
                self.inserted = []

            def find(self, query):
                self.queries.append(query)
                return list(collections.get(self.name, []))

            def insert_one(self, document):
                self.inserted.append(document)

        created = {}

        def mock_mongo_client(uri, **kwargs):
            return type('obj', (object,), {
                '__getitem__': lambda self, db: type('obj', (object,), {
                    '__getitem__': lambda self, name: created.setdefault(name, MockCollection(name))
                })(),
                'close': lambda self: closed.__setitem__(0, True) if closed is not None else None
            })()

        return mock_mongo_client, created

    return factory
