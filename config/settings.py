import os


class Settings:
    """Configuration settings for the sales-stock sync verification."""

    # MongoDB Configuration
    MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    DB_NAME = os.getenv("MONGO_DB_NAME", "PrismStore")
    SALES_COLLECTION = os.getenv("SALES_COLLECTION", "sales")
    STOCK_COLLECTION = os.getenv("STOCK_COLLECTION", "stock")
    VERIFICATION_COLLECTION = os.getenv("VERIFICATION_COLLECTION", "sync_verification_results")
    SERVER_SELECTION_TIMEOUT_MS = int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "5000"))

    # Reconciliation rules
    HIGH_SEVERITY_THRESHOLD = float(os.getenv("HIGH_SEVERITY_THRESHOLD", "5"))
    PRODUCT_KEY_SEPARATOR = os.getenv("PRODUCT_KEY_SEPARATOR", "-")


# Create a singleton instance
settings = Settings()
