"""
Sales-stock sync verification core.

This package provides pure components for:
- Resolving product identity from loosely-typed sale and stock documents
- Lenient numeric coercion of stored counts, quantities and costs
- Building per-product indices and classifying sync discrepancies
"""

__version__ = "1.0.0"
