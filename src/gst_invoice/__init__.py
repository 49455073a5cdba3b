"""
GST Invoice - tax selection and price reconciliation for sales invoices

Resolves the GST tax (IGST vs CGST/SGST) for each invoice line from its
HSN/SAC code and the order's destination state, back-calculates pre-tax
rates from tax-inclusive prices, and validates the line set before the
invoice is sent to the billing provider.
"""

__version__ = "0.1.0"

from . import tax_resolution
from . import utils

__all__ = ["tax_resolution", "utils"]
