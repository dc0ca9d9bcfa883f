# Importing this package registers every table on Base.metadata

from .user import User
from .counter import DocumentCounter
from .quotation import Quotation, QuotationItem, QuotationProgress
from .pop import POPQuotation, POPItem
from .catalog import PredefinedPricing, Material

__all__ = [
    "User",
    "DocumentCounter",
    "Quotation",
    "QuotationItem",
    "QuotationProgress",
    "POPQuotation",
    "POPItem",
    "PredefinedPricing",
    "Material",
]
