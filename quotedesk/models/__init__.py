"""Database models — re-exports all models.

Import from here:  from quotedesk.models import User, Quotation, ...
Or from submodules: from quotedesk.models.quotations import Quotation
"""

from .base import Base  # noqa: F401

# Auth & Parties
from .auth import Buyer, Supplier, User  # noqa: F401

# Catalog
from .catalog import Category, Product  # noqa: F401

# Sourcing: RFQs & Inquiries
from .sourcing import Inquiry, Rfq  # noqa: F401

# Quotations
from .quotations import InquiryQuotation, Quotation  # noqa: F401
