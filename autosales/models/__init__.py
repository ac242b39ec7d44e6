from autosales.models.auth import Role, User, UserRole  # noqa: F401
from autosales.models.client import Client  # noqa: F401
from autosales.models.enums import InvoiceStatus, RoleName  # noqa: F401
from autosales.models.invoice import Invoice  # noqa: F401
from autosales.models.opportunity import Opportunity  # noqa: F401
from autosales.models.product import Product  # noqa: F401
from autosales.models.quotation import Quotation, QuotationItem  # noqa: F401
from autosales.models.sale import Sale, SaleLine  # noqa: F401
from autosales.models.stage import Stage  # noqa: F401
from autosales.models.vehicle import Vehicle  # noqa: F401
