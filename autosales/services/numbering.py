import secrets
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from autosales.models.invoice import Invoice

INVOICE_PREFIX = "FACT"
_MAX_ATTEMPTS = 20


def _format_invoice_number(now: datetime, suffix: str) -> str:
    return f"{INVOICE_PREFIX}-{now.strftime('%Y%m%d')}-{suffix}"


def generate_invoice_number(db: Session, now: datetime | None = None) -> str:
    """Return an unused ``FACT-YYYYMMDD-XXXXXX`` number.

    The suffix is six random upper-case hex characters; a collision with an
    existing invoice simply draws again.
    """
    now = now or datetime.now(UTC)
    for _ in range(_MAX_ATTEMPTS):
        number = _format_invoice_number(now, secrets.token_hex(3).upper())
        if not db.query(Invoice.id).filter(Invoice.number == number).first():
            return number
    raise RuntimeError("Could not allocate a unique invoice number")
