import base64
import typing as t
from datetime import time
from decimal import ROUND_HALF_UP, Decimal
from io import BytesIO
from uuid import UUID

import qrcode
from django.conf import settings

from events.exceptions import MalformedId

CENTS = Decimal("0.01")


def parse_uuid(value: t.Any, field: str) -> UUID:
    """Parse an identifier coming from a client.

    Raises:
        MalformedId: If the value is not a UUID.
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError) as e:
        raise MalformedId(field, value) from e


def format_time_12h(value: time | None) -> str:
    """Format a time of day as ``h:MM AM/PM``."""
    if value is None:
        return ""
    hour = value.hour % 12 or 12
    suffix = "PM" if value.hour >= 12 else "AM"
    return f"{hour}:{value.minute:02d} {suffix}"


def refund_amount(price: Decimal, fee_rate: Decimal | None = None) -> Decimal:
    """Reverse the service fee from a charged price, rounded to cents."""
    rate = settings.SERVICE_FEE_RATE if fee_rate is None else fee_rate
    return (Decimal(price) / (Decimal(1) + Decimal(rate))).quantize(CENTS, rounding=ROUND_HALF_UP)


def qr_code_png(payload: str) -> bytes:
    """Render a scannable QR code for a ticket payload as PNG bytes."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=5,
        border=2,
    )
    qr.add_data(payload)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffered = BytesIO()
    img.save(buffered, "PNG")
    return buffered.getvalue()


def qr_code_data_uri(payload: str) -> str:
    """Render a QR code as a ``data:`` URI to inline into HTML emails."""
    encoded = base64.b64encode(qr_code_png(payload)).decode("utf-8")
    return f"data:image/png;base64,{encoded}"
