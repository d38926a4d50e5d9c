"""Events schema package.

Schemas are organized into modules that mirror the models package and re-exported here.
"""

from .event import (
    CheckInStatsSchema,
    EventSchema,
    EventStatusUpdateSchema,
    EventSubmissionSchema,
    ManageableEventSchema,
    SubmissionSchema,
    TicketTypeInSchema,
    TicketTypeSchema,
)
from .purchase import (
    CustomerInfoSchema,
    PurchasedTicketSchema,
    PurchaseGroupSchema,
    PurchaseLineSchema,
    PurchaseRequestSchema,
    PurchaseResponseSchema,
)
from .ticket import (
    BulkRefundResponseSchema,
    CheckInRequestSchema,
    CheckInResponseSchema,
    MyTicketSchema,
    RefundResponseSchema,
    SaleTicketSchema,
)

__all__ = [
    "BulkRefundResponseSchema",
    "CheckInRequestSchema",
    "CheckInResponseSchema",
    "CheckInStatsSchema",
    "CustomerInfoSchema",
    "EventSchema",
    "EventStatusUpdateSchema",
    "EventSubmissionSchema",
    "ManageableEventSchema",
    "MyTicketSchema",
    "PurchasedTicketSchema",
    "PurchaseGroupSchema",
    "PurchaseLineSchema",
    "PurchaseRequestSchema",
    "PurchaseResponseSchema",
    "RefundResponseSchema",
    "SaleTicketSchema",
    "SubmissionSchema",
    "TicketTypeInSchema",
    "TicketTypeSchema",
]
