from .event import Event, TicketType
from .ticket import Ticket

__all__ = ["Event", "Ticket", "TicketType"]
