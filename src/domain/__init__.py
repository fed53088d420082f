from .base import BaseModel, IdType
from .family import Family, FamilyStatus
from .student import Student
from .service import Service, ServiceCode, BillingFrequency
from .enrollment import Enrollment, EnrollmentStatus
from .event_order import EventOrder, EventOrderPaymentStatus, EventType
from .hub_booking import HubBooking, HubBookingStatus
from .invoice import Invoice, InvoiceStatus
from .invoice_line import InvoiceLine

__all__ = [
    "BaseModel",
    "IdType",
    "Family",
    "FamilyStatus",
    "Student",
    "Service",
    "ServiceCode",
    "BillingFrequency",
    "Enrollment",
    "EnrollmentStatus",
    "EventOrder",
    "EventOrderPaymentStatus",
    "EventType",
    "HubBooking",
    "HubBookingStatus",
    "Invoice",
    "InvoiceStatus",
    "InvoiceLine",
]
