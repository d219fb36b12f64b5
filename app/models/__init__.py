"""Database models."""

from app.models.base import metadata
from app.models.bills import bill_items, bills
from app.models.donations import donations
from app.models.family_members import family_members
from app.models.inventory import inventory
from app.models.medical_documents import medical_documents
from app.models.medications import medications, reminders
from app.models.pharmacies import pharmacies
from app.models.pharmacy_staff import pharmacy_staff
from app.models.users import roles, user_roles, users

__all__ = [
    "bill_items",
    "bills",
    "donations",
    "family_members",
    "inventory",
    "medical_documents",
    "medications",
    "metadata",
    "pharmacies",
    "pharmacy_staff",
    "reminders",
    "roles",
    "user_roles",
    "users",
]
