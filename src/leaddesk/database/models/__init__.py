"""
Database models module
"""
from leaddesk.database.models.base import Base
from leaddesk.database.models.database import Category, Lead, LeadCategory, Competitor, LeadStatus  # Import all models here

__all__ = ["Base", "Category", "Lead", "LeadCategory", "Competitor", "LeadStatus"]
