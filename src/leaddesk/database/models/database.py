"""
Database models for the lead management tables.
Column widths mirror the fixed-width storage schema the importer truncates to.
"""
import enum
from sqlalchemy import Column, String, Text, Integer, Float, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from leaddesk.database.models.base import Base, BaseModel, utcnow


class LeadStatus(str, enum.Enum):
    """Pipeline stage of a lead"""
    FRESH = "Fresh Lead"
    INTERESTED = "Interested"
    NOT_INTERESTED = "Not Interested"
    FOLLOW_UP = "Follow-up"


# Maximum column widths; the importer truncates to these silently
NAME_MAX_LENGTH = 255
WEBSITE_MAX_LENGTH = 255
PHONE_MAX_LENGTH = 50
OWNER_NAME_MAX_LENGTH = 255
QUERY_MAX_LENGTH = 500
CATEGORY_NAME_MAX_LENGTH = 255
COMPETITOR_NAME_MAX_LENGTH = 500


class Category(Base):
    """
    Named grouping of leads.
    Maps to the 'categories' table.
    """
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(CATEGORY_NAME_MAX_LENGTH), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    lead_links = relationship(
        "LeadCategory",
        back_populates="category",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Lead(BaseModel):
    """
    Prospect record with contact info, status and follow-up metadata.
    Maps to the 'leads' table.
    """
    __tablename__ = "leads"

    # Business information
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    reviews = Column(Integer, nullable=True)
    rating = Column(Float, nullable=True)
    website = Column(String(WEBSITE_MAX_LENGTH), nullable=True)
    phone = Column(String(PHONE_MAX_LENGTH), nullable=True, index=True)
    owner_name = Column(String(OWNER_NAME_MAX_LENGTH), nullable=True)
    query = Column(String(QUERY_MAX_LENGTH), nullable=True)  # Search tag the lead was scraped for

    # Pipeline tracking
    status = Column(String(50), nullable=False, default=LeadStatus.FRESH.value, index=True)
    follow_up_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=False, default="")
    assigned_to = Column(String(64), nullable=True, index=True)

    category_links = relationship(
        "LeadCategory",
        back_populates="lead",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    competitors = relationship(
        "Competitor",
        back_populates="lead",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Competitor.id",
    )


class LeadCategory(Base):
    """
    Join row linking a lead to a category.
    Maps to the 'lead_categories' table.
    """
    __tablename__ = "lead_categories"
    __table_args__ = (UniqueConstraint("lead_id", "category_id", name="uq_lead_category"),)

    id = Column(Integer, primary_key=True, index=True)
    lead_id = Column(Integer, ForeignKey("leads.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True)

    lead = relationship("Lead", back_populates="category_links")
    category = relationship("Category", back_populates="lead_links")


class Competitor(Base):
    """
    Rival business parsed out of a lead's competitors cell.
    Maps to the 'competitors' table.
    """
    __tablename__ = "competitors"

    id = Column(Integer, primary_key=True, index=True)
    lead_id = Column(Integer, ForeignKey("leads.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(COMPETITOR_NAME_MAX_LENGTH), nullable=True)
    link = Column(Text, nullable=True)
    reviews = Column(Integer, nullable=True)

    lead = relationship("Lead", back_populates="competitors")
