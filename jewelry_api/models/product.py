"""ORM model for catalog products."""

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from jewelry_api.models.base import Base


class Product(Base):
    """
    Catalog item. image holds the generated filename of a stored upload in the
    products category, or NULL.
    """

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    grams = Column(String(50), nullable=False)
    wastage = Column(Integer, nullable=False, default=0)
    category = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    availability = Column(String(3), nullable=False, default="YES", index=True)
    image = Column(String(255), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
