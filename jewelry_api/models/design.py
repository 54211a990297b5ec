"""ORM model for custom design requests submitted by users."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text, func

from jewelry_api.models.base import Base


class CustomDesign(Base):
    """
    A user's request for a custom piece.

    status: 'pending', 'in_progress', 'completed' or 'rejected'.
    reference_image is a stored upload filename in the designs category.
    """

    __tablename__ = "custom_designs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    design_name = Column(String(255), nullable=False)
    material_preference = Column(String(255), nullable=False)
    approximate_weight = Column(Float, nullable=False)
    description = Column(Text, nullable=True)
    reference_image = Column(String(255), nullable=True)
    status = Column(String(32), nullable=False, default="pending", index=True)
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
