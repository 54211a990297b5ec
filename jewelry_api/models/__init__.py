"""SQLAlchemy ORM models."""

from jewelry_api.models.base import Base
from jewelry_api.models.design import CustomDesign
from jewelry_api.models.product import Product
from jewelry_api.models.user import User

__all__ = ["Base", "CustomDesign", "Product", "User"]
