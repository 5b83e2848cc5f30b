# online_shop/db/models/category_model.py
"""
Se encarga de definir el modelo de categoría para la aplicación.
"""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from online_shop.db.database import Base

class Category(Base):
    __tablename__ = "categories"

    id = Column("category_id", Integer, primary_key=True, index=True)
    name = Column("category_name", String(100), nullable=False, unique=True)

    products = relationship("Product", back_populates="category", passive_deletes="all")

    def __repr__(self):
        return f"<Category {self.name}>"
