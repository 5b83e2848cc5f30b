from online_shop.db.models.category_model import Category
from online_shop.db.models.product_model import Product

__all__ = ["Category", "Product"]
