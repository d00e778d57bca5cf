from jewelry_catalog.models.category import Category
from jewelry_catalog.models.jewelry_item import JewelryItem
from jewelry_catalog.models.admin_setting import AdminSetting
from jewelry_catalog.models.user import User

__all__ = ["Category", "JewelryItem", "AdminSetting", "User"]
