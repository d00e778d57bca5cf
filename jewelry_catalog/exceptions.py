class CatalogError(Exception):
    """Base class for errors raised by the catalog."""


class RepositoryError(CatalogError):
    """A database call failed and the session was rolled back."""


class CategoryNotFound(CatalogError):
    def __init__(self, category_id):
        super().__init__(f"Category {category_id} not found")
        self.category_id = category_id


class CategoryDeleteBlocked(CatalogError):
    """Deletion refused because items or subcategories still depend on the category."""

    def __init__(self, message, item_count=0, subcategory_count=0):
        super().__init__(message)
        self.message = message
        self.item_count = item_count
        self.subcategory_count = subcategory_count


class GoldPriceError(CatalogError):
    """The external gold price feed could not be read."""
