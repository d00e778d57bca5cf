"""
Category persistence.

Every call goes straight to the database: there is no cache, and callers
reload the full list after each mutation.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError

from jewelry_catalog import db
from jewelry_catalog.exceptions import CategoryNotFound, RepositoryError
from jewelry_catalog.models.category import Category
from jewelry_catalog.models.jewelry_item import JewelryItem

logger = logging.getLogger(__name__)

CATEGORY_FIELDS = ("name", "description", "image_url", "parent_id")


def list_categories():
    return Category.query.order_by(Category.name).all()


def get_category(category_id):
    return db.session.get(Category, category_id)


def list_items():
    return JewelryItem.query.all()


def _commit(action, target):
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Error %s category %s: %s", action, target, e)
        raise RepositoryError(f"Could not {action} category") from e


def create_category(data):
    category = Category(**{field: data.get(field) for field in CATEGORY_FIELDS})
    db.session.add(category)
    _commit("create", data.get("name"))
    logger.info("Category created: %s (ID: %s)", category.name, category.id)
    return category


def update_category(category_id, data):
    category = get_category(category_id)
    if category is None:
        raise CategoryNotFound(category_id)

    for field in CATEGORY_FIELDS:
        if field in data:
            setattr(category, field, data[field])

    _commit("update", category_id)
    logger.info("Category updated: %s", category_id)
    return category


def delete_category(category_id):
    category = get_category(category_id)
    if category is None:
        raise CategoryNotFound(category_id)

    db.session.delete(category)
    _commit("delete", category_id)
    logger.info("Category deleted: %s", category_id)
