"""
Category hierarchy for the admin dashboard.

The tree is derived from the flat, name-sorted category list on every
render. Only two tiers are shown: top-level categories and their direct
children. Items are linked to categories by name, not by id.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from jewelry_catalog.exceptions import CategoryDeleteBlocked
from jewelry_catalog.models.category import FALLBACK_IMAGE, split_image_urls

EXPANDED_SESSION_KEY = "expanded_categories"


def top_level(categories):
    return [cat for cat in categories if not cat.parent_id]


def subcategories(categories, parent_id):
    return [cat for cat in categories if cat.parent_id == parent_id]


def item_count(items, category_name):
    return sum(1 for item in items if item.category == category_name)


def image_count(image_url):
    return len(split_image_urls(image_url))


def cover_image(image_url):
    urls = split_image_urls(image_url)
    return urls[0] if urls else FALLBACK_IMAGE


@dataclass
class CategoryNode:
    category: object
    item_count: int
    image_count: int
    cover_image: str
    subcategories: List["CategoryNode"] = field(default_factory=list)
    is_subcategory: bool = False
    is_expanded: bool = False

    @property
    def id(self):
        return self.category.id

    @property
    def name(self):
        return self.category.name

    @property
    def has_subcategories(self):
        return len(self.subcategories) > 0


def _node(category, categories, items, expanded, is_subcategory):
    children = []
    if not is_subcategory:
        children = [
            _node(child, categories, items, expanded, True)
            for child in subcategories(categories, category.id)
        ]
    return CategoryNode(
        category=category,
        item_count=item_count(items, category.name),
        image_count=image_count(category.image_url),
        cover_image=cover_image(category.image_url),
        subcategories=children,
        is_subcategory=is_subcategory,
        is_expanded=category.id in expanded,
    )


def build_tree(categories, items, expanded=frozenset()):
    """Top-level nodes, each carrying its direct children in input order."""
    return [_node(cat, categories, items, expanded, False) for cat in top_level(categories)]


class ExpandedSet:
    """Expanded category ids, kept in the user's session. Collapsed by default."""

    def __init__(self, session):
        self.session = session

    def ids(self):
        return set(self.session.get(EXPANDED_SESSION_KEY, []))

    def toggle(self, category_id):
        ids = self.ids()
        if category_id in ids:
            ids.discard(category_id)
        else:
            ids.add(category_id)
        self.session[EXPANDED_SESSION_KEY] = sorted(ids)
        return category_id in ids


def check_delete(category, categories, items):
    """
    Refuse deletion while items or subcategories depend on the category.

    Returns the confirmation prompt to show when deletion may proceed.
    """
    count = item_count(items, category.name)
    if count > 0:
        raise CategoryDeleteBlocked(
            f'Cannot delete category "{category.name}" because it contains {count} items. '
            'Please move or delete the items first.',
            item_count=count,
        )

    children = subcategories(categories, category.id)
    if children:
        raise CategoryDeleteBlocked(
            f'Cannot delete category "{category.name}" because it has {len(children)} subcategories. '
            'Please delete the subcategories first.',
            subcategory_count=len(children),
        )

    return f'Are you sure you want to delete the category "{category.name}"?'


@dataclass
class CategoryForm:
    name: str = ""
    description: str = ""
    image_url: str = ""
    parent_id: str = ""
    errors: List[str] = field(default_factory=list)

    @classmethod
    def from_category(cls, category):
        return cls(
            name=category.name,
            description=category.description or "",
            image_url=category.image_url or "",
            parent_id=category.parent_id or "",
        )

    @classmethod
    def from_request(cls, form):
        return cls(
            name=form.get("name", ""),
            description=form.get("description", ""),
            image_url=form.get("image_url", ""),
            parent_id=form.get("parent_id", ""),
        )

    def validate(self, allowed_parent_ids=None):
        """
        Check required fields and, when `allowed_parent_ids` is given, that the
        chosen parent is one of them.
        """
        self.errors = []
        if not self.name.strip():
            self.errors.append("Name is required")
        if self.parent_id and allowed_parent_ids is not None and self.parent_id not in allowed_parent_ids:
            self.errors.append("Parent category must be a top-level category")
        return not self.errors

    def to_record(self):
        return {
            "name": self.name,
            "description": self.description,
            "image_url": self.image_url,
            # never store an empty-string parent reference
            "parent_id": self.parent_id or None,
        }


def parent_choices(categories, editing: Optional[object] = None):
    """
    Categories selectable as a parent: current top-level ones, minus the one
    being edited. A category that has children of its own must stay top-level.
    """
    if editing is None:
        return top_level(categories)
    if subcategories(categories, editing.id):
        return []
    return [cat for cat in top_level(categories) if cat.id != editing.id]
