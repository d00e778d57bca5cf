from flask import Blueprint, render_template, jsonify, abort, current_app

from jewelry_catalog.models.jewelry_item import JewelryItem
from jewelry_catalog.repositories import categories as repo
from jewelry_catalog.security.policies import requires_policy, SELECT
from jewelry_catalog.services.category_tree import top_level, subcategories

public_bp = Blueprint('public', __name__)


@public_bp.route('/')
@requires_policy("categories", SELECT)
def home():
    categories = repo.list_categories()
    return render_template("public/index.html", categories=top_level(categories))


@public_bp.route('/category/<category_id>')
@requires_policy("categories", SELECT)
@requires_policy("jewelry_items", SELECT)
def category_detail(category_id):
    category = repo.get_category(category_id)
    if category is None:
        abort(404)

    children = subcategories(repo.list_categories(), category.id)
    items = JewelryItem.query.filter_by(category=category.name).order_by(JewelryItem.name).all()
    return render_template("public/category.html", category=category,
                           subcategories=children, items=items)


@public_bp.route('/api/categories')
@requires_policy("categories", SELECT)
def api_categories():
    return jsonify([cat.to_dict() for cat in repo.list_categories()])


@public_bp.route('/api/gold-price')
def api_gold_price():
    return jsonify(current_app.extensions["gold_price_poller"].snapshot())
