from flask import Blueprint, render_template, request, redirect, url_for, flash, session, current_app, abort
from flask_login import login_required
from sqlalchemy.exc import SQLAlchemyError

from jewelry_catalog import db
from jewelry_catalog.exceptions import CatalogError, CategoryDeleteBlocked
from jewelry_catalog.models.admin_setting import AdminSetting
from jewelry_catalog.models.jewelry_item import JewelryItem
from jewelry_catalog.repositories import categories as repo
from jewelry_catalog.security.policies import requires_policy, SELECT, INSERT, UPDATE, DELETE
from jewelry_catalog.services.category_tree import (
    CategoryForm, ExpandedSet, build_tree, check_delete, parent_choices,
)

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/dashboard")

SAVE_ERROR = "Error saving category. Please check your permissions and try again."
DELETE_ERROR = "Error deleting category. Please check your permissions and try again."


@dashboard_bp.route("/")
@login_required
@requires_policy("categories", SELECT)
def panel():
    categories = repo.list_categories()
    items = repo.list_items()
    tree = build_tree(categories, items, ExpandedSet(session).ids())
    return render_template("dashboard/panel.html", tree=tree)


@dashboard_bp.route("/categories/<category_id>/toggle", methods=["POST"])
@login_required
def toggle_category(category_id):
    if repo.get_category(category_id) is not None:
        ExpandedSet(session).toggle(category_id)
    return redirect(url_for("dashboard.panel"))


def _allowed_parent_ids(categories, editing=None):
    return {cat.id for cat in parent_choices(categories, editing)}


def _render_form(form, categories, editing=None):
    return render_template(
        "dashboard/category_form.html",
        form=form,
        editing=editing,
        parents=parent_choices(categories, editing),
    )


@dashboard_bp.route("/categories/new", methods=["GET", "POST"])
@login_required
@requires_policy("categories", INSERT)
def create_category():
    categories = repo.list_categories()

    if request.method == "GET":
        return _render_form(CategoryForm(), categories)

    form = CategoryForm.from_request(request.form)
    if not form.validate(_allowed_parent_ids(categories)):
        for error in form.errors:
            flash(error, "error")
        return _render_form(form, categories)

    try:
        repo.create_category(form.to_record())
    except CatalogError as e:
        current_app.logger.error("Error saving category: %s", e)
        flash(SAVE_ERROR, "error")
        return _render_form(form, categories)

    flash(f'Category "{form.name}" created', "success")
    return redirect(url_for("dashboard.panel"))


@dashboard_bp.route("/categories/<category_id>/edit", methods=["GET", "POST"])
@login_required
@requires_policy("categories", UPDATE)
def edit_category(category_id):
    category = repo.get_category(category_id)
    if category is None:
        abort(404)
    categories = repo.list_categories()

    if request.method == "GET":
        return _render_form(CategoryForm.from_category(category), categories, editing=category)

    form = CategoryForm.from_request(request.form)
    if not form.validate(_allowed_parent_ids(categories, category)):
        for error in form.errors:
            flash(error, "error")
        return _render_form(form, categories, editing=category)

    try:
        repo.update_category(category_id, form.to_record())
    except CatalogError as e:
        current_app.logger.error("Error saving category: %s", e)
        flash(SAVE_ERROR, "error")
        return _render_form(form, categories, editing=category)

    flash(f'Category "{form.name}" updated', "success")
    return redirect(url_for("dashboard.panel"))


@dashboard_bp.route("/categories/<category_id>/delete", methods=["POST"])
@login_required
@requires_policy("categories", DELETE)
def delete_category(category_id):
    category = repo.get_category(category_id)
    if category is None:
        abort(404)

    try:
        prompt = check_delete(category, repo.list_categories(), repo.list_items())
    except CategoryDeleteBlocked as e:
        flash(e.message, "error")
        return redirect(url_for("dashboard.panel"))

    if request.form.get("confirm") != "yes":
        return render_template("dashboard/confirm_delete.html", category=category, prompt=prompt)

    name = category.name
    try:
        repo.delete_category(category_id)
    except CatalogError as e:
        current_app.logger.error("Error deleting category: %s", e)
        flash(DELETE_ERROR, "error")
        return redirect(url_for("dashboard.panel"))

    flash(f'Category "{name}" deleted', "success")
    return redirect(url_for("dashboard.panel"))


# Jewelry items

def _item_fields(form):
    def number(key):
        raw = form.get(key, "").strip()
        return float(raw) if raw else None

    return {
        "name": form.get("name", "").strip(),
        "category": form.get("category", "").strip(),
        "description": form.get("description") or None,
        "weight_grams": number("weight_grams"),
        "price": number("price"),
        "image_url": form.get("image_url") or None,
    }


@dashboard_bp.route("/items")
@login_required
@requires_policy("jewelry_items", SELECT)
def items():
    all_items = JewelryItem.query.order_by(JewelryItem.category, JewelryItem.name).all()
    return render_template("dashboard/items.html", items=all_items)


@dashboard_bp.route("/items/new", methods=["GET", "POST"])
@login_required
@requires_policy("jewelry_items", INSERT)
def create_item():
    categories = repo.list_categories()
    if request.method == "GET":
        return render_template("dashboard/item_form.html", item=None, values={}, categories=categories)

    try:
        fields = _item_fields(request.form)
    except ValueError:
        flash("Weight and price must be numbers", "error")
        return render_template("dashboard/item_form.html", item=None, values=request.form, categories=categories)

    if not fields["name"] or not fields["category"]:
        flash("Name and category are required", "error")
        return render_template("dashboard/item_form.html", item=None, values=request.form, categories=categories)

    try:
        item = JewelryItem(**fields)
        db.session.add(item)
        db.session.commit()
        current_app.logger.info("Item created: %s (ID: %s)", item.name, item.id)
        flash("Item created", "success")
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error("Error creating item: %s", e)
        flash("Error saving item. Please check your permissions and try again.", "error")
        return render_template("dashboard/item_form.html", item=None, values=request.form, categories=categories)

    return redirect(url_for("dashboard.items"))


@dashboard_bp.route("/items/<item_id>/edit", methods=["GET", "POST"])
@login_required
@requires_policy("jewelry_items", UPDATE)
def edit_item(item_id):
    item = db.get_or_404(JewelryItem, item_id)
    categories = repo.list_categories()
    if request.method == "GET":
        return render_template("dashboard/item_form.html", item=item, values=item.to_dict(), categories=categories)

    try:
        fields = _item_fields(request.form)
    except ValueError:
        flash("Weight and price must be numbers", "error")
        return render_template("dashboard/item_form.html", item=item, values=request.form, categories=categories)

    if not fields["name"] or not fields["category"]:
        flash("Name and category are required", "error")
        return render_template("dashboard/item_form.html", item=item, values=request.form, categories=categories)

    try:
        for key, value in fields.items():
            setattr(item, key, value)
        db.session.commit()
        flash("Item updated", "success")
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error("Error updating item %s: %s", item_id, e)
        flash("Error saving item. Please check your permissions and try again.", "error")
        return render_template("dashboard/item_form.html", item=item, values=request.form, categories=categories)

    return redirect(url_for("dashboard.items"))


@dashboard_bp.route("/items/<item_id>/delete", methods=["POST"])
@login_required
@requires_policy("jewelry_items", DELETE)
def delete_item(item_id):
    item = db.get_or_404(JewelryItem, item_id)
    try:
        db.session.delete(item)
        db.session.commit()
        flash("Item deleted", "success")
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error("Error deleting item %s: %s", item_id, e)
        flash("Error deleting item. Please check your permissions and try again.", "error")

    return redirect(url_for("dashboard.items"))


# Admin settings

@dashboard_bp.route("/settings")
@login_required
@requires_policy("admin_settings", SELECT)
def settings():
    all_settings = AdminSetting.query.order_by(AdminSetting.key).all()
    return render_template("dashboard/settings.html", settings=all_settings)


@dashboard_bp.route("/settings", methods=["POST"])
@login_required
@requires_policy("admin_settings", UPDATE)
@requires_policy("admin_settings", INSERT)
def save_setting():
    key = request.form.get("key", "").strip()
    value = request.form.get("value", "")

    if not key:
        flash("Setting key is required", "error")
        return redirect(url_for("dashboard.settings"))

    try:
        setting = AdminSetting.query.filter_by(key=key).first()
        if setting is None:
            db.session.add(AdminSetting(key=key, value=value))
        else:
            setting.value = value
        db.session.commit()
        flash(f"Setting {key} saved", "success")
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error("Error saving setting %s: %s", key, e)
        flash("Error saving setting. Please check your permissions and try again.", "error")

    return redirect(url_for("dashboard.settings"))
