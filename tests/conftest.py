import pytest

from jewelry_catalog import create_app, db
from jewelry_catalog.models import Category, JewelryItem, User


@pytest.fixture
def app():
    app = create_app("jewelry_catalog.config.TestingConfig")
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin(app):
    user = User(username="admin", is_admin=True)
    user.set_password("admin123")
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def admin_client(client, admin):
    response = client.post("/admin/login", data={"username": "admin", "password": "admin123"})
    assert response.status_code == 302
    return client


@pytest.fixture
def catalog(app):
    """Rings (2 items, 1 subcategory), Heavy Rings under Rings, Necklaces (empty)."""
    rings = Category(name="Rings", description="All rings", image_url="a.jpg, b.jpg,  c.jpg")
    necklaces = Category(name="Necklaces")
    db.session.add_all([rings, necklaces])
    db.session.commit()

    heavy = Category(name="Heavy Rings", parent_id=rings.id)
    db.session.add(heavy)
    db.session.add_all([
        JewelryItem(name="Band", category="Rings", weight_grams=4.2),
        JewelryItem(name="Signet", category="Rings", weight_grams=9.0),
        JewelryItem(name="Chain", category="Bracelets"),
    ])
    db.session.commit()
    return {"rings": rings, "necklaces": necklaces, "heavy": heavy}
