"""
Tests for the public storefront
"""


def test_home_lists_top_level_categories(client, catalog):
    body = client.get("/").data.decode()
    assert "Rings" in body
    assert "Necklaces" in body
    assert "Heavy Rings" not in body
    assert 'src="a.jpg"' in body


def test_category_detail(client, catalog):
    body = client.get(f"/category/{catalog['rings'].id}").data.decode()

    assert "Heavy Rings" in body
    assert "Band" in body
    assert "Signet" in body
    assert "Chain" not in body
    for image in ("a.jpg", "b.jpg", "c.jpg"):
        assert f'src="{image}"' in body


def test_category_detail_missing(client):
    assert client.get("/category/missing").status_code == 404


def test_api_categories_wire_shape(client, catalog):
    records = client.get("/api/categories").get_json()

    assert [r["name"] for r in records] == ["Heavy Rings", "Necklaces", "Rings"]
    assert set(records[0]) == {"id", "name", "description", "image_url", "parent_id"}
    assert records[0]["parent_id"] == catalog["rings"].id
    assert records[1]["parent_id"] is None
