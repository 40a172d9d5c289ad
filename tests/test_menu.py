from bson import ObjectId

MISSING_ID = "64b7f0c2a1b2c3d4e5f60718"

SALAD = {"name": "Caesar Salad", "category": "salad", "price": 9.5, "image": "salad.jpg"}


def test_list_menu_is_public(client, db):
    db.menu.insert_many([dict(SALAD), {"name": "Tomato Soup", "category": "soup", "price": 6}])

    response = client.get("/menu")
    assert response.status_code == 200
    names = sorted(item["name"] for item in response.json())
    assert names == ["Caesar Salad", "Tomato Soup"]


def test_list_empty_menu(client):
    assert client.get("/menu").json() == []


def test_admin_adds_and_deletes_item(client, db, admin_headers):
    response = client.post("/menu", json=SALAD, headers=admin_headers)
    assert response.status_code == 200
    item_id = response.json()["insertedId"]
    assert db.menu.find_one({"_id": ObjectId(item_id)})["price"] == 9.5

    deleted = client.delete(f"/menu/{item_id}", headers=admin_headers)
    assert deleted.status_code == 200
    assert deleted.json() == {"acknowledged": True, "deletedCount": 1}
    assert db.menu.count_documents({}) == 0


def test_delete_missing_item(client, admin_headers):
    response = client.delete(f"/menu/{MISSING_ID}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["deletedCount"] == 0


def test_non_admin_cannot_add(client, db, user_headers):
    response = client.post("/menu", json=SALAD, headers=user_headers)
    assert response.status_code == 403
    assert db.menu.count_documents({}) == 0
