def test_list_reviews(client, db):
    db.reviews.insert_one({"name": "Ana", "details": "Great soup", "rating": 5})

    response = client.get("/reviews")
    assert response.status_code == 200
    [review] = response.json()
    assert review["rating"] == 5
    assert isinstance(review["_id"], str)
