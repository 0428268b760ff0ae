def test_categories_include_active_sub_categories(client, db, category):
    category["other_sub"].is_active = False
    db.commit()

    response = client.get("/api/v1/categories")
    assert response.status_code == 200
    data = response.json()["data"]
    assert [c["name"] for c in data] == ["Lập trình", "Âm nhạc"]
    assert [s["name"] for s in data[0]["sub_categories"]] == ["Backend"]
    assert data[1]["sub_categories"] == []


def test_cities(client, city):
    data = client.get("/api/v1/cities").json()["data"]
    assert data[0]["city_code"] == "TPE"
