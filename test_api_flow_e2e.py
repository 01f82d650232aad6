# test_api_flow_e2e.py
import os

from conftest import jprint

DAY = "2031-01-15"


def test_requires_token(client, base_url):
    r = client.get(f"{base_url}/customers/")
    assert r.status_code == 401


def test_day_of_service_flow(client, base_url, auth_headers, rng_suffix, bill_dir):
    H = auth_headers

    # ===== 1. Catalog =====
    r = client.put(f"{base_url}/catalog/lunch", headers=H, params={"subcategory": "curry"},
                   json={"name": f"Paneer Curry {rng_suffix}", "localized_name": "పనీర్ కూర", "price": 80})
    curry = jprint("PUT /catalog/lunch (curry)", r)["name"]
    r = client.put(f"{base_url}/catalog/lunch", headers=H, params={"subcategory": "others"},
                   json={"name": f"Rice {rng_suffix}", "price": 50})
    rice = jprint("PUT /catalog/lunch (rice)", r)["name"]

    r = client.put(f"{base_url}/catalog/lunch", headers=H, json={"name": "No Sub", "price": 10})
    assert r.status_code == 400, r.text

    r = client.get(f"{base_url}/catalog/lunch", headers=H)
    names = [i["name"] for i in jprint("GET /catalog/lunch", r)]
    assert curry in names and rice in names

    # ===== 2. Menu for the day =====
    r = client.post(f"{base_url}/menus/{DAY}", headers=H, json={"picks": {"lunch": [
        {"name": curry, "subcategory": "curry"}, {"name": rice},
    ]}})
    saved = jprint("POST /menus/{date}", r)
    assert "Paneer Curry" in saved["messages"]["english"]

    r = client.get(f"{base_url}/menus/{DAY}/lunch", headers=H)
    assert [e["name"] for e in jprint("GET /menus/{date}/lunch", r)["items"]] == [curry, rice]

    r = client.get(f"{base_url}/menus/{DAY}/dinner", headers=H)
    assert r.status_code == 404
    assert r.json()["detail"] == "Menu not set for this date & meal."

    # ===== 3. Customers =====
    r = client.post(f"{base_url}/customers/", headers=H,
                    json={"name": f"Asha {rng_suffix}", "phone": "9000000001"})
    asha = jprint("POST /customers/", r)
    r = client.post(f"{base_url}/customers/", headers=H, json={"name": "", "phone": "1"})
    assert r.status_code == 400

    # ===== 4. Quote + confirm =====
    r = client.get(f"{base_url}/orders/delivery-charges", headers=H)
    assert jprint("GET /orders/delivery-charges", r) == {"default": 30.0, "presets": [0.0, 30.0, 60.0]}

    draft = {
        "customer_id": asha["id"], "date": DAY, "meal_type": "lunch",
        "selections": [{"name": curry, "quantity": 2}],
        "delivery_charge": 30,
    }
    r = client.post(f"{base_url}/orders/quote", headers=H, json=draft)
    assert jprint("POST /orders/quote", r) == {"subtotal": 160, "delivery_charge": 30, "grand_total": 190}

    r = client.post(f"{base_url}/orders/", headers=H, json={**draft, "selections": []})
    assert r.status_code == 400

    r = client.post(f"{base_url}/orders/", headers=H, json=draft)
    order = jprint("POST /orders/", r)
    assert order["grand_total"] == 190
    assert order["payment_mode"] == "offline" and order["delivered"] is False
    oid = order["id"]

    expected_bill = f"150131_lunch_Asha_{rng_suffix}.png"
    assert os.path.exists(os.path.join(bill_dir, expected_bill))

    r = client.get(f"{base_url}/session/dashboards", headers=H)
    dash = jprint("GET /session/dashboards", r)
    assert dash["cooking"]["lunch"][curry] >= 2

    # ===== 5. Edit: add rice, recompute =====
    r = client.patch(f"{base_url}/orders/{asha['id']}/{oid}", headers=H, json={"items": [
        {"name": curry, "unit_price": 80, "quantity": 2},
        {"name": rice, "unit_price": 50, "quantity": 1},
    ]})
    assert jprint("PATCH /orders/{cid}/{oid}", r)["grand_total"] == 240

    # ===== 6. Reports =====
    r = client.get(f"{base_url}/reports/summary", headers=H, params={"date": DAY, "meal_type": "lunch"})
    summary = jprint("GET /reports/summary", r)
    assert summary["per_item_cooking_totals"]["lunch"][rice] == 1
    assert summary["meal_totals"]["lunch"] == 210
    assert summary["delivery_totals"]["lunch"] == 30
    assert summary["grand_total"] == 240

    # ===== 7. Payments =====
    pay = f"{base_url}/deliveries/{asha['id']}/{oid}/payment"
    assert client.post(pay, headers=H, json={"amount": 0}).status_code == 400
    jprint("POST payment 100", client.post(pay, headers=H, json={"amount": 100}))
    paid = jprint("POST payment 140", client.post(pay, headers=H, json={"amount": 140, "mode": "online",
                                                                        "delivered": True}))
    assert paid["payment_received"] == 240

    r = client.get(f"{base_url}/deliveries/", headers=H, params={"date": DAY})
    row = jprint("GET /deliveries/", r)["lunch"][0]
    assert (row["status"], row["due"], row["payment_mode"], row["delivered"]) == ("paid", 0, "online", True)

    # ===== 8. Cleanup =====
    r = client.delete(f"{base_url}/orders/{asha['id']}/{oid}/items/1", headers=H)
    assert jprint("DELETE item", r)["order"]["grand_total"] == 190
    r = client.delete(f"{base_url}/orders/{asha['id']}", headers=H, params={"meal_type": "lunch", "date": DAY})
    assert jprint("DELETE meal batch", r) == {"deleted": 1}
    r = client.get(f"{base_url}/orders/{asha['id']}/{oid}", headers=H)
    assert r.status_code == 404

    r = client.post(f"{base_url}/session/clear", headers=H)
    assert jprint("POST /session/clear", r)["cooking"] == {}
