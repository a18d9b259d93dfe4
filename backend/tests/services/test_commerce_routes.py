"""Commerce Routes - billing, calculators, inbox and wishlists over HTTP."""

import pytest

PROPOSAL = {
    "client": {"name": "Acme", "email": "buyer@example.com"},
    "line_items": [{"description": "Design", "quantity": 1, "rate": 100}],
    "tax_config": {"tax_rate": 8},
    "discount": {"type": "percentage", "value": 10},
}


@pytest.fixture
async def accepted_proposal(client):
    created = await client.post("/api/v1/proposals", json=PROPOSAL, headers={"X-User-Id": "admin-1"})
    assert created.status_code == 201, created.text
    proposal = created.json()
    await client.post(f"/api/v1/proposals/{proposal['id']}/send")
    res = await client.post(f"/api/v1/proposals/{proposal['id']}/accept")
    assert res.status_code == 200
    return res.json()


async def test_proposal_without_line_items_is_rejected(client):
    res = await client.post("/api/v1/proposals", json={**PROPOSAL, "line_items": []})
    assert res.status_code == 400


async def test_proposal_totals_are_server_computed(client):
    res = await client.post("/api/v1/proposals", json={
        **PROPOSAL,
        "line_items": [{"description": "Design", "quantity": 1, "rate": 100, "amount": 1}],
    })
    body = res.json()
    assert body["proposal_number"].startswith("PROP-")
    assert body["line_items"][0]["amount"] == 100
    assert body["total"] == 97.2


async def test_accept_then_convert_once(client, accepted_proposal):
    assert accepted_proposal["status"] == "accepted"
    pid = accepted_proposal["id"]

    res = await client.post(f"/api/v1/proposals/{pid}/convert", headers={"X-User-Id": "admin-1"})
    assert res.status_code == 201
    invoice = res.json()
    assert invoice["proposal_id"] == pid
    assert invoice["amount_due"] == 97.2
    assert invoice["created_by"] == "admin-1"

    again = await client.post(f"/api/v1/proposals/{pid}/convert")
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "PROPOSAL_ALREADY_CONVERTED"

    proposal = (await client.get(f"/api/v1/proposals/{pid}")).json()
    assert proposal["status"] == "converted"
    assert proposal["converted_to_invoice_id"] == invoice["id"]


async def test_editing_sent_proposal_conflicts(client, accepted_proposal):
    res = await client.patch(
        f"/api/v1/proposals/{accepted_proposal['id']}", json={"title": "Late change"},
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "DOCUMENT_NOT_EDITABLE"


async def test_patch_cannot_clear_client_or_line_items(client):
    pid = (await client.post("/api/v1/proposals", json=PROPOSAL)).json()["id"]

    for field in ("client", "line_items"):
        res = await client.patch(f"/api/v1/proposals/{pid}", json={field: None})
        assert res.status_code == 400
        assert res.json()["error"]["details"][0]["field"] == f"body.{field}"

    proposal = await client.get(f"/api/v1/proposals/{pid}")
    assert proposal.status_code == 200
    assert proposal.json()["client"]["email"] == "buyer@example.com"
    assert len(proposal.json()["line_items"]) == 1


async def test_proposal_response_carries_payment_method_totals(client):
    res = await client.post("/api/v1/proposals", json={
        **PROPOSAL,
        "processing_fee_config": {"enabled": True, "card_fee_percent": 3},
        "payment_method_discount": {"enabled": True, "ach_discount_percent": 2.5},
    })
    body = res.json()
    assert body["total"] == 97.2
    assert body["card_total"] == 100.12
    assert body["ach_total"] == 94.77
    assert body["payment_method_savings"] == "Save $2.43 (2.5%) by paying with ACH"

    plain = (await client.post("/api/v1/proposals", json=PROPOSAL)).json()
    assert plain["card_total"] == plain["ach_total"] == 97.2
    assert plain["payment_method_savings"] is None


async def test_invoice_payment_flow(client):
    invoice = (await client.post("/api/v1/invoices", json={
        "client": {"name": "Acme", "email": "ap@example.com"},
        "line_items": [{"description": "Hosting", "quantity": 2, "rate": 50}],
    })).json()
    iid = invoice["id"]

    draft_payment = await client.post(f"/api/v1/invoices/{iid}/payments", json={"amount": 10, "method": "card"})
    assert draft_payment.status_code == 409

    await client.post(f"/api/v1/invoices/{iid}/send")
    partial = (await client.post(f"/api/v1/invoices/{iid}/payments", json={"amount": 40, "method": "ach"})).json()
    assert partial["status"] == "partially_paid"
    assert partial["amount_due"] == 60

    paid = (await client.post(f"/api/v1/invoices/{iid}/payments", json={"amount": 60, "method": "check"})).json()
    assert paid["status"] == "paid"

    by_number = await client.get(f"/api/v1/invoices/by-number/{invoice['invoice_number']}")
    assert by_number.json()["id"] == iid


async def test_invoice_inherits_store_tax(client):
    await client.put("/api/v1/store-settings", json={"default_tax_rate": 10, "tax_label": "GST"})
    invoice = (await client.post("/api/v1/invoices", json={
        "client": {"name": "Acme", "email": "ap@example.com"},
        "line_items": [{"description": "Hosting", "quantity": 1, "rate": 100}],
    })).json()
    assert invoice["tax_config"] == {"tax_rate": 10, "tax_label": "GST"}
    assert invoice["total"] == 110


async def test_calculator_estimate_and_submission(client):
    seeded = (await client.post("/api/v1/calculators/seed-default")).json()
    assert seeded["created"] is True

    calculator = (await client.get("/api/v1/calculators/by-slug/website-calculator")).json()
    estimate = (await client.post(
        f"/api/v1/calculators/{calculator['id']}/estimate", json={"selections": {}},
    )).json()
    assert estimate["total_hours"] == 130
    assert estimate["total_price"] == 19500

    res = await client.post(f"/api/v1/calculators/{calculator['id']}/submissions", json={
        "selections": {"basic_search": True},
        "contact_info": {"name": "Dana", "email": "dana@example.com"},
    })
    assert res.status_code == 201
    assert res.json()["total_hours"] == 145

    inbox = (await client.get("/api/v1/contact-messages", params={"source": "calculator"})).json()
    assert len(inbox) == 1
    assert inbox[0]["metadata"]["submission_id"] == res.json()["id"]


async def test_negative_quantity_is_rejected(client):
    calculator = (await client.post("/api/v1/calculators/seed-default")).json()
    res = await client.post(
        f"/api/v1/calculators/{calculator['id']}/estimate",
        json={"selections": {"copywriting": True}, "quantities": {"copywriting": -5}},
    )
    assert res.status_code == 400
    assert res.json()["error"]["details"][0]["field"] == "body.quantities.copywriting"


async def test_calculator_step_without_kind_is_rejected(client):
    res = await client.post("/api/v1/calculators", json={
        "name": "Broken", "default_hourly_rate": 100,
        "steps": [{"id": "s1", "title": "S", "fields": [{"id": "x", "label": "X", "hours": 1}]}],
    })
    assert res.status_code == 400


async def test_contact_form_inbox(client):
    created = await client.post("/api/v1/contact-messages", json={
        "name": "Sam", "email": "sam@example.com", "subject": "Hi", "message": "Hello",
    })
    assert created.status_code == 201
    assert (await client.get("/api/v1/contact-messages/unread-count")).json() == {"count": 1}

    read = await client.post(
        f"/api/v1/contact-messages/{created.json()['id']}/read", headers={"X-User-Id": "admin-2"},
    )
    assert read.json()["read_by"] == "admin-2"


async def test_wishlist_round_trip(client):
    empty = await client.get("/api/v1/wishlists/u1")
    assert empty.status_code == 200
    assert empty.json()["items"] == []

    product = (await client.post("/api/v1/products", json={"name": "Kale", "price": 3})).json()
    body = {"product_id": product["id"], "user_email": "ann@example.com"}
    added = await client.post("/api/v1/wishlists/u1/items", json=body)
    assert added.status_code == 201
    assert added.json()["items"][0]["notify_when_restocked"] is True

    duplicate = await client.post("/api/v1/wishlists/u1/items", json=body)
    assert duplicate.status_code == 409
    assert duplicate.json()["error"]["code"] == "WISHLIST_DUPLICATE_ITEM"

    waiting = (await client.get(f"/api/v1/wishlists/waiting/{product['id']}")).json()
    assert [w["user_id"] for w in waiting] == ["u1"]

    refused = await client.post(f"/api/v1/wishlists/restock/{product['id']}")
    assert refused.status_code == 400

    await client.patch(f"/api/v1/products/{product['id']}", json={"stock": 5})
    sent = (await client.post(f"/api/v1/wishlists/restock/{product['id']}")).json()
    assert sent["notified"] == ["u1"]
