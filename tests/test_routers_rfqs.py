"""
test_routers_rfqs.py — Tests for quotedesk/routers/rfqs.py

RFQ browsing, detail, quotation submission rules, recommendations and
RFQ analytics.

Called by: pytest
Depends on: conftest (client, rfq, product, rfq_quotation fixtures)
"""

from datetime import datetime, timedelta, timezone

from quotedesk.models import Quotation, Rfq

QUOTE = {"pricePerUnit": 12.5, "moq": 100, "leadTime": "15-20 days", "paymentTerms": "T/T"}


def test_list_open_rfqs(client, rfq):
    body = client.get("/api/suppliers/rfqs").json()
    assert body["total"] == 1
    row = body["rfqs"][0]
    assert row["id"] == rfq.id
    assert row["hasQuoted"] is False
    assert row["categoryName"] == "Fasteners"
    assert row["buyerCompany"] == "Acme Manufacturing"


def test_list_excludes_closed_by_default(client, db_session, rfq):
    rfq.status = "closed"
    db_session.commit()
    assert client.get("/api/suppliers/rfqs").json()["total"] == 0
    assert client.get("/api/suppliers/rfqs", params={"status": "closed"}).json()["total"] == 1


def test_list_has_quoted_filter(client, rfq, rfq_quotation):
    quoted = client.get("/api/suppliers/rfqs", params={"hasQuoted": "true"}).json()["rfqs"]
    assert [r["id"] for r in quoted] == [rfq.id]
    assert quoted[0]["myQuotation"]["id"] == rfq_quotation.id
    assert quoted[0]["quotationCount"] == 1
    assert client.get("/api/suppliers/rfqs", params={"hasQuoted": "false"}).json()["rfqs"] == []


def test_search_rfqs(client, rfq):
    assert client.get("/api/suppliers/rfqs", params={"search": "din 933"}).json()["total"] == 1
    assert client.get("/api/suppliers/rfqs", params={"search": "capacitor"}).json()["total"] == 0


def test_rfq_detail(client, rfq):
    resp = client.get(f"/api/suppliers/rfqs/{rfq.id}")
    assert resp.status_code == 200
    assert resp.json()["quantity"] == 500
    assert client.get("/api/suppliers/rfqs/missing").status_code == 404


def test_submit_quotation(client, db_session, rfq):
    resp = client.post(f"/api/suppliers/rfqs/{rfq.id}/quotations", json=QUOTE)
    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "sent"
    # 12.50 × RFQ quantity 500
    assert body["totalPrice"] == 6250.0

    q = db_session.query(Quotation).one()
    assert q.validity_period == 30
    assert (q.valid_until - q.created_at).days == 30


def test_submit_twice_is_409(client, rfq, rfq_quotation):
    resp = client.post(f"/api/suppliers/rfqs/{rfq.id}/quotations", json=QUOTE)
    assert resp.status_code == 409
    assert "already submitted" in resp.json()["detail"]


def test_submit_on_closed_rfq_is_400(client, db_session, rfq):
    rfq.status = "closed"
    db_session.commit()
    assert client.post(f"/api/suppliers/rfqs/{rfq.id}/quotations", json=QUOTE).status_code == 400


def test_submit_on_expired_rfq_is_400(client, db_session, rfq):
    rfq.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    db_session.commit()
    resp = client.post(f"/api/suppliers/rfqs/{rfq.id}/quotations", json=QUOTE)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "RFQ is no longer accepting quotations"


def test_submit_moq_above_quantity_is_400(client, rfq):
    resp = client.post(f"/api/suppliers/rfqs/{rfq.id}/quotations", json={**QUOTE, "moq": 600})
    assert resp.status_code == 400


def test_submit_validation(client, rfq):
    assert client.post(f"/api/suppliers/rfqs/{rfq.id}/quotations", json={**QUOTE, "pricePerUnit": -1}).status_code == 422
    assert client.post(f"/api/suppliers/rfqs/{rfq.id}/quotations", json={**QUOTE, "moq": 0}).status_code == 422


def test_submit_unknown_rfq_is_404(client):
    assert client.post("/api/suppliers/rfqs/missing/quotations", json=QUOTE).status_code == 404


def test_recommended_uses_product_categories(client, db_session, rfq, product):
    body = client.get("/api/suppliers/rfqs/recommended").json()
    assert [r["id"] for r in body] == [rfq.id]


def test_recommended_skips_quoted_rfqs(client, rfq, product, rfq_quotation):
    assert client.get("/api/suppliers/rfqs/recommended").json() == []


def test_recommended_empty_without_products(client, rfq):
    assert client.get("/api/suppliers/rfqs/recommended").json() == []


def test_rfq_analytics(client, db_session, rfq, rfq_quotation):
    body = client.get("/api/suppliers/rfqs/analytics").json()
    assert body["totalRfqsAvailable"] == 1
    assert body["quotedRfqs"] == 1
    assert body["pendingQuotations"] == 1
    assert body["quotationAcceptanceRate"] == 0
    assert body["topCategories"][0]["categoryName"] == "Fasteners"
    assert body["topCategories"][0]["quotationCount"] == 1
