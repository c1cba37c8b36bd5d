from datetime import date
from decimal import Decimal
from io import BytesIO

import services.rent_sweep as rent_sweep
from models import Expense, Notification, Property
from models.property import PropertyStatus
from tests.conftest import make_expense, make_lease, make_owner, make_payment, make_property, make_tenant


def _create_owner(client, name="Awa Diallo"):
    response = client.post("/api/owners", json={"name": name, "phone": "+225 0700000000"})
    assert response.status_code == 201
    return response.json()


def _create_property(client, owner_id, name="Villa 3", rent=150000, commission=10):
    response = client.post("/api/properties", json={
        "owner_id": owner_id,
        "name": name,
        "address": "Riviera 3, Abidjan",
        "type": "house",
        "monthly_rent": rent,
        "commission_percent": commission,
    })
    assert response.status_code == 201
    return response.json()


def _create_tenant(client, name="Koffi Yao"):
    response = client.post("/api/tenants", json={"name": name, "phone": "+225 0500000000"})
    assert response.status_code == 201
    return response.json()


def _create_lease(client, tenant_id, property_id, start="2026-03-01"):
    response = client.post("/api/leases", json={
        "tenant_id": tenant_id,
        "property_id": property_id,
        "deposit": 300000,
        "start_date": start,
    })
    assert response.status_code == 201
    return response.json()


class TestOwnersAndProperties:

    def test_owner_crud(self, client):
        owner = _create_owner(client)
        assert owner["property_count"] == 0

        response = client.put(f"/api/owners/{owner['id']}", json={"email": "awa@example.com"})
        assert response.status_code == 200
        assert response.json()["email"] == "awa@example.com"
        assert response.json()["name"] == "Awa Diallo"

        listing = client.get("/api/owners", params={"search": "awa"}).json()
        assert listing["total"] == 1

        assert client.delete(f"/api/owners/{owner['id']}").status_code == 204
        assert client.get(f"/api/owners/{owner['id']}").status_code == 404

    def test_property_starts_available_and_lists_under_owner(self, client):
        owner = _create_owner(client)
        property_obj = _create_property(client, owner["id"])

        assert property_obj["status"] == "available"
        assert property_obj["owner_name"] == "Awa Diallo"
        assert Decimal(property_obj["commission_percent"]) == Decimal("10")

        owned = client.get(f"/api/owners/{owner['id']}/properties").json()
        assert [p["name"] for p in owned["properties"]] == ["Villa 3"]
        assert client.get(f"/api/owners/{owner['id']}").json()["property_count"] == 1

    def test_property_for_unknown_owner(self, client):
        response = client.post("/api/properties", json={
            "owner_id": 99, "name": "X", "address": "Y", "type": "shop", "monthly_rent": 1000,
        })
        assert response.status_code == 404

    def test_invalid_property_type(self, client):
        owner = _create_owner(client)
        response = client.post("/api/properties", json={
            "owner_id": owner["id"], "name": "X", "address": "Y", "type": "castle", "monthly_rent": 1000,
        })
        assert response.status_code == 422

    def test_owner_with_properties_cannot_be_deleted(self, client):
        owner = _create_owner(client)
        _create_property(client, owner["id"])

        response = client.delete(f"/api/owners/{owner['id']}")

        assert response.status_code == 409
        assert response.json()["detail"] == f"Cannot delete owner {owner['id']}: 1 property(ies) still depend on it"

    def test_property_with_expense_cannot_be_deleted(self, client, db):
        owner = make_owner(db)
        property_obj = make_property(db, owner)
        make_expense(db, property_obj, "15000")
        db.commit()

        response = client.delete(f"/api/properties/{property_obj.id}")

        assert response.status_code == 409
        assert "1 expense(s)" in response.json()["detail"]


class TestLeases:

    def test_lease_lifecycle_updates_property_status(self, client):
        owner = _create_owner(client)
        property_obj = _create_property(client, owner["id"])
        tenant = _create_tenant(client)

        lease = _create_lease(client, tenant["id"], property_obj["id"])
        assert lease["status"] == "active"
        assert Decimal(lease["monthly_rent"]) == Decimal("150000")
        assert lease["tenant_name"] == "Koffi Yao"
        assert client.get(f"/api/properties/{property_obj['id']}").json()["status"] == "occupied"

        ended = client.post(f"/api/leases/{lease['id']}/end", json={"end_date": "2026-06-30"})
        assert ended.status_code == 200
        assert ended.json()["status"] == "ended"
        assert client.get(f"/api/properties/{property_obj['id']}").json()["status"] == "available"

        again = client.post(f"/api/leases/{lease['id']}/end", json={"end_date": "2026-07-31"})
        assert again.status_code == 409

    def test_second_active_lease_is_refused(self, client):
        owner = _create_owner(client)
        property_obj = _create_property(client, owner["id"])
        _create_lease(client, _create_tenant(client)["id"], property_obj["id"])

        response = client.post("/api/leases", json={
            "tenant_id": _create_tenant(client, name="Other")["id"],
            "property_id": property_obj["id"],
            "start_date": "2026-04-01",
        })

        assert response.status_code == 409

    def test_end_date_before_start_is_rejected(self, client):
        response = client.post("/api/leases", json={
            "tenant_id": 1, "property_id": 1, "start_date": "2026-04-01", "end_date": "2026-03-01",
        })
        assert response.status_code == 422

    def test_delete_lease_frees_property(self, client, db):
        property_obj = make_property(db, make_owner(db))
        lease = make_lease(db, make_tenant(db), property_obj)
        db.commit()

        assert client.delete(f"/api/leases/{lease.id}").status_code == 204

        db.expire_all()
        assert db.get(Property, property_obj.id).status == PropertyStatus.AVAILABLE

    def test_filter_by_status(self, client):
        owner = _create_owner(client)
        first = _create_property(client, owner["id"], name="P1")
        second = _create_property(client, owner["id"], name="P2")
        lease = _create_lease(client, _create_tenant(client)["id"], first["id"])
        _create_lease(client, _create_tenant(client, name="T2")["id"], second["id"])
        client.post(f"/api/leases/{lease['id']}/end", json={"end_date": "2026-03-31"})

        active = client.get("/api/leases", params={"status": "active"}).json()
        assert active["total"] == 1
        assert active["leases"][0]["property_name"] == "P2"


class TestPayments:

    def _lease(self, client):
        owner = _create_owner(client)
        property_obj = _create_property(client, owner["id"], rent=100000)
        return _create_lease(client, _create_tenant(client)["id"], property_obj["id"])

    def test_multi_month_payment(self, client):
        lease = self._lease(client)

        response = client.post("/api/payments", json={
            "lease_id": lease["id"],
            "type": "rent",
            "target_month": "2026-03",
            "months_count": 3,
            "paid_date": "2026-03-02",
        })

        assert response.status_code == 201
        body = response.json()
        assert body["total"] == 3
        assert [p["target_month"] for p in body["payments"]] == ["2026-03", "2026-04", "2026-05"]
        assert all(Decimal(p["amount"]) == Decimal("100000") for p in body["payments"])

        march = client.get("/api/payments", params={"lease_id": lease["id"], "month": "2026-04"}).json()
        assert march["total"] == 1

    def test_deposit_over_several_months_is_rejected(self, client):
        lease = self._lease(client)
        response = client.post("/api/payments", json={
            "lease_id": lease["id"], "type": "deposit", "months_count": 2, "paid_date": "2026-03-02",
        })
        assert response.status_code == 422

    def test_invalid_month_format(self, client):
        lease = self._lease(client)
        response = client.post("/api/payments", json={
            "lease_id": lease["id"], "target_month": "2026-13", "paid_date": "2026-03-02",
        })
        assert response.status_code == 422

    def test_payment_for_unknown_lease(self, client):
        response = client.post("/api/payments", json={"lease_id": 77, "paid_date": "2026-03-02"})
        assert response.status_code == 404

    def test_arrears(self, client):
        lease = self._lease(client)

        response = client.post("/api/payments/arrears", json={
            "lease_id": lease["id"], "from_month": "2026-01", "to_month": "2026-02",
            "paid_date": "2026-03-10", "notes": "late",
        })

        assert response.status_code == 201
        payments = response.json()["payments"]
        assert [p["target_month"] for p in payments] == ["2026-01", "2026-02"]
        assert payments[0]["notes"] == "Arrears - late"

    def test_receipt(self, client):
        lease = self._lease(client)
        created = client.post("/api/payments", json={
            "lease_id": lease["id"], "target_month": "2026-03", "months_count": 2, "paid_date": "2026-03-02",
        }).json()["payments"]

        receipt = client.get(f"/api/payments/{created[0]['id']}/receipt").json()

        assert receipt["total"] == 200000.0
        assert receipt["tenant"]["name"] == "Koffi Yao"
        assert receipt["property"]["name"] == "Villa 3"
        assert len(receipt["lines"]) == 2
        assert client.get("/api/payments/999/receipt").status_code == 404

    def test_lease_with_payments_cannot_be_deleted(self, client):
        lease = self._lease(client)
        client.post("/api/payments", json={"lease_id": lease["id"], "paid_date": "2026-03-02"})

        response = client.delete(f"/api/leases/{lease['id']}")

        assert response.status_code == 409
        assert "1 payment(s)" in response.json()["detail"]

    def test_update_and_delete_payment(self, client):
        lease = self._lease(client)
        [payment] = client.post("/api/payments", json={
            "lease_id": lease["id"], "paid_date": "2026-03-02",
        }).json()["payments"]

        updated = client.put(f"/api/payments/{payment['id']}", json={"target_month": "2026-04", "notes": "moved"})
        assert updated.status_code == 200
        assert updated.json()["target_month"] == "2026-04"
        assert updated.json()["notes"] == "moved"

        assert client.delete(f"/api/payments/{payment['id']}").status_code == 204
        assert client.get(f"/api/payments/{payment['id']}").status_code == 404


class TestExpenses:

    def test_expense_crud(self, client):
        owner = _create_owner(client)
        property_obj = _create_property(client, owner["id"])

        response = client.post("/api/expenses", json={
            "property_id": property_obj["id"],
            "amount": 25000,
            "category": "water",
            "description": "Water bill",
            "expense_date": "2026-03-12",
        })
        assert response.status_code == 201
        expense = response.json()
        assert expense["property_name"] == "Villa 3"

        listing = client.get("/api/expenses", params={"category": "water"}).json()
        assert listing["total"] == 1

        updated = client.put(f"/api/expenses/{expense['id']}", json={"amount": 30000})
        assert Decimal(updated.json()["amount"]) == Decimal("30000")

        assert client.delete(f"/api/expenses/{expense['id']}").status_code == 204

    def test_receipt_upload_replaces_previous_blob(self, client, db, monkeypatch):
        property_obj = make_property(db, make_owner(db))
        expense = make_expense(db, property_obj, "25000")
        expense.receipt_url = "https://acct.blob.core.windows.net/expense-receipts/old.pdf"
        db.commit()

        uploaded = []
        deleted = []

        def fake_upload(file, container, prefix):
            uploaded.append((file.filename, container, prefix))
            return f"https://acct.blob.core.windows.net/{container}/{prefix}/new.pdf"

        monkeypatch.setattr("routers.expenses.upload_to_blob", fake_upload)
        monkeypatch.setattr("routers.expenses.delete_from_blob", deleted.append)

        response = client.post(
            f"/api/expenses/{expense.id}/receipt",
            files={"receipt": ("scan.pdf", BytesIO(b"%PDF-1.4"), "application/pdf")},
        )

        assert response.status_code == 200
        assert response.json()["receipt_url"].endswith(f"property-{property_obj.id}/new.pdf")
        assert uploaded == [("scan.pdf", "expense-receipts", f"property-{property_obj.id}")]
        assert deleted == ["https://acct.blob.core.windows.net/expense-receipts/old.pdf"]
        db.expire_all()
        assert db.get(Expense, expense.id).receipt_url.endswith("/new.pdf")


class TestNotifications:

    def test_overdue_check_endpoint_is_idempotent(self, client, db, monkeypatch):
        monkeypatch.setattr(rent_sweep, "GRACE_PERIOD_DAYS", 1)
        property_obj = make_property(db, make_owner(db), name="Studio B2", rent="80000")
        make_lease(db, make_tenant(db), property_obj)
        db.commit()

        first = client.post("/api/notifications/check-overdue-rents")
        second = client.post("/api/notifications/check-overdue-rents")

        assert first.status_code == 200
        body = first.json()
        assert body["success"] is True
        assert body["notificationsCreated"] == 1
        assert body["overdueContracts"] == 1
        assert body["details"][0]["propertyName"] == "Studio B2"
        assert body["details"][0]["amountRemaining"] == 80000.0
        assert second.json()["notificationsCreated"] == 0
        assert second.json()["overdueContracts"] == 0

        reminders = client.get("/api/notifications", params={"type": "rent_reminder"}).json()
        assert reminders["total"] == 1
        assert reminders["notifications"][0]["tenant_name"] == "Koffi Yao"

    def test_create_and_mark_received(self, client, db):
        tenant = make_tenant(db)
        db.commit()

        created = client.post("/api/notifications", json={
            "tenant_id": tenant.id, "message": "Payment of March received",
        })
        assert created.status_code == 201
        notification = created.json()
        assert notification["type"] == "confirmation"
        assert notification["status"] == "sent"
        assert notification["sent_at"] is not None

        received = client.patch(f"/api/notifications/{notification['id']}/received")
        assert received.status_code == 200
        assert received.json()["status"] == "received"
        assert received.json()["received_at"] is not None

        assert client.delete(f"/api/notifications/{notification['id']}").status_code == 204
        db.expire_all()
        assert db.get(Notification, notification["id"]) is None


class TestReports:

    def _seed(self, db):
        owner = make_owner(db)
        property_obj = make_property(db, owner, rent="100000", commission="10")
        lease = make_lease(db, make_tenant(db), property_obj)
        make_payment(db, lease, "50000", target_month=date(2026, 3, 1))
        make_expense(db, property_obj, "10000")
        db.commit()
        return owner, lease

    def test_owner_report(self, client, db):
        owner, _ = self._seed(db)

        response = client.get(f"/api/reports/owners/{owner.id}", params={"month": "2026-03"})

        assert response.status_code == 200
        report = response.json()
        assert report["month"] == "2026-03"
        assert report["tenants"][0]["arrears"] == 50000.0
        assert report["tenants"][0]["months_paid"] == ["Mar"]
        assert report["totals"]["commission"] == 5000.0
        assert report["totals"]["net_payable"] == 35000.0

    def test_owner_report_errors(self, client, db):
        owner, _ = self._seed(db)
        assert client.get("/api/reports/owners/999", params={"month": "2026-03"}).status_code == 404
        assert client.get(f"/api/reports/owners/{owner.id}", params={"month": "March"}).status_code == 400

    def test_report_cache_is_invalidated_by_new_payment(self, client, db, report_cache):
        owner, lease = self._seed(db)
        url = f"/api/reports/owners/{owner.id}"

        assert client.get(url, params={"month": "2026-03"}).json()["tenants"][0]["arrears"] == 50000.0
        assert len(report_cache) == 1

        client.post("/api/payments", json={
            "lease_id": lease.id, "target_month": "2026-03", "amount": 50000, "paid_date": "2026-03-20",
        })
        assert len(report_cache) == 0

        assert client.get(url, params={"month": "2026-03"}).json()["tenants"][0]["arrears"] == 0.0

    def test_agency_report_snapshots(self, client, db):
        self._seed(db)

        created = client.post("/api/reports/agency", params={"month": "2026-03"})
        assert created.status_code == 201
        body = created.json()
        assert body["report"]["totals"]["total_commission"] == 5000.0
        snapshot_id = body["snapshot_id"]

        listing = client.get("/api/reports/snapshots").json()
        assert listing["total"] == 1
        assert listing["snapshots"][0]["netProfit"] == 5000.0
        assert "detailPayload" not in listing["snapshots"][0]

        detail = client.get(f"/api/reports/snapshots/{snapshot_id}").json()
        assert detail["totalRevenue"] == 50000.0
        assert detail["detailPayload"]["month"] == "2026-03"

        assert client.delete(f"/api/reports/snapshots/{snapshot_id}").status_code == 204
        assert client.get(f"/api/reports/snapshots/{snapshot_id}").status_code == 404

    def test_trend_and_summary(self, client, db):
        self._seed(db)

        trend = client.get("/api/reports/trend", params={"month": "2026-03"}).json()
        assert len(trend["historical"]) == 12
        assert len(trend["forecast"]) == 2

        summary = client.get("/api/reports/summary", params={"month": "2026-03"}).json()
        assert summary["totals"]["revenue"] == 50000.0
        assert summary["totals"]["expenses"] == 10000.0

    def test_dashboard(self, client, db):
        self._seed(db)

        response = client.get("/api/reports/dashboard", params={"month": "2026-03"})

        assert response.status_code == 200
        body = response.json()
        assert body["occupancy"]["total"] == 1
        assert len(body["payment_status"]) == 6
        assert body["payment_status"][-1]["paid"] == 50000.0
        assert client.get("/api/reports/dashboard", params={"month": "03-2026"}).status_code == 400
