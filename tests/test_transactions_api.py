"""Tests for the admin-only transaction ledger."""


def income(**overrides):
    payload = {"type": "income", "amount": 80.0, "description": "Corte feminino", "date": "2025-06-02"}
    payload.update(overrides)
    return payload


def test_transactions_require_admin(client, login_as, customer):
    assert client.get("/api/transactions").status_code == 401

    login_as(customer.id)
    assert client.get("/api/transactions").status_code == 403
    assert client.post("/api/transactions", json=income()).status_code == 403


def test_create_list_update_delete(client, login_as, admin):
    login_as(admin.id)

    created = client.post("/api/transactions", json=income())
    assert created.status_code == 201
    transaction_id = created.json()["id"]
    assert created.json()["appointmentId"] is None

    client.post("/api/transactions", json=income(type="expense", amount=25.0, description="Shampoo", date="2025-06-03"))
    listed = client.get("/api/transactions").json()
    assert [t["description"] for t in listed] == ["Shampoo", "Corte feminino"]

    updated = client.put(f"/api/transactions/{transaction_id}", json={"amount": 90.0})
    assert updated.status_code == 200
    assert updated.json()["amount"] == 90.0
    assert updated.json()["type"] == "income"

    assert client.delete(f"/api/transactions/{transaction_id}").status_code == 204
    missing = client.get(f"/api/transactions/{transaction_id}")
    assert missing.status_code == 404
    assert missing.json() == {"message": "Transaction not found"}


def test_transaction_linked_to_appointment(
    client, login_as, admin, customer, make_professional, make_service, make_appointment
):
    professional = make_professional()
    service = make_service(60)
    appointment = make_appointment(customer, professional, service, "10:00", "11:00", status="completed")
    login_as(admin.id)

    linked = client.post("/api/transactions", json=income(appointmentId=appointment.id))
    assert linked.status_code == 201
    assert linked.json()["appointmentId"] == appointment.id

    assert client.post("/api/transactions", json=income(appointmentId=9999)).status_code == 404

    # An appointment with ledger entries is kept for history
    assert client.delete(f"/api/appointments/{appointment.id}").status_code == 409


def test_invalid_transactions(client, login_as, admin):
    login_as(admin.id)
    assert client.post("/api/transactions", json=income(type="refund")).status_code == 422
    assert client.post("/api/transactions", json=income(amount=0)).status_code == 422
    assert client.post("/api/transactions", json=income(description=" ")).status_code == 422
