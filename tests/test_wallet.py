from app.constants.statuses import PayoutStatus, TransactionStatus, TransactionType
from app.models import PayoutRequest, Wallet, WalletTransaction
from tests.conftest import auth_headers, make_wallet


def test_wallet_created_lazily(client, db, customer):
    response = client.get("/wallet", headers=auth_headers(customer))

    assert response.status_code == 200
    body = response.json()
    assert body["balance"] == 0.0
    assert body["availableMinutes"] == 0
    assert body["minutePurchases"] == []
    assert db.query(Wallet).filter(Wallet.user_id == customer.id).count() == 1


def test_balance_without_wallet_is_zero(client, customer):
    body = client.get("/wallet/balance", headers=auth_headers(customer)).json()
    assert body == {"balance": 0.0, "availableMinutes": 0}


def test_minute_packages_listed(client, customer):
    packages = client.get("/minute-packages", headers=auth_headers(customer)).json()
    assert [p["id"] for p in packages] == ["pkg_30", "pkg_60", "pkg_120", "pkg_300"]
    assert packages[1] == {"id": "pkg_60", "name": "Basic", "minutes": 60, "price": 90.0}


def test_purchase_adds_minutes_and_ledger_row(client, db, customer):
    response = client.post("/wallet/purchase", json={"packageId": "pkg_120"}, headers=auth_headers(customer))

    assert response.status_code == 201
    purchase = response.json()
    assert purchase["minutesPurchased"] == 120
    assert purchase["paymentMethod"] == "MOBILE_MONEY"
    assert purchase["paymentStatus"] == "COMPLETED"
    assert purchase["transactionRef"].startswith("REF-")

    wallet = client.get("/wallet", headers=auth_headers(customer)).json()
    assert wallet["availableMinutes"] == 120
    assert wallet["totalMinutesPurchased"] == 120
    assert len(wallet["minutePurchases"]) == 1

    deposit = db.query(WalletTransaction).one()
    assert deposit.type == TransactionType.DEPOSIT.value
    assert deposit.amount == 160.0


def test_purchase_unknown_package(client, customer):
    response = client.post("/wallet/purchase", json={"packageId": "pkg_999"}, headers=auth_headers(customer))
    assert response.status_code == 404


def test_payout_holds_balance(client, db, provider):
    make_wallet(db, provider, balance=200.0)

    response = client.post(
        "/wallet/payout", json={"amount": 150.0, "bankDetails": "ZANACO 0012345678"}, headers=auth_headers(provider)
    )

    assert response.status_code == 201
    assert response.json()["status"] == "PENDING"
    db.expire_all()
    wallet = db.query(Wallet).filter(Wallet.user_id == provider.id).one()
    assert wallet.balance == 50.0
    withdrawal = db.query(WalletTransaction).one()
    assert withdrawal.type == TransactionType.WITHDRAWAL.value
    assert withdrawal.status == TransactionStatus.PENDING.value


def test_payout_cannot_exceed_balance(client, db, provider):
    make_wallet(db, provider, balance=20.0)

    response = client.post(
        "/wallet/payout", json={"amount": 50.0, "bankDetails": "ZANACO 0012345678"}, headers=auth_headers(provider)
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Insufficient balance"
    assert db.query(PayoutRequest).count() == 0


def test_payout_input_validated(client, provider):
    headers = auth_headers(provider)
    assert client.post("/wallet/payout", json={"amount": -5, "bankDetails": "x"}, headers=headers).status_code == 400
    assert client.post("/wallet/payout", json={"amount": 5, "bankDetails": ""}, headers=headers).status_code == 400


def _request_payout(client, db, provider, amount=100.0):
    make_wallet(db, provider, balance=amount)
    return client.post(
        "/wallet/payout", json={"amount": amount, "bankDetails": "ACC-998877"}, headers=auth_headers(provider)
    ).json()


def test_admin_approves_payout(client, db, provider, admin):
    payout = _request_payout(client, db, provider)

    response = client.post(
        f"/admin/payouts/{payout['id']}/review", json={"status": "APPROVED"}, headers=auth_headers(admin)
    )

    assert response.status_code == 200
    assert response.json()["status"] == PayoutStatus.APPROVED.value
    assert response.json()["processedAt"] is not None
    db.expire_all()
    assert db.query(WalletTransaction).one().status == TransactionStatus.COMPLETED.value


def test_admin_rejection_refunds(client, db, provider, admin):
    payout = _request_payout(client, db, provider)

    client.post(f"/admin/payouts/{payout['id']}/review", json={"status": "REJECTED"}, headers=auth_headers(admin))

    db.expire_all()
    assert db.query(Wallet).filter(Wallet.user_id == provider.id).one().balance == 100.0
    assert db.query(WalletTransaction).one().status == TransactionStatus.FAILED.value


def test_payout_reviewed_only_once(client, db, provider, admin):
    payout = _request_payout(client, db, provider)
    url = f"/admin/payouts/{payout['id']}/review"

    client.post(url, json={"status": "REJECTED"}, headers=auth_headers(admin))

    assert client.post(url, json={"status": "APPROVED"}, headers=auth_headers(admin)).status_code == 409


def test_payout_admin_routes_require_admin(client, db, provider):
    payout = _request_payout(client, db, provider)
    headers = auth_headers(provider)

    assert client.get("/admin/payouts", headers=headers).status_code == 403
    assert (
        client.post(f"/admin/payouts/{payout['id']}/review", json={"status": "APPROVED"}, headers=headers).status_code
        == 403
    )


def test_admin_lists_pending_payouts(client, db, provider, admin):
    _request_payout(client, db, provider)
    payouts = client.get("/admin/payouts", params={"status": "PENDING"}, headers=auth_headers(admin)).json()
    assert len(payouts) == 1


def test_transactions_list_ledger_rows(client, db, provider):
    make_wallet(db, provider, balance=300.0)
    headers = auth_headers(provider)
    client.post("/wallet/purchase", json={"packageId": "pkg_30"}, headers=headers)
    client.post("/wallet/payout", json={"amount": 100, "bankDetails": "ACC 0012345678"}, headers=headers)

    rows = client.get("/wallet/transactions", headers=headers).json()

    assert {(r["type"], r["status"]) for r in rows} == {
        (TransactionType.DEPOSIT.value, TransactionStatus.COMPLETED.value),
        (TransactionType.WITHDRAWAL.value, TransactionStatus.PENDING.value),
    }


def test_transactions_empty_without_wallet(client, customer):
    assert client.get("/wallet/transactions", headers=auth_headers(customer)).json() == []
