from conftest import make_auth_headers, make_user


def add_expense(client, headers, group_id, payload):
    response = client.post(f"/groups/{group_id}/expenses", headers=headers, json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_equal_split_balance(client, auth_headers, group_with_members):
    group_id, (alice, bob, carol) = group_with_members

    # Alice pays 300 split three ways: Alice +200, Bob -100, Carol -100
    add_expense(client, auth_headers, group_id, {
        "description": "Hotel",
        "amount": 300,
        "payer_id": alice.id,
        "split_type": "equal",
        "split_between": [alice.id, bob.id, carol.id]
    })

    response = client.get(f"/groups/{group_id}/balances", headers=auth_headers)
    assert response.status_code == 200
    balances = {b["user"]["id"]: b["amount"] for b in response.json()}
    assert balances == {alice.id: 200.0, bob.id: -100.0, carol.id: -100.0}

def test_custom_split_balance(client, auth_headers, group_with_members):
    group_id, (alice, bob, carol) = group_with_members

    add_expense(client, auth_headers, group_id, {
        "description": "Dinner",
        "amount": 100,
        "payer_id": alice.id,
        "split_type": "custom",
        "custom_splits": [
            {"user_id": alice.id, "amount": 20},
            {"user_id": bob.id, "amount": 30},
            {"user_id": carol.id, "amount": 50}
        ]
    })

    response = client.get(f"/groups/{group_id}/balances", headers=auth_headers)
    balances = {b["user"]["id"]: b["amount"] for b in response.json()}
    assert balances == {alice.id: 80.0, bob.id: -30.0, carol.id: -50.0}

def test_balances_include_names(client, auth_headers, group_with_members):
    group_id, (alice, bob, carol) = group_with_members

    response = client.get(f"/groups/{group_id}/balances", headers=auth_headers)
    users = {b["user"]["id"]: b["user"] for b in response.json()}
    assert users[bob.id]["full_name"] == "Bob"
    assert users[carol.id]["email"] == "carol@example.com"
    assert all(b["amount"] == 0 for b in response.json())

def test_balances_are_rounded_for_display(client, auth_headers, group_with_members):
    group_id, (alice, bob, carol) = group_with_members

    add_expense(client, auth_headers, group_id, {
        "description": "Taxi",
        "amount": 100,
        "payer_id": alice.id,
        "split_between": [alice.id, bob.id, carol.id]
    })

    response = client.get(f"/groups/{group_id}/balances", headers=auth_headers)
    balances = {b["user"]["id"]: b["amount"] for b in response.json()}
    assert balances == {alice.id: 66.67, bob.id: -33.33, carol.id: -33.33}

def test_balances_require_membership(client, group_with_members, db_session):
    group_id, _ = group_with_members
    outsider = make_user(db_session, "outsider@example.com", "Outsider")

    response = client.get(f"/groups/{group_id}/balances", headers=make_auth_headers(outsider))
    assert response.status_code == 403

def test_balances_for_missing_group(client, auth_headers):
    response = client.get("/groups/999/balances", headers=auth_headers)
    assert response.status_code == 404

def test_balances_require_auth(client, group_with_members):
    group_id, _ = group_with_members
    response = client.get(f"/groups/{group_id}/balances")
    assert response.status_code == 401
