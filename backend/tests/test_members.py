from conftest import make_auth_headers, make_user


def test_add_member(client, auth_headers, db_session):
    group_id = client.post("/groups", headers=auth_headers, json={"name": "Members"}).json()["id"]
    make_user(db_session, "friend@example.com", "Friend")

    response = client.post(f"/groups/{group_id}/members", headers=auth_headers, json={"email": "friend@example.com"})
    assert response.status_code == 200
    assert response.json()["full_name"] == "Friend"

def test_add_unknown_member(client, auth_headers):
    group_id = client.post("/groups", headers=auth_headers, json={"name": "Members"}).json()["id"]

    response = client.post(f"/groups/{group_id}/members", headers=auth_headers, json={"email": "ghost@example.com"})
    assert response.status_code == 404

def test_add_existing_member(client, auth_headers, group_with_members):
    group_id, _ = group_with_members

    response = client.post(f"/groups/{group_id}/members", headers=auth_headers, json={"email": "bob@example.com"})
    assert response.status_code == 400

def test_new_member_joins_balances_at_zero(client, auth_headers, group_with_members, db_session):
    group_id, (alice, bob, _) = group_with_members
    client.post(f"/groups/{group_id}/expenses", headers=auth_headers, json={
        "description": "Before", "amount": 10, "payer_id": alice.id, "split_between": [bob.id]
    })

    dave = make_user(db_session, "dave@example.com", "Dave")
    client.post(f"/groups/{group_id}/members", headers=auth_headers, json={"email": "dave@example.com"})

    balances = client.get(f"/groups/{group_id}/balances", headers=auth_headers).json()
    amounts = {b["user"]["id"]: b["amount"] for b in balances}
    assert amounts[dave.id] == 0

def test_owner_removes_member(client, auth_headers, group_with_members):
    group_id, (_, _, carol) = group_with_members

    response = client.delete(f"/groups/{group_id}/members/{carol.id}", headers=auth_headers)
    assert response.status_code == 200

    members = client.get(f"/groups/{group_id}", headers=auth_headers).json()["members"]
    assert carol.id not in [m["user_id"] for m in members]

def test_member_can_leave(client, group_with_members):
    group_id, (_, bob, _) = group_with_members

    response = client.delete(f"/groups/{group_id}/members/{bob.id}", headers=make_auth_headers(bob))
    assert response.status_code == 200

def test_member_cannot_remove_others(client, group_with_members):
    group_id, (_, bob, carol) = group_with_members

    response = client.delete(f"/groups/{group_id}/members/{carol.id}", headers=make_auth_headers(bob))
    assert response.status_code == 403

def test_owner_cannot_be_removed(client, auth_headers, group_with_members):
    group_id, (alice, _, _) = group_with_members

    response = client.delete(f"/groups/{group_id}/members/{alice.id}", headers=auth_headers)
    assert response.status_code == 400

def test_member_with_expenses_cannot_be_removed(client, auth_headers, group_with_members):
    group_id, (alice, bob, carol) = group_with_members
    client.post(f"/groups/{group_id}/expenses", headers=auth_headers, json={
        "description": "Tickets", "amount": 30, "payer_id": alice.id, "split_between": [alice.id, carol.id]
    })

    response = client.delete(f"/groups/{group_id}/members/{carol.id}", headers=auth_headers)
    assert response.status_code == 400

    # Bob is not on any expense
    response = client.delete(f"/groups/{group_id}/members/{bob.id}", headers=auth_headers)
    assert response.status_code == 200
