"""Tests for church registration and roster management."""

import pytest

from app.models.common import ChurchStatus, RecordStatus
from tests.helpers import ADMIN_EMAIL, API, OTHER_EMAIL, auth_headers


def register(client, headers, **overrides):
    payload = {"code": "Acme", "name": "Acme Church", "address": "1 Main Street", "time_offset": 0}
    payload.update(overrides)
    return client.post(f"{API}/church/register", json=payload, headers=headers)


class TestRegister:
    def test_register_utc_church(self, client, admin_headers):
        response = register(client, admin_headers)
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["code"] == "acme"
        assert data["time_offset"] == 0

        churches = client.get(f"{API}/church", headers=admin_headers).json()["data"]
        assert [(c["code"], c["status"]) for c in churches] == [("acme", ChurchStatus.ACTIVE)]

    def test_missing_offset_is_rejected(self, client, admin_headers):
        response = register(client, admin_headers, time_offset=None)
        assert response.status_code == 400
        assert response.json()["kind"] == "validation"

    def test_out_of_range_offset_is_rejected(self, client, admin_headers):
        response = register(client, admin_headers, time_offset=900)
        assert response.status_code == 400

    @pytest.mark.parametrize("overrides", [{"code": "ACME "}, {"code": "other"}])
    def test_duplicate_code_or_name_is_rejected(self, client, admin_headers, overrides):
        assert register(client, admin_headers).status_code == 201
        response = register(client, admin_headers, **overrides)
        assert response.status_code == 400
        assert response.json()["kind"] == "validation"

    def test_listed_admins_can_act(self, client, admin_headers, other_headers):
        register(client, admin_headers, admins=[OTHER_EMAIL.upper()])
        response = client.get(f"{API}/church/admins/acme", headers=other_headers)
        assert response.status_code == 200
        assert response.json()["data"] == sorted([ADMIN_EMAIL, OTHER_EMAIL])

    def test_requires_token(self, client):
        assert register(client, {}).status_code == 401


class TestUpdate:
    def test_admins_become_caller_plus_listed(self, client, admin_headers, make_church):
        make_church(admins=(ADMIN_EMAIL, "old@x.com"))
        response = client.patch(
            f"{API}/church/update/acme",
            json={"name": "Acme Chapel", "address": "2 Main Street", "time_offset": 480, "admins": ["new@x.com"]},
            headers=admin_headers,
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Acme Chapel"
        assert data["time_offset"] == 480
        assert data["admins"] == sorted([ADMIN_EMAIL, "new@x.com"])

    def test_unknown_fields_are_rejected(self, client, admin_headers, make_church):
        make_church()
        response = client.patch(
            f"{API}/church/update/acme",
            json={"name": "Acme", "time_offset": 0, "code": "renamed"},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "validation"

    def test_inactive_church_can_still_be_updated(self, client, admin_headers, make_church):
        make_church(status=ChurchStatus.INACTIVE)
        response = client.patch(
            f"{API}/church/update/acme",
            json={"name": "Acme Church", "time_offset": 60},
            headers=admin_headers,
        )
        assert response.status_code == 200

    def test_non_admin_is_rejected(self, client, other_headers, make_church):
        make_church()
        response = client.patch(
            f"{API}/church/update/acme",
            json={"name": "Mine Now", "time_offset": 0},
            headers=other_headers,
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "not_permitted"


class TestStatus:
    def test_inactivate_then_reactivate(self, client, admin_headers, make_church):
        make_church()
        assert client.delete(f"{API}/church/inactivate/acme", headers=admin_headers).status_code == 200
        again = client.delete(f"{API}/church/inactivate/acme", headers=admin_headers)
        assert again.status_code == 400
        assert again.json()["kind"] == "invalid_state"

        assert client.patch(f"{API}/church/reactivate/acme", headers=admin_headers).status_code == 200
        assert client.patch(f"{API}/church/reactivate/acme", headers=admin_headers).status_code == 400

    def test_detail_hides_the_caller(self, client, admin_headers, make_church):
        make_church(admins=(ADMIN_EMAIL, OTHER_EMAIL), locations=[("hall", "Great Hall")])
        data = client.get(f"{API}/church/detail/acme", headers=admin_headers).json()["data"]
        assert data["admins"] == [OTHER_EMAIL]
        assert data["locations"] == [{"code": "hall", "location": "Great Hall", "status": RecordStatus.ACTIVE}]
        assert data["servants"] == []


class TestServants:
    def test_servant_lifecycle(self, client, admin_headers, make_church):
        make_church()
        url = f"{API}/church/servants/acme"
        servant = {"email": "Ann@Church.org", "name": "Ann", "role": "Music"}

        created = client.post(url, json=servant, headers=admin_headers)
        assert created.status_code == 200
        assert created.json()["data"]["email"] == "ann@church.org"
        assert client.post(url, json=servant, headers=admin_headers).status_code == 400

        updated = client.patch(url, json=dict(servant, name="Ann Lee"), headers=admin_headers)
        assert updated.json()["data"]["name"] == "Ann Lee"

        key = {"email": "ann@church.org"}
        assert client.request("DELETE", url, json=key, headers=admin_headers).status_code == 200
        assert client.get(url, headers=admin_headers).json()["data"]["servants"] == []
        assert client.patch(url, json=servant, headers=admin_headers).json()["kind"] == "invalid_state"

        reactivated = client.patch(f"{API}/church/servants/reactivate/acme", json=key, headers=admin_headers)
        assert reactivated.status_code == 200
        listed = client.get(url, headers=admin_headers).json()["data"]
        assert listed["church_code"] == "acme"
        assert [s["name"] for s in listed["servants"]] == ["Ann Lee"]

    def test_inactive_church_roster_is_locked(self, client, admin_headers, make_church):
        make_church(status=ChurchStatus.INACTIVE)
        response = client.post(
            f"{API}/church/servants/acme", json={"email": "ann@church.org", "name": "Ann"}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "not_permitted"


class TestLocations:
    def test_location_lifecycle(self, client, admin_headers, make_church):
        make_church()
        url = f"{API}/church/locations/acme"

        created = client.post(url, json={"code": "Hall", "location": "Great Hall"}, headers=admin_headers)
        assert created.json()["data"] == {"code": "hall", "location": "Great Hall", "status": RecordStatus.ACTIVE}
        assert client.post(url, json={"code": "hall", "location": "Other"}, headers=admin_headers).status_code == 400

        renamed = client.patch(url, json={"code": "hall", "location": "Grand Hall"}, headers=admin_headers)
        assert renamed.json()["data"]["location"] == "Grand Hall"

        assert client.request("DELETE", url, json={"code": "hall"}, headers=admin_headers).status_code == 200
        assert client.get(url, headers=admin_headers).json()["data"]["locations"] == []
        again = client.request("DELETE", url, json={"code": "hall"}, headers=admin_headers)
        assert again.json()["kind"] == "invalid_state"

        client.patch(f"{API}/church/locations/reactivate/acme", json={"code": "hall"}, headers=admin_headers)
        locations = client.get(url, headers=admin_headers).json()["data"]["locations"]
        assert [l["code"] for l in locations] == ["hall"]


class TestAdmins:
    def test_add_and_remove(self, client, admin_headers, make_church):
        make_church()
        url = f"{API}/church/admins/acme"

        assert client.post(url, json={"admin_email": OTHER_EMAIL}, headers=admin_headers).status_code == 200
        assert client.post(url, json={"admin_email": OTHER_EMAIL}, headers=admin_headers).status_code == 400
        assert client.get(url, headers=auth_headers(OTHER_EMAIL)).json()["data"] == sorted([ADMIN_EMAIL, OTHER_EMAIL])

        removed = client.request("DELETE", url, json={"admin_email": OTHER_EMAIL}, headers=admin_headers)
        assert removed.status_code == 200
        assert client.get(url, headers=admin_headers).json()["data"] == [ADMIN_EMAIL]

    def test_last_admin_cannot_be_removed(self, client, admin_headers, make_church):
        make_church()
        response = client.request(
            "DELETE", f"{API}/church/admins/acme", json={"admin_email": ADMIN_EMAIL}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_state"
        assert client.get(f"{API}/church/admins/acme", headers=admin_headers).json()["data"] == [ADMIN_EMAIL]
