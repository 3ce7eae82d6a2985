"""Tests for the public event listings."""

from datetime import datetime, timedelta, timezone

import pytest

from app.models.common import ChurchStatus, ServiceStatus
from app.models.service import ChurchService, LiturgyItem
from app.services.service_events import search_published_services, todays_services
from app.services.time_window import utc_now
from tests.helpers import API

UTC = timezone.utc
EVENTS = f"{API}/church/service/events"


@pytest.fixture
def add_service(session_factory):
    def _add_service(church_code, start, end, status=ServiceStatus.PUBLISHED, location_code="main", liturgy=()):
        with session_factory() as db_session:
            service = ChurchService(
                church_code=church_code,
                title=f"{church_code} service",
                status=status,
                datetime_start=start,
                datetime_end=end,
                location_code=location_code,
                location_name="Main Hall",
            )
            service.liturgy = [LiturgyItem(position=i, title=title) for i, title in enumerate(liturgy)]
            db_session.add(service)
            db_session.commit()
            return service.id

    return _add_service


@pytest.fixture
def tomorrow():
    start = utc_now().replace(microsecond=0) + timedelta(days=1)
    return start, start + timedelta(hours=1)


class TestSearch:
    def test_default_window_lists_published_services(self, client, make_church, add_service, tomorrow):
        make_church()
        add_service("acme", *tomorrow)
        add_service("acme", tomorrow[0] + timedelta(hours=2), tomorrow[1] + timedelta(hours=2), status=ServiceStatus.PENDING_PUBLISH)
        add_service("acme", tomorrow[0] + timedelta(days=40), tomorrow[1] + timedelta(days=40))

        response = client.get(EVENTS)
        assert response.status_code == 200
        body = response.json()
        assert [church["code"] for church in body["churches"]] == ["acme"]
        assert len(body["services"]) == 1
        assert body["services"][0]["church_code"] == "acme"
        assert body["services"][0]["status"] == ServiceStatus.PUBLISHED

    def test_name_matches_case_insensitive_substring(self, client, make_church, add_service, tomorrow):
        make_church()
        make_church(code="zion", name="Zion Chapel", admins=("z@x.com",))
        add_service("acme", *tomorrow)
        add_service("zion", *tomorrow)

        body = client.get(EVENTS, params={"name": "CME"}).json()
        assert [church["code"] for church in body["churches"]] == ["acme"]
        assert [service["church_code"] for service in body["services"]] == ["acme"]

    def test_unmatched_name_is_empty(self, client, make_church, add_service, tomorrow):
        make_church()
        add_service("acme", *tomorrow)
        assert client.get(EVENTS, params={"name": "zzz"}).json() == {"churches": [], "services": []}

    def test_blank_name_is_matched_as_given(self, client, make_church, add_service, tomorrow):
        make_church()
        make_church(code="bethel", name="Bethel", admins=("b@x.com",))
        add_service("acme", *tomorrow)
        add_service("bethel", *tomorrow)

        body = client.get(EVENTS, params={"name": " "}).json()
        assert [church["code"] for church in body["churches"]] == ["acme"]
        assert [service["church_code"] for service in body["services"]] == ["acme"]

        unfiltered = client.get(EVENTS, params={"name": ""}).json()
        assert sorted(service["church_code"] for service in unfiltered["services"]) == ["acme", "bethel"]

    def test_like_wildcards_are_literal(self, client, make_church, add_service, tomorrow):
        make_church()
        add_service("acme", *tomorrow)
        assert client.get(EVENTS, params={"name": "%"}).json() == {"churches": [], "services": []}

    def test_inactive_churches_are_hidden(self, client, make_church, add_service, tomorrow):
        make_church(status=ChurchStatus.INACTIVE)
        add_service("acme", *tomorrow)
        assert client.get(EVENTS).json() == {"churches": [], "services": []}
        assert client.get(EVENTS, params={"name": "acme"}).json() == {"churches": [], "services": []}

    def test_explicit_window(self, client, make_church, add_service):
        make_church()
        add_service("acme", datetime(2024, 1, 7, 9, tzinfo=UTC), datetime(2024, 1, 7, 10, tzinfo=UTC))
        add_service("acme", datetime(2024, 1, 9, 9, tzinfo=UTC), datetime(2024, 1, 9, 10, tzinfo=UTC))

        body = client.get(
            EVENTS,
            params={"service_datetime_from": "2024-01-07T00:00:00Z", "service_datetime_to": "2024-01-08T00:00:00Z"},
        ).json()
        assert [service["datetime_start"][:19] for service in body["services"]] == ["2024-01-07T09:00:00"]

    def test_window_longer_than_thirty_days_is_rejected(self, client):
        response = client.get(
            EVENTS,
            params={"service_datetime_from": "2024-01-01T00:00:00Z", "service_datetime_to": "2024-02-01T00:00:00Z"},
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "validation"

    def test_single_bound_is_rejected(self, client):
        response = client.get(EVENTS, params={"service_datetime_from": "2024-01-01T00:00:00Z"})
        assert response.status_code == 400
        assert response.json()["kind"] == "validation"

    def test_service_function_with_fixed_now(self, session, make_church, add_service):
        make_church()
        now = datetime(2024, 1, 1, tzinfo=UTC)
        add_service("acme", datetime(2024, 1, 30, 23, tzinfo=UTC), datetime(2024, 1, 31, 1, tzinfo=UTC))
        add_service("acme", datetime(2024, 2, 1, 9, tzinfo=UTC), datetime(2024, 2, 1, 10, tzinfo=UTC))

        churches, services = search_published_services(session, now=now)
        assert [church.code for church in churches] == ["acme"]
        assert len(services) == 1


class TestToday:
    def test_function_uses_church_local_day(self, session, make_church, add_service):
        # UTC+7, so the local day of 2024-01-08 runs 2024-01-07T17:00Z to 2024-01-08T17:00Z
        make_church(time_offset=420)
        make_church(code="zion", name="Zion Chapel", time_offset=420, admins=("z@x.com",))
        add_service("acme", datetime(2024, 1, 7, 18, tzinfo=UTC), datetime(2024, 1, 7, 19, tzinfo=UTC), liturgy=["Hymn"])
        add_service("acme", datetime(2024, 1, 7, 12, tzinfo=UTC), datetime(2024, 1, 7, 13, tzinfo=UTC))
        add_service("acme", datetime(2024, 1, 8, 18, tzinfo=UTC), datetime(2024, 1, 8, 19, tzinfo=UTC))
        add_service("zion", datetime(2024, 1, 7, 18, tzinfo=UTC), datetime(2024, 1, 7, 19, tzinfo=UTC))

        church, services = todays_services(session, "acme", now=datetime(2024, 1, 7, 20, tzinfo=UTC))
        assert church.code == "acme"
        assert len(services) == 1
        assert [item.title for item in services[0].liturgy] == ["Hymn"]

    def test_api_returns_church_and_details(self, client, make_church, add_service):
        make_church()
        now = utc_now()
        add_service("acme", now - timedelta(minutes=1), now + timedelta(minutes=1), liturgy=["Welcome", "Hymn"])
        add_service("acme", now - timedelta(minutes=1), now + timedelta(minutes=1), status=ServiceStatus.PENDING_PUBLISH, location_code="chapel")

        response = client.get(f"{EVENTS}/acme")
        assert response.status_code == 200
        body = response.json()
        assert body["churches"]["code"] == "acme"
        assert len(body["services"]) == 1
        assert [item["title"] for item in body["services"][0]["liturgy"]] == ["Welcome", "Hymn"]
        assert body["services"][0]["news"] == []

    def test_inactive_church_is_rejected(self, client, make_church):
        make_church(status=ChurchStatus.INACTIVE)
        response = client.get(f"{EVENTS}/acme")
        assert response.status_code == 400
        assert response.json()["kind"] == "not_permitted"
