"""Shared fixtures: in-process fakes of the resource API and the license
status server, reached through FastAPI test clients used as sessions.
"""

from __future__ import annotations

import json
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import Mock

import pytest
from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from fastapi.testclient import TestClient

from lcpconsole.client.infrastructure.config_loader import ConfigLoader
from lcpconsole.common.models import ConsoleConfig
from lcpconsole.server.core import ConsoleServer

TEST_URL = "http://testserver"
LSD_USER = "lsd-admin"
LSD_PASSWORD = "lsd-secret"
DEFAULT_LOAN_DAYS = 7
API_PAGE_SIZE = 30


class FakeStore:
    """State shared by the fake resource API and the fake status server."""

    def __init__(self) -> None:
        self.users: dict[int, dict[str, Any]] = {}
        self.publications: dict[int, dict[str, Any]] = {}
        self.purchases: dict[int, dict[str, Any]] = {}
        self.statuses: dict[str, dict[str, Any]] = {}
        self.devices: dict[str, list[dict[str, Any]]] = {}
        self.uploads: list[dict[str, Any]] = []
        self.master_files = ["moby-dick.epub", "alice.epub"]
        self._next_id = 0

    def next_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def issue_license(self, purchase: dict[str, Any]) -> str:
        license_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc).isoformat()
        status = {
            "id": license_id,
            "status": "ready",
            "updated": {"license": now, "status": now},
            "message": "The license is available",
            "links": [],
            "device_count": 0,
            "events": [],
        }
        if purchase.get("type") == "LOAN":
            status["potential_rights"] = {"end": purchase.get("endDate")}
        self.statuses[license_id] = status
        self.devices[license_id] = []
        return license_id


def _get(collection: dict[int, dict[str, Any]], item_id: int) -> dict[str, Any]:
    if item_id not in collection:
        raise HTTPException(404, "not found")
    return collection[item_id]


def make_resource_api(store: FakeStore) -> FastAPI:
    """Fake resource API: users, publications, purchases, licenses, dashboard."""
    app = FastAPI()

    def crud(name: str, collection: dict[int, dict[str, Any]]) -> None:
        @app.get(f"/api/v1/{name}", name=f"list_{name}")
        def list_items(page: int = 1, per_page: int = API_PAGE_SIZE) -> list:
            items = list(collection.values())
            return items[(page - 1) * per_page : page * per_page]

        @app.get(f"/api/v1/{name}/{{item_id}}", name=f"get_{name}")
        def get_item(item_id: int) -> dict:
            return _get(collection, item_id)

        @app.put(f"/api/v1/{name}/{{item_id}}", name=f"put_{name}")
        def put_item(item_id: int, body: dict) -> Response:
            _get(collection, item_id).update(body)
            return Response(status_code=200)

        @app.delete(f"/api/v1/{name}/{{item_id}}", name=f"delete_{name}")
        def delete_item(item_id: int) -> Response:
            _get(collection, item_id)
            del collection[item_id]
            return Response(status_code=200)

    @app.post("/api/v1/users")
    def add_user(body: dict) -> Response:
        if "clearPassword" in body or "clear_password" in body:
            raise HTTPException(400, "clear passwords are not accepted")
        user_id = store.next_id()
        store.users[user_id] = {**body, "id": user_id, "uuid": str(uuid.uuid4())}
        return Response(status_code=201)

    @app.get("/api/v1/users/{user_id}/purchases")
    def user_purchases(user_id: int) -> list:
        _get(store.users, user_id)
        return [p for p in store.purchases.values() if p["user"]["id"] == user_id]

    @app.get("/api/v1/publications/check-by-title")
    def check_by_title(title: str) -> dict:
        for publication in store.publications.values():
            if publication["title"] == title:
                return publication
        raise HTTPException(404, "not found")

    @app.post("/api/v1/publications")
    def add_publication(body: dict) -> Response:
        publication_id = store.next_id()
        store.publications[publication_id] = {
            **body,
            "id": publication_id,
            "uuid": str(uuid.uuid4()),
            "status": "ok",
        }
        return Response(status_code=201)

    @app.post("/publicationUpload")
    async def upload(request: Request, title: str) -> Response:
        body = await request.body()
        store.uploads.append({"title": title, "size": len(body)})
        return Response(status_code=200)

    @app.get("/api/v1/repositories/master-files")
    def master_files() -> list:
        return [{"name": name} for name in store.master_files]

    @app.post("/api/v1/purchases")
    def add_purchase(body: dict) -> Response:
        if not body.get("partialLicense"):
            raise HTTPException(400, "missing partial license")
        purchase_id = store.next_id()
        purchase = {
            **body,
            "id": purchase_id,
            "uuid": str(uuid.uuid4()),
            "transactionDate": datetime.now(timezone.utc).isoformat(),
            "status": "ok",
        }
        purchase["licenseUuid"] = store.issue_license(purchase)
        store.purchases[purchase_id] = purchase
        return Response(status_code=201)

    @app.get("/api/v1/purchases/{purchase_id}/license")
    def purchase_license(purchase_id: int) -> dict:
        purchase = _get(store.purchases, purchase_id)
        if not purchase.get("licenseUuid"):
            raise HTTPException(404, "no license")
        partial = json.loads(purchase["partialLicense"])
        return {**partial, "id": purchase["licenseUuid"], "signature": {}}

    @app.get("/api/v1/licenses")
    def licenses(devices: int = 1) -> list:
        summaries = []
        for purchase in store.purchases.values():
            license_id = purchase.get("licenseUuid")
            count = len(store.devices.get(license_id, []))
            if license_id and count >= devices:
                summaries.append(
                    {
                        "id": license_id,
                        "publicationTitle": purchase["publication"]["title"],
                        "userName": purchase["user"]["name"],
                        "type": purchase["type"],
                        "devices": count,
                        "status": store.statuses[license_id]["status"],
                        "purchaseId": purchase["id"],
                    }
                )
        return summaries

    @app.get("/dashboardInfos")
    def dashboard_infos() -> dict:
        types = [p["type"] for p in store.purchases.values()]
        return {
            "publicationCount": len(store.publications),
            "userCount": len(store.users),
            "buyCount": types.count("BUY"),
            "loanCount": types.count("LOAN"),
            "averageDuration": 0,
        }

    @app.get("/dashboardBestSellers")
    def best_sellers() -> list:
        counts: dict[str, int] = {}
        for purchase in store.purchases.values():
            title = purchase["publication"]["title"]
            counts[title] = counts.get(title, 0) + 1
        ranked = sorted(counts.items(), key=lambda kv: -kv[1])
        return [{"title": title, "count": count} for title, count in ranked[:5]]

    # generic routes last so the specific ones above win
    crud("users", store.users)
    crud("publications", store.publications)
    crud("purchases", store.purchases)
    return app


def make_lsd(store: FakeStore) -> FastAPI:
    """Fake license status server."""
    app = FastAPI()
    security = HTTPBasic()

    def check_auth(credentials: HTTPBasicCredentials = Depends(security)) -> None:
        if not (
            secrets.compare_digest(credentials.username, LSD_USER)
            and secrets.compare_digest(credentials.password, LSD_PASSWORD)
        ):
            raise HTTPException(401, "unauthorized")

    def status_of(license_id: str) -> dict[str, Any]:
        if license_id not in store.statuses:
            raise HTTPException(404, "license not found")
        return store.statuses[license_id]

    def add_event(status: dict[str, Any], kind: str, device_id: str | None) -> None:
        status["events"].append(
            {
                "name": kind,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "type": kind,
                "id": device_id or "",
            }
        )

    @app.get("/licenses/{license_id}/status")
    def get_status(license_id: str) -> dict:
        return status_of(license_id)

    @app.put("/licenses/{license_id}/renew")
    def renew(
        license_id: str,
        end: datetime | None = None,
        id: str | None = None,  # noqa: A002
        name: str | None = None,
    ) -> dict:
        status = status_of(license_id)
        if status["status"] not in ("ready", "active"):
            raise HTTPException(400, "incompatible status")
        if end is None:
            end = datetime.now(timezone.utc) + timedelta(days=DEFAULT_LOAN_DAYS)
        status["potential_rights"] = {"end": end.isoformat()}
        add_event(status, "renew", id)
        return status

    @app.put("/licenses/{license_id}/return")
    def return_license(
        license_id: str,
        id: str | None = None,  # noqa: A002
        name: str | None = None,
    ) -> dict:
        status = status_of(license_id)
        if status["status"] not in ("ready", "active"):
            raise HTTPException(400, "incompatible status")
        status["status"] = "returned"
        add_event(status, "return", id)
        return status

    @app.post("/licenses/{license_id}/register")
    def register(license_id: str, id: str, name: str) -> dict:  # noqa: A002
        status = status_of(license_id)
        if status["status"] not in ("ready", "active"):
            raise HTTPException(400, "incompatible status")
        store.devices[license_id].append(
            {"id": id, "name": name, "timestamp": datetime.now(timezone.utc).isoformat()}
        )
        status["status"] = "active"
        status["device_count"] = len(store.devices[license_id])
        add_event(status, "register", id)
        return status

    @app.patch("/licenses/{license_id}/status", dependencies=[Depends(check_auth)])
    def patch_status(license_id: str, body: dict) -> Response:
        status = status_of(license_id)
        if body.get("status") != "revoked" or status["status"] not in (
            "ready",
            "active",
        ):
            raise HTTPException(400, "incompatible status")
        status["status"] = "revoked"
        return Response(status_code=200)

    @app.get("/licenses/{license_id}/registered", dependencies=[Depends(check_auth)])
    def registered(license_id: str) -> dict:
        status_of(license_id)
        return {"id": license_id, "devices": store.devices[license_id]}

    return app


def console_config(**overrides: Any) -> ConsoleConfig:
    values = {
        "api_url": TEST_URL,
        "lsd_url": TEST_URL,
        "lsd_user": LSD_USER,
        "lsd_password": LSD_PASSWORD,
        "provider": "https://provider.example.org",
    }
    values.update(overrides)
    return ConsoleConfig(**values)


def make_response(
    status_code: int = 200, payload: Any = None, text: str | None = None
) -> Mock:
    """Session response double for unit tests."""
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    if text is None:
        text = "" if payload is None else str(payload)
    response.text = text
    return response


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def api_session(store: FakeStore) -> TestClient:
    return TestClient(make_resource_api(store))


@pytest.fixture
def lsd_session(store: FakeStore) -> TestClient:
    return TestClient(make_lsd(store))


@pytest.fixture
def loader(api_session: TestClient, lsd_session: TestClient) -> ConfigLoader:
    return ConfigLoader(console_config(), session=api_session, lsd_session=lsd_session)


@pytest.fixture
def console(api_session: TestClient, lsd_session: TestClient) -> TestClient:
    server = ConsoleServer(
        console_config(), session=api_session, lsd_session=lsd_session
    )
    return TestClient(server.app)
