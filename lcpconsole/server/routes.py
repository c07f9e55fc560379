"""
Routes for the console server.
"""

from typing import Any, Callable

from fastapi import FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

from lcpconsole.common.exceptions import ResourceError, ValidationError
from lcpconsole.common.models import (
    DeviceRequest,
    LicenseStatus,
    LicenseSummary,
    MasterFile,
    Publication,
    Purchase,
    PurchaseRequest,
    PurchaseUpdateRequest,
    RegisteredDevices,
    RenewRequest,
    RevokeRequest,
    User,
)

from .services import ConsoleService


def call_upstream(func: Callable[..., Any], *args: Any) -> Any:
    """Run a handler, turning console and upstream errors into HTTP errors."""
    try:
        return func(*args)
    except ValidationError as e:
        raise HTTPException(e.status_code, str(e)) from e
    except ResourceError as e:
        raise HTTPException(e.status_code, str(e)) from e


class ConsoleRoutes:
    """Handles FastAPI routes for the console screens."""

    def __init__(self, service: ConsoleService):
        self.service = service
        self.users = service.user_handler
        self.publications = service.publication_handler
        self.purchases = service.purchase_handler
        self.licenses = service.license_handler

    def setup_routes(self, app: FastAPI) -> None:
        """Setup API routes on the FastAPI app."""

        app.get("/health")(self.health)

        app.get("/users")(self.list_users)
        app.post("/users", status_code=201)(self.create_user)
        app.get("/users/{user_id}")(self.get_user)
        app.put("/users/{user_id}")(self.update_user)
        app.delete("/users/{user_id}")(self.delete_user)
        app.get("/users/{user_id}/purchases")(self.user_purchases)

        app.get("/publications")(self.list_publications)
        app.post("/publications", status_code=201)(self.create_publication)
        app.get("/publications/check-by-title")(self.check_by_title)
        app.get("/publications/master-files")(self.master_files)
        app.post("/publications/upload", status_code=201)(self.upload_publication)
        app.get("/publications/{publication_id}")(self.get_publication)
        app.put("/publications/{publication_id}")(self.update_publication)
        app.delete("/publications/{publication_id}")(self.delete_publication)

        app.get("/purchases")(self.list_purchases)
        app.post("/purchases", status_code=201)(self.create_purchase)
        app.post("/purchases/revoke")(self.revoke)
        app.get("/purchases/{purchase_id}")(self.purchase_status)
        app.put("/purchases/{purchase_id}")(self.update_purchase)
        app.delete("/purchases/{purchase_id}")(self.delete_purchase)
        app.get("/purchases/{purchase_id}/license")(self.license_document)
        app.put("/purchases/{purchase_id}/renew")(self.renew)
        app.put("/purchases/{purchase_id}/return")(self.return_license)

        app.get("/licenses")(self.filtered_licenses)
        app.get("/licenses/{license_id}/status")(self.license_status)
        app.get("/licenses/{license_id}/registered")(self.registered_devices)
        app.post("/licenses/{license_id}/register")(self.register_device)

        app.get("/dashboard")(self.dashboard)

    def health(self) -> dict[str, Any]:
        """Handle /health endpoint."""
        return self.service.health()

    # users

    def list_users(self, page: int | None = None) -> list[User]:
        return call_upstream(self.users.list, page)

    def create_user(self, user: User) -> User:
        return call_upstream(self.users.create, user)

    def get_user(self, user_id: int) -> User:
        return call_upstream(self.users.get, user_id)

    def update_user(self, user_id: int, user: User) -> User:
        return call_upstream(self.users.update, user_id, user)

    def delete_user(self, user_id: int) -> dict:
        return call_upstream(self.users.delete, user_id)

    def user_purchases(self, user_id: int) -> list[Purchase]:
        return call_upstream(self.users.purchases_of, user_id)

    # publications

    def list_publications(self, page: int | None = None) -> list[Publication]:
        return call_upstream(self.publications.list, page)

    def create_publication(self, publication: Publication) -> Publication:
        return call_upstream(self.publications.create, publication)

    def check_by_title(self, title: str) -> Publication:
        return call_upstream(self.publications.check_by_title, title)

    def master_files(self) -> list[MasterFile]:
        return call_upstream(self.publications.master_files)

    async def upload_publication(
        self, request: Request, title: str, filename: str = "publication.epub"
    ) -> dict:
        """Handle /publications/upload; the request body is the EPUB file."""
        content = await request.body()
        return await run_in_threadpool(
            call_upstream, self.publications.upload, filename, content, title
        )

    def get_publication(self, publication_id: int) -> Publication:
        return call_upstream(self.publications.get, publication_id)

    def update_publication(
        self, publication_id: int, publication: Publication
    ) -> Publication:
        return call_upstream(self.publications.update, publication_id, publication)

    def delete_publication(self, publication_id: int) -> dict:
        return call_upstream(self.publications.delete, publication_id)

    # purchases

    def list_purchases(self, page: int | None = None) -> list[Purchase]:
        return call_upstream(self.purchases.list, page)

    def create_purchase(self, req: PurchaseRequest) -> Purchase:
        return call_upstream(self.purchases.create, req)

    def purchase_status(self, purchase_id: int) -> dict:
        return call_upstream(self.purchases.status_view, purchase_id).to_dict()

    def update_purchase(
        self, purchase_id: int, req: PurchaseUpdateRequest
    ) -> Purchase:
        return call_upstream(self.purchases.update, purchase_id, req)

    def delete_purchase(self, purchase_id: int) -> dict:
        return call_upstream(self.purchases.delete, purchase_id)

    def license_document(self, purchase_id: int) -> dict:
        return call_upstream(self.purchases.license_document, purchase_id)

    def renew(self, purchase_id: int, req: RenewRequest) -> dict:
        return call_upstream(self.purchases.renew, purchase_id, req).to_dict()

    def return_license(
        self, purchase_id: int, req: DeviceRequest | None = None
    ) -> dict:
        req = req or DeviceRequest()
        return call_upstream(self.purchases.return_license, purchase_id, req).to_dict()

    def revoke(self, req: RevokeRequest) -> dict:
        return call_upstream(self.purchases.revoke, req.license_id)

    # licenses

    def filtered_licenses(self, devices: int = 1) -> list[LicenseSummary]:
        return call_upstream(self.licenses.filtered, devices)

    def license_status(self, license_id: str) -> LicenseStatus:
        return call_upstream(self.licenses.status, license_id)

    def registered_devices(self, license_id: str) -> RegisteredDevices:
        return call_upstream(self.licenses.registered, license_id)

    def register_device(self, license_id: str, req: DeviceRequest) -> LicenseStatus:
        return call_upstream(self.licenses.register, license_id, req)

    def dashboard(self) -> dict:
        return call_upstream(self.licenses.dashboard_view)
