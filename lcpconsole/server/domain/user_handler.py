"""
User and publication request handlers for the console.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lcpconsole.common.exceptions import ValidationError

if TYPE_CHECKING:
    from lcpconsole.client.publications import PublicationService
    from lcpconsole.client.purchases import PurchaseService
    from lcpconsole.client.users import UserService
    from lcpconsole.common.models import MasterFile, Publication, Purchase, User


class UserHandler:
    """Handles the user screens."""

    def __init__(self, users: UserService, purchases: PurchaseService, page_size: int):
        self.users = users
        self.purchases = purchases
        self.page_size = page_size

    def list(self, page: int | None = None) -> list[User]:
        return self.users.list(page, self.page_size if page is not None else None)

    def get(self, user_id: int) -> User:
        return self.users.get(user_id)

    def create(self, user: User) -> User:
        if not user.email:
            msg = "An email is required"
            raise ValidationError(msg)
        if not user.clear_password and not user.password:
            msg = "A passphrase is required"
            raise ValidationError(msg)
        return self.users.add(user)

    def update(self, user_id: int, user: User) -> User:
        user.id = user_id
        return self.users.update(user)

    def delete(self, user_id: int) -> dict:
        return {"deleted": self.users.delete(user_id)}

    def purchases_of(self, user_id: int) -> list[Purchase]:
        return self.purchases.for_user(user_id)


class PublicationHandler:
    """Handles the publication screens."""

    def __init__(self, publications: PublicationService, page_size: int):
        self.publications = publications
        self.page_size = page_size

    def list(self, page: int | None = None) -> list[Publication]:
        return self.publications.list(
            page, self.page_size if page is not None else None
        )

    def get(self, publication_id: int) -> Publication:
        return self.publications.get(publication_id)

    def check_by_title(self, title: str) -> Publication:
        return self.publications.check_by_title(title)

    def create(self, publication: Publication) -> Publication:
        if not publication.title:
            msg = "A publication title is required"
            raise ValidationError(msg)
        return self.publications.add(publication)

    def update(self, publication_id: int, publication: Publication) -> Publication:
        publication.id = publication_id
        return self.publications.update(publication)

    def delete(self, publication_id: int) -> dict:
        return {"deleted": self.publications.delete(publication_id)}

    def upload(self, filename: str, content: bytes, title: str) -> dict:
        if not content:
            msg = "The uploaded file is empty"
            raise ValidationError(msg)
        self.publications.upload_content(filename, content, title)
        return {"uploaded": filename, "title": title}

    def master_files(self) -> list[MasterFile]:
        return self.publications.master_files()
