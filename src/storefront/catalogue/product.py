"""Product aggregate — the customer-facing grouping of variants."""

import re
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String, Text

from storefront.domain import storefront

_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class ProductStatus(Enum):
    """Enumeration of product lifecycle statuses."""

    DRAFT = "Draft"
    ACTIVE = "Active"
    ARCHIVED = "Archived"


def slugify(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


@storefront.aggregate
class Product:
    """Product aggregate root."""

    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=200)
    description: Text()
    status: String(choices=ProductStatus, default=ProductStatus.DRAFT.value)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def slug_must_be_url_safe(self):
        if self.slug and not _SLUG_PATTERN.match(self.slug):
            raise ValidationError(
                {"slug": ["Slug must contain only lowercase alphanumeric characters and single hyphens"]}
            )

    @property
    def is_archived(self) -> bool:
        return self.status == ProductStatus.ARCHIVED.value

    @classmethod
    def create(cls, name, slug=None, description=None, status=None):
        from storefront.catalogue.events import ProductCreated

        now = datetime.now(UTC)
        product = cls(
            name=name,
            slug=slug or slugify(name),
            description=description,
            status=status or ProductStatus.DRAFT.value,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=product.name,
                slug=product.slug,
                status=product.status,
                created_at=now,
            )
        )
        return product

    def update_details(self, name=None, slug=None, description=None, status=None):
        from storefront.catalogue.events import ProductDetailsUpdated

        if name is not None:
            self.name = name
        if slug is not None:
            self.slug = slug
        if description is not None:
            self.description = description
        if status is not None:
            self.status = status
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductDetailsUpdated(
                product_id=self.id,
                name=self.name,
                slug=self.slug,
                status=self.status,
                updated_at=self.updated_at,
            )
        )
