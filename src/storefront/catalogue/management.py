"""Product management — commands and handler."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.shared.errors import InvalidInput


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    slug: String(max_length=200)
    description: Text()
    status: String(max_length=20)


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    slug: String(max_length=200)
    description: Text()
    status: String(max_length=20)


def _ensure_slug_is_free(slug, product_id=None):
    if not slug:
        return
    matches = current_domain.repository_for(Product)._dao.query.filter(slug=slug).all().items
    if any(str(p.id) != str(product_id) for p in matches):
        raise InvalidInput({"slug": [f"Slug '{slug}' is already in use"]})


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            name=command.name,
            slug=command.slug,
            description=command.description,
            status=command.status,
        )
        _ensure_slug_is_free(product.slug)
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        _ensure_slug_is_free(command.slug, product_id=product.id)
        product.update_details(
            name=command.name,
            slug=command.slug,
            description=command.description,
            status=command.status,
        )
        repo.add(product)
