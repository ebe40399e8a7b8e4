"""Variant management — commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.catalogue.variant import Variant
from storefront.domain import storefront
from storefront.shared.errors import InvalidInput, InvalidQuantity


@storefront.command(part_of="Variant")
class AddVariant:
    product_id: Identifier(required=True)
    sku: String(required=True, max_length=50)
    title: String(required=True, max_length=255)
    size: String(max_length=50)
    color: String(max_length=50)
    price: Integer(required=True)
    compare_at_price: Integer()
    initial_stock: Integer(default=0)


@storefront.command(part_of="Variant")
class UpdateVariant:
    variant_id: Identifier(required=True)
    title: String(max_length=255)
    size: String(max_length=50)
    color: String(max_length=50)
    price: Integer()
    compare_at_price: Integer()
    is_active: Boolean()


@storefront.command_handler(part_of=Variant)
class ManageVariantsHandler:
    @handle(AddVariant)
    def add_variant(self, command):
        # Raises ObjectNotFoundError for an unknown product
        current_domain.repository_for(Product).get(command.product_id)

        repo = current_domain.repository_for(Variant)
        if repo._dao.query.filter(sku=command.sku).all().items:
            raise InvalidInput({"sku": [f"SKU '{command.sku}' is already in use"]})

        initial_stock = command.initial_stock or 0
        if initial_stock < 0:
            raise InvalidQuantity(initial_stock, minimum=0)

        variant = Variant.create(
            product_id=command.product_id,
            sku=command.sku,
            title=command.title,
            price=command.price,
            size=command.size,
            color=command.color,
            compare_at_price=command.compare_at_price,
            initial_stock=initial_stock,
        )
        repo.add(variant)
        return str(variant.id)

    @handle(UpdateVariant)
    def update_variant(self, command):
        repo = current_domain.repository_for(Variant)
        variant = repo.get(command.variant_id)
        variant.update(
            title=command.title,
            size=command.size,
            color=command.color,
            price=command.price,
            compare_at_price=command.compare_at_price,
            is_active=command.is_active,
        )
        repo.add(variant)
