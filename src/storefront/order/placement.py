"""Order placement — command and handler.

Placing the order and closing the cart it came from happen in one unit of
work: either both are stored or neither is.
"""

import json

from protean import handle
from protean.fields import DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.domain import storefront
from storefront.order.order import Order


@storefront.command(part_of="Order")
class PlaceOrder:
    order_id = Identifier(required=True)
    cart_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of line snapshots
    customer = Text(required=True)  # JSON {name, phone, email}
    shipping_address = Text(required=True)  # JSON address
    subtotal = Integer(required=True)
    shipping = Integer(default=0)
    tax = Integer(default=0)
    total = Integer(required=True)
    currency = String(required=True, max_length=3)
    payment_deadline = DateTime()


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        order = Order.place(
            order_id=command.order_id,
            cart_id=command.cart_id,
            items_data=json.loads(command.items),
            customer=json.loads(command.customer),
            shipping_address=json.loads(command.shipping_address),
            pricing={
                "subtotal": command.subtotal,
                "shipping": command.shipping or 0,
                "tax": command.tax or 0,
                "total": command.total,
                "currency": command.currency,
            },
            payment_deadline=command.payment_deadline,
        )

        cart_repo = current_domain.repository_for(ShoppingCart)
        cart = cart_repo.get(command.cart_id)
        cart.convert_to_order(order.id)

        current_domain.repository_for(Order).add(order)
        cart_repo.add(cart)
        return str(order.id)
