"""Order payment lifecycle — commands and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.command(part_of="Order")
class RecordProviderTransaction:
    order_id = Identifier(required=True)
    provider = String(required=True, max_length=50)
    provider_order_ref = String(required=True, max_length=255)


@storefront.command(part_of="Order")
class RecordPaymentInitiationFailure:
    order_id = Identifier(required=True)
    reason = String(required=True, max_length=500)


@storefront.command(part_of="Order")
class RecordPaymentAuthorization:
    order_id = Identifier(required=True)
    provider_payment_ref = String(required=True, max_length=255)


@storefront.command(part_of="Order")
class SettlePayment:
    order_id = Identifier(required=True)
    provider_payment_ref = String(required=True, max_length=255)


@storefront.command(part_of="Order")
class RecordPaymentFailure:
    order_id = Identifier(required=True)
    provider_payment_ref = String(max_length=255)
    reason = String(required=True, max_length=500)


@storefront.command_handler(part_of=Order)
class OrderPaymentHandler:
    @handle(RecordProviderTransaction)
    def record_provider_transaction(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_provider_transaction(
            provider=command.provider,
            provider_order_ref=command.provider_order_ref,
        )
        repo.add(order)

    @handle(RecordPaymentInitiationFailure)
    def record_payment_initiation_failure(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_initiation_failure(reason=command.reason)
        repo.add(order)

    @handle(RecordPaymentAuthorization)
    def record_payment_authorization(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if order.record_authorization(provider_payment_ref=command.provider_payment_ref):
            repo.add(order)

    @handle(SettlePayment)
    def settle_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if order.settle(provider_payment_ref=command.provider_payment_ref):
            repo.add(order)

    @handle(RecordPaymentFailure)
    def record_payment_failure(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if order.fail_payment(provider_payment_ref=command.provider_payment_ref, reason=command.reason):
            repo.add(order)
