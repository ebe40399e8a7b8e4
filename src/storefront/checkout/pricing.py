"""Checkout totals in integer minor currency units."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CheckoutTotals:
    subtotal: int
    shipping: int
    tax: int
    total: int


def compute_tax(taxable: int, tax_rate_bps: int) -> int:
    """Tax on `taxable` at a rate in basis points, rounded half up."""
    return (taxable * tax_rate_bps + 5000) // 10000


def compute_totals(subtotal: int, shipping_flat: int = 0, tax_rate_bps: int = 0) -> CheckoutTotals:
    """Shipping is a flat amount; tax applies to subtotal plus shipping."""
    tax = compute_tax(subtotal + shipping_flat, tax_rate_bps)
    return CheckoutTotals(
        subtotal=subtotal,
        shipping=shipping_flat,
        tax=tax,
        total=subtotal + shipping_flat + tax,
    )
