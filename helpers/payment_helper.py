from typing import Any, Dict
import logging
import stripe

from config.stripe_config import configure_stripe, get_stripe_currency
from helpers.errors import PaymentGatewayError

logger = logging.getLogger(__name__)


def create_product(name: str, description: str):
    configure_stripe()
    try:
        return stripe.Product.create(name=name, description=description)
    except stripe.error.StripeError as e:
        logger.error(f"Error creating Stripe product {name}: {str(e)}")
        raise PaymentGatewayError(str(e)) from e


def create_price(product_id: str, unit_amount: int, currency: str):
    configure_stripe()
    try:
        return stripe.Price.create(product=product_id, unit_amount=unit_amount, currency=currency)
    except stripe.error.StripeError as e:
        logger.error(f"Error creating Stripe price for product {product_id}: {str(e)}")
        raise PaymentGatewayError(str(e)) from e


def register_course_product(title: str, price: int) -> Dict[str, Any]:
    """Register a product/price pair so a course becomes purchasable.

    `price` is in whole currency units; Stripe wants minor units.
    """
    product = create_product(name=title, description=f"Course: {title}")
    stripe_price = create_price(product.id, unit_amount=price * 100, currency=get_stripe_currency())
    return stripe_price


def create_payment_intent(amount: int, currency: str, method_config: Dict[str, Any]):
    configure_stripe()
    try:
        return stripe.PaymentIntent.create(
            amount=amount,
            currency=currency,
            automatic_payment_methods=method_config
        )
    except stripe.error.StripeError as e:
        logger.error(f"Error creating Stripe payment intent for {amount}: {str(e)}")
        raise PaymentGatewayError(str(e)) from e
