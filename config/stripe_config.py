import os
import stripe
from dotenv import load_dotenv

load_dotenv()

# Smallest charge the gateway accepts, in minor units
MINIMUM_CHARGE_AMOUNT = 50


def get_stripe_currency() -> str:
    return os.getenv('STRIPE_CURRENCY', 'usd')


def configure_stripe():
    """Set the Stripe API key from the environment"""
    api_key = os.getenv('STRIPE_SECRET_KEY')
    if not api_key:
        raise RuntimeError("STRIPE_SECRET_KEY is required but was not found in env variables")
    stripe.api_key = api_key
    return stripe
