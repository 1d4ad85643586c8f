"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the marketplace's validation
rules and match the field names expected by the API's Pydantic request
schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()

VINYL_SIZES = ["SEVEN_INCH", "TEN_INCH", "TWELVE_INCH"]
VINYL_SPEEDS = ["RPM_33", "RPM_45", "RPM_78"]
FILE_FORMATS = ["MP3", "FLAC", "WAV"]


def valid_email() -> str:
    local = fake.user_name()[:20]
    domain = fake.free_email_domain()
    return f"{local}.{uuid.uuid4().hex[:4]}@{domain}"


# ---------- Accounts ----------


def buyer_data() -> dict:
    return {"name": fake.name(), "email": valid_email()}


def provider_data() -> dict:
    return {"business_name": f"{fake.company()} Records"[:200], "email": valid_email()}


# ---------- Products ----------


def physical_product_data(provider_id: str, stock_quantity: int = 50) -> dict:
    """A vinyl pressing with a random size and speed."""
    return {
        "provider_id": provider_id,
        "album_id": f"album-{uuid.uuid4().hex[:8]}",
        "product_type": "PHYSICAL",
        "price": round(random.uniform(12.0, 60.0), 2),
        "stock_quantity": stock_quantity,
        "sku": f"LP-{uuid.uuid4().hex[:8].upper()}",
        "vinyl_size": random.choice(VINYL_SIZES),
        "vinyl_speed": random.choice(VINYL_SPEEDS),
    }


def digital_product_data(provider_id: str, album_id: str | None = None) -> dict:
    return {
        "provider_id": provider_id,
        "album_id": album_id or f"album-{uuid.uuid4().hex[:8]}",
        "product_type": "DIGITAL",
        "price": round(random.uniform(5.0, 15.0), 2),
        "file_format": random.choice(FILE_FORMATS),
        "file_size_mb": round(random.uniform(50.0, 900.0), 1),
    }


def adjustment_data(provider_id: str, change_type: str, quantity: int) -> dict:
    return {
        "provider_id": provider_id,
        "change_type": change_type,
        "quantity": quantity,
        "reason": fake.sentence(nb_words=4),
    }


def bulk_price_data(provider_id: str, product_ids: list[str]) -> dict:
    return {
        "product_ids": product_ids,
        "update_type": random.choice(["PRICE_INCREASE_PERCENTAGE", "PRICE_DECREASE_PERCENTAGE"]),
        "value": random.choice([5, 10, 15]),
        "reason": "Load test repricing",
        "provider_id": provider_id,
    }


# ---------- Orders ----------


def order_data(buyer_id: str, product_ids: list[str]) -> dict:
    return {
        "buyer_id": buyer_id,
        "payment_method": random.choice(["CARD", "PAYPAL"]),
        "address": fake.street_address()[:255],
        "city": fake.city()[:100],
        "state": fake.state_abbr(),
        "postal_code": fake.postcode()[:20],
        "country": "US",
        "items": [{"product_id": pid, "quantity": random.randint(1, 3)} for pid in product_ids],
    }
