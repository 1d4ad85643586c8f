"""Product aggregate: a provider's listing of an album in one format.

The product carries the authoritative stock counter for its listing. Every
stock mutation goes through ``set_stock``/``adjust_stock``, which keep the
counter non-negative, stamp ``last_stock_update`` and raise
``StockLevelChanged`` (plus ``LowStockDetected`` when the counter falls to
or below the product's threshold).

Digital products are never scarce: a supplied stock below the configured
floor (999) is replaced by a sentinel (9999) on listing and on update.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from marketplace.catalogue.events import (
    LowStockDetected,
    ProductDeactivated,
    ProductDetailsUpdated,
    ProductFeaturedToggled,
    ProductListed,
    ProductPriceChanged,
    ProductReactivated,
    StockLevelChanged,
)
from marketplace.config import get_settings
from marketplace.domain import marketplace
from marketplace.shared.exceptions import InvalidStateError
from marketplace.shared.money import as_amount, to_decimal


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ProductType(Enum):
    PHYSICAL = "PHYSICAL"
    DIGITAL = "DIGITAL"


class VinylSize(Enum):
    SEVEN_INCH = "SEVEN_INCH"
    TEN_INCH = "TEN_INCH"
    TWELVE_INCH = "TWELVE_INCH"


class VinylSpeed(Enum):
    RPM_33 = "RPM_33"
    RPM_45 = "RPM_45"
    RPM_78 = "RPM_78"


class StockChangeType(Enum):
    SET = "SET"
    INCREMENT = "INCREMENT"
    DECREMENT = "DECREMENT"
    LISTING = "LISTING"


def normalize_stock(product_type, stock_quantity):
    """Apply the digital-stock rule: DIGITAL stock below the floor becomes the sentinel."""
    settings = get_settings()
    product_type = product_type.value if isinstance(product_type, ProductType) else product_type
    if product_type == ProductType.DIGITAL.value and stock_quantity < settings.digital_stock_floor:
        return settings.digital_stock_sentinel
    return stock_quantity


def _require_positive_price(price):
    if price is None or to_decimal(price) <= 0:
        raise ValidationError({"price": ["Price must be greater than zero"]})


def _require_non_negative_stock(quantity, field="stock_quantity"):
    if quantity is None or quantity < 0:
        raise ValidationError({field: [f"Stock quantity cannot be negative: {quantity}"]})


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@marketplace.aggregate
class Product:
    provider_id = Identifier(required=True)
    album_id = Identifier(required=True)
    sku = String(max_length=50)
    product_type = String(required=True, choices=ProductType)
    price = Float(required=True, min_value=0.0)
    stock_quantity = Integer(default=0, min_value=0)
    low_stock_threshold = Integer(default=5, min_value=0)
    is_active = Boolean(default=True)
    featured = Boolean(default=False)

    # Format details: vinyl for PHYSICAL, file for DIGITAL
    vinyl_size = String(choices=VinylSize)
    vinyl_speed = String(choices=VinylSpeed)
    file_format = String(max_length=20)
    file_size_mb = Float(min_value=0.0)

    created_at = DateTime()
    updated_at = DateTime()
    last_stock_update = DateTime()

    @invariant.post
    def format_details_must_match_product_type(self):
        if self.product_type == ProductType.PHYSICAL.value:
            missing = [name for name in ("vinyl_size", "vinyl_speed") if not getattr(self, name)]
            if missing:
                raise ValidationError({name: ["Required for physical products"] for name in missing})
        elif self.product_type == ProductType.DIGITAL.value:
            if not self.file_format:
                raise ValidationError({"file_format": ["Required for digital products"]})
            if not self.file_size_mb or self.file_size_mb <= 0:
                raise ValidationError({"file_size_mb": ["File size must be greater than zero for digital products"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        provider_id,
        album_id,
        product_type,
        price,
        stock_quantity=0,
        sku=None,
        low_stock_threshold=None,
        vinyl_size=None,
        vinyl_speed=None,
        file_format=None,
        file_size_mb=None,
    ):
        """List a new product for ``provider_id``.

        Rejects non-positive prices and negative stock; digital stock below
        the floor is silently raised to the sentinel.
        """
        _require_positive_price(price)
        stock_quantity = stock_quantity or 0
        _require_non_negative_stock(stock_quantity)

        if low_stock_threshold is None:
            low_stock_threshold = get_settings().low_stock_threshold

        now = datetime.now(UTC)
        stock = normalize_stock(product_type, stock_quantity)

        product = cls(
            provider_id=provider_id,
            album_id=album_id,
            sku=sku,
            product_type=product_type.value if isinstance(product_type, ProductType) else product_type,
            price=as_amount(price),
            stock_quantity=stock,
            low_stock_threshold=low_stock_threshold,
            vinyl_size=vinyl_size,
            vinyl_speed=vinyl_speed,
            file_format=file_format,
            file_size_mb=file_size_mb,
            created_at=now,
            updated_at=now,
            last_stock_update=now,
        )
        product.raise_(
            ProductListed(
                product_id=str(product.id),
                provider_id=str(provider_id),
                album_id=str(album_id),
                product_type=product.product_type,
                price=product.price,
                stock_quantity=stock,
                listed_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def belongs_to(self, provider_id):
        return provider_id is not None and str(self.provider_id) == str(provider_id)

    @property
    def is_digital(self):
        return self.product_type == ProductType.DIGITAL.value

    def ensure_active(self):
        if not self.is_active:
            raise InvalidStateError({"is_active": [f"Product {self.id} is inactive"]})

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _record_stock_change(self, change_type, previous, reason=None):
        now = datetime.now(UTC)
        self.last_stock_update = now
        self.updated_at = now
        self.raise_(
            StockLevelChanged(
                product_id=str(self.id),
                provider_id=str(self.provider_id),
                change_type=change_type.value,
                previous_quantity=previous,
                new_quantity=self.stock_quantity,
                reason=reason,
                changed_at=now,
            )
        )
        self._check_low_stock()

    def _check_low_stock(self):
        """Raise LowStockDetected if stock is at or below the threshold."""
        if self.stock_quantity <= self.low_stock_threshold:
            self.raise_(
                LowStockDetected(
                    product_id=str(self.id),
                    provider_id=str(self.provider_id),
                    current_stock=self.stock_quantity,
                    threshold=self.low_stock_threshold,
                    detected_at=datetime.now(UTC),
                )
            )

    # -------------------------------------------------------------------
    # Stock ledger
    # -------------------------------------------------------------------
    def set_stock(self, new_quantity, reason=None):
        """Replace the stock counter with an absolute value."""
        _require_non_negative_stock(new_quantity)

        previous = self.stock_quantity
        self.stock_quantity = new_quantity
        self._record_stock_change(StockChangeType.SET, previous, reason)

    def adjust_stock(self, change_type, amount, reason=None):
        """Increment or decrement the counter; a decrement never goes below zero."""
        if not isinstance(change_type, StockChangeType):
            change_type = StockChangeType.__members__.get(str(change_type).upper())
        if change_type not in (StockChangeType.INCREMENT, StockChangeType.DECREMENT):
            raise ValidationError({"change_type": ["Adjustment type must be INCREMENT or DECREMENT"]})
        if amount is None or amount < 1:
            raise ValidationError({"quantity": ["Adjustment quantity must be at least 1"]})

        previous = self.stock_quantity
        if change_type == StockChangeType.INCREMENT:
            new_quantity = previous + amount
        else:
            new_quantity = previous - amount
            if new_quantity < 0:
                raise ValidationError(
                    {"quantity": [f"Insufficient stock: {previous} available, cannot remove {amount}"]}
                )

        self.stock_quantity = new_quantity
        self._record_stock_change(change_type, previous, reason)

    # -------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------
    def change_price(self, new_price, reason=None):
        """Set a new price. Zero is allowed here (bulk decreases floor at zero)."""
        if new_price is None or to_decimal(new_price) < 0:
            raise ValidationError({"price": [f"Price cannot be negative: {new_price}"]})

        previous = self.price
        now = datetime.now(UTC)
        self.price = as_amount(new_price)
        self.updated_at = now
        self.raise_(
            ProductPriceChanged(
                product_id=str(self.id),
                provider_id=str(self.provider_id),
                previous_price=previous,
                new_price=self.price,
                reason=reason,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Details
    # -------------------------------------------------------------------
    def update_details(
        self,
        price=None,
        stock_quantity=None,
        product_type=None,
        sku=None,
        low_stock_threshold=None,
        vinyl_size=None,
        vinyl_speed=None,
        file_format=None,
        file_size_mb=None,
    ):
        """Edit the listing. Digital normalization applies to the resulting stock."""
        if price is not None:
            _require_positive_price(price)
        if stock_quantity is not None:
            _require_non_negative_stock(stock_quantity)

        previous_stock = self.stock_quantity
        now = datetime.now(UTC)

        with atomic_change(self):
            if product_type is not None:
                self.product_type = product_type.value if isinstance(product_type, ProductType) else product_type
            if price is not None:
                self.price = as_amount(price)
            if sku is not None:
                self.sku = sku
            if low_stock_threshold is not None:
                self.low_stock_threshold = low_stock_threshold
            if vinyl_size is not None:
                self.vinyl_size = vinyl_size
            if vinyl_speed is not None:
                self.vinyl_speed = vinyl_speed
            if file_format is not None:
                self.file_format = file_format
            if file_size_mb is not None:
                self.file_size_mb = file_size_mb
            if stock_quantity is not None or product_type is not None:
                target = stock_quantity if stock_quantity is not None else self.stock_quantity
                self.stock_quantity = normalize_stock(self.product_type, target)
            self.updated_at = now

        self.raise_(
            ProductDetailsUpdated(
                product_id=str(self.id),
                provider_id=str(self.provider_id),
                product_type=self.product_type,
                price=self.price,
                stock_quantity=self.stock_quantity,
                updated_at=now,
            )
        )
        if self.stock_quantity != previous_stock:
            self._record_stock_change(StockChangeType.LISTING, previous_stock)

    # -------------------------------------------------------------------
    # Visibility
    # -------------------------------------------------------------------
    def set_featured(self, featured=None):
        """Flip ``featured``, or set it when a value is given."""
        self.featured = (not self.featured) if featured is None else bool(featured)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ProductFeaturedToggled(
                product_id=str(self.id),
                provider_id=str(self.provider_id),
                featured=self.featured,
            )
        )

    def set_active(self, active=None):
        """Flip ``is_active``, or set it when a value is given."""
        target = (not self.is_active) if active is None else bool(active)
        if target:
            self.reactivate()
        else:
            self.deactivate()

    def deactivate(self):
        """Soft delete: the row stays so order history can keep referencing it."""
        now = datetime.now(UTC)
        self.is_active = False
        self.updated_at = now
        self.raise_(
            ProductDeactivated(
                product_id=str(self.id),
                provider_id=str(self.provider_id),
                deactivated_at=now,
            )
        )

    def reactivate(self):
        now = datetime.now(UTC)
        self.is_active = True
        self.updated_at = now
        self.raise_(
            ProductReactivated(
                product_id=str(self.id),
                provider_id=str(self.provider_id),
                reactivated_at=now,
            )
        )
