"""Product listing management: commands and handler."""

import structlog
from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.domain import marketplace
from marketplace.shared.authorization import Role, has_role, require_owner, require_verified_provider

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Product")
class ListProduct:
    provider_id = Identifier(required=True)
    album_id = Identifier(required=True)
    product_type = String(required=True, max_length=20)
    price = Float(required=True)
    stock_quantity = Integer(default=0)
    sku = String(max_length=50)
    low_stock_threshold = Integer(min_value=0)
    vinyl_size = String(max_length=20)
    vinyl_speed = String(max_length=20)
    file_format = String(max_length=20)
    file_size_mb = Float()


@marketplace.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    provider_id = Identifier()
    actor_role = String(choices=Role, default=Role.PROVIDER.value)
    product_type = String(max_length=20)
    price = Float()
    stock_quantity = Integer()
    sku = String(max_length=50)
    low_stock_threshold = Integer(min_value=0)
    vinyl_size = String(max_length=20)
    vinyl_speed = String(max_length=20)
    file_format = String(max_length=20)
    file_size_mb = Float()


@marketplace.command(part_of="Product")
class DeactivateProduct:
    product_id = Identifier(required=True)
    provider_id = Identifier()
    actor_role = String(choices=Role, default=Role.PROVIDER.value)


@marketplace.command(part_of="Product")
class ReactivateProduct:
    product_id = Identifier(required=True)
    provider_id = Identifier()
    actor_role = String(choices=Role, default=Role.PROVIDER.value)


@marketplace.command(part_of="Product")
class ToggleFeatured:
    product_id = Identifier(required=True)
    provider_id = Identifier()
    actor_role = String(choices=Role, default=Role.PROVIDER.value)
    featured = Boolean()


def _load_for_edit(command):
    """Fetch the product, insisting on ownership unless an admin is acting."""
    repo = current_domain.repository_for(Product)
    if has_role(command.actor_role, Role.ADMIN):
        return repo, repo.get(command.product_id)

    require_verified_provider(command.provider_id)
    product = repo.get(command.product_id)
    require_owner(command.provider_id, product)
    return repo, product


@marketplace.command_handler(part_of=Product)
class ProductListingHandler:
    @handle(ListProduct)
    def list_product(self, command):
        require_verified_provider(command.provider_id)

        product = Product.create(
            provider_id=command.provider_id,
            album_id=command.album_id,
            product_type=command.product_type,
            price=command.price,
            stock_quantity=command.stock_quantity,
            sku=command.sku,
            low_stock_threshold=command.low_stock_threshold,
            vinyl_size=command.vinyl_size,
            vinyl_speed=command.vinyl_speed,
            file_format=command.file_format,
            file_size_mb=command.file_size_mb,
        )
        current_domain.repository_for(Product).add(product)

        logger.info(
            "product_listed",
            product_id=str(product.id),
            provider_id=command.provider_id,
            product_type=product.product_type,
            stock_quantity=product.stock_quantity,
        )
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo, product = _load_for_edit(command)
        product.update_details(
            price=command.price,
            stock_quantity=command.stock_quantity,
            product_type=command.product_type,
            sku=command.sku,
            low_stock_threshold=command.low_stock_threshold,
            vinyl_size=command.vinyl_size,
            vinyl_speed=command.vinyl_speed,
            file_format=command.file_format,
            file_size_mb=command.file_size_mb,
        )
        repo.add(product)

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        repo, product = _load_for_edit(command)
        product.deactivate()
        repo.add(product)
        logger.info("product_deactivated", product_id=str(product.id))

    @handle(ReactivateProduct)
    def reactivate_product(self, command):
        repo, product = _load_for_edit(command)
        product.reactivate()
        repo.add(product)

    @handle(ToggleFeatured)
    def toggle_featured(self, command):
        repo, product = _load_for_edit(command)
        product.set_featured(command.featured)
        repo.add(product)
        return product.featured
