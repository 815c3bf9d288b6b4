"""Catalogue maintenance — shopkeepers add, edit and remove their products."""

import json

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.account.user import User
from marketplace.catalogue.product import Product
from marketplace.domain import marketplace
from marketplace.exceptions import NotAuthorized
from marketplace.shop.shop import Shop
from marketplace.utils.repository import load


@marketplace.command(part_of="Product")
class CreateProduct:
    actor_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    description = Text(required=True)
    price = Float(required=True, min_value=0.0)
    category = String(required=True, max_length=100)
    image = String(max_length=1000)
    stock = Integer(min_value=0)


@marketplace.command(part_of="Product")
class UpdateProduct:
    actor_id = Identifier(required=True)
    product_id = Identifier(required=True)
    changes = Text(required=True)  # JSON object of field -> value


@marketplace.command(part_of="Product")
class DeleteProduct:
    actor_id = Identifier(required=True)
    product_id = Identifier(required=True)


def _assert_manages(actor_id, shop_id):
    actor = load(User, actor_id, "User")
    if not actor.is_shopkeeper:
        raise NotAuthorized("Only shopkeepers can manage products")
    shop = load(Shop, shop_id, "Shop")
    if not shop.is_owned_by(actor):
        raise NotAuthorized("Not authorized to manage products of this shop")


@marketplace.command_handler(part_of=Product)
class ProductManagementHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        _assert_manages(command.actor_id, command.shop_id)

        product = Product.list_item(
            shop_id=command.shop_id,
            name=command.name,
            description=command.description,
            price=command.price,
            category=command.category,
            image=command.image,
            stock=command.stock,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        product = load(Product, command.product_id, "Product")
        _assert_manages(command.actor_id, product.shop_id)

        changes = json.loads(command.changes) if isinstance(command.changes, str) else command.changes
        product.update_details(**changes)
        current_domain.repository_for(Product).add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        product = load(Product, command.product_id, "Product")
        _assert_manages(command.actor_id, product.shop_id)

        current_domain.repository_for(Product)._dao.delete(product)
