"""Shop lifecycle — create, update and close shops.

Creating a shop links it to the shopkeeper who opened it; that link is what
authorizes order status changes for the shop.
"""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.account.user import User
from marketplace.domain import logger, marketplace
from marketplace.exceptions import NotAuthorized
from marketplace.shop.shop import Shop
from marketplace.utils.repository import load


@marketplace.command(part_of="Shop")
class CreateShop:
    actor_id = Identifier(required=True)
    shop_name = String(required=True, max_length=255)
    category = String(required=True, max_length=100)
    address = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    phone = String(required=True, max_length=30)
    timings = String(max_length=100)
    description = Text()
    logo = String(max_length=1000)


@marketplace.command(part_of="Shop")
class UpdateShop:
    actor_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    changes = Text(required=True)  # JSON object of field -> value


@marketplace.command(part_of="Shop")
class DeleteShop:
    actor_id = Identifier(required=True)
    shop_id = Identifier(required=True)


@marketplace.command_handler(part_of=Shop)
class ShopManagementHandler:
    @handle(CreateShop)
    def create_shop(self, command):
        owner = load(User, command.actor_id, "User")
        if not owner.is_shopkeeper:
            raise NotAuthorized("Only shopkeepers can create shops")

        shop = Shop.open(
            owner,
            shop_name=command.shop_name,
            category=command.category,
            address=command.address,
            city=command.city,
            phone=command.phone,
            timings=command.timings,
            description=command.description,
            logo=command.logo,
        )
        current_domain.repository_for(Shop).add(shop)

        owner.link_shop(str(shop.id))
        current_domain.repository_for(User).add(owner)

        logger.info("shop_created", shop_id=str(shop.id), owner_id=str(owner.id))
        return str(shop.id)

    @handle(UpdateShop)
    def update_shop(self, command):
        shop = load(Shop, command.shop_id, "Shop")
        actor = load(User, command.actor_id, "User")
        if not shop.is_owned_by(actor):
            raise NotAuthorized("Not authorized to update this shop")

        changes = json.loads(command.changes) if isinstance(command.changes, str) else command.changes
        shop.update_details(**changes)
        current_domain.repository_for(Shop).add(shop)

    @handle(DeleteShop)
    def delete_shop(self, command):
        shop = load(Shop, command.shop_id, "Shop")
        actor = load(User, command.actor_id, "User")
        if not shop.is_owned_by(actor):
            raise NotAuthorized("Not authorized to delete this shop")

        current_domain.repository_for(Shop)._dao.delete(shop)

        if str(actor.shop_id) == str(shop.id):
            actor.shop_id = None
            current_domain.repository_for(User).add(actor)

        logger.info("shop_deleted", shop_id=str(shop.id))
