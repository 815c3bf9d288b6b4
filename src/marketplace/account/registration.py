"""RegisterUser — create an account and open its first session."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from marketplace.account.lookup import find_by_email
from marketplace.account.user import User, normalize_email
from marketplace.domain import logger, marketplace


@marketplace.command(part_of="User")
class RegisterUser:
    email = String(required=True, max_length=255)
    password = String(required=True, max_length=255)
    name = String(required=True, max_length=100)
    role = String(max_length=20, default="customer")


@marketplace.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        """Returns the session token of the new user."""
        if find_by_email(normalize_email(command.email)) is not None:
            raise ValidationError({"email": ["User already exists with this email"]})

        user = User.register(
            email=command.email,
            password=command.password,
            name=command.name,
            role=command.role,
        )
        token = user.start_session()
        current_domain.repository_for(User).add(user)

        logger.info("user_registered", user_id=str(user.id), role=user.role)
        return token
