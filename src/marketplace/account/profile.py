"""Profile maintenance — commands and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.account.lookup import find_by_email
from marketplace.account.user import User, normalize_email
from marketplace.domain import marketplace


@marketplace.command(part_of="User")
class UpdateProfile:
    user_id = Identifier(required=True)
    name = String(max_length=100)
    email = String(max_length=255)


@marketplace.command(part_of="User")
class ChangePassword:
    user_id = Identifier(required=True)
    current_password = String(required=True, max_length=255)
    new_password = String(required=True, max_length=255)


@marketplace.command_handler(part_of=User)
class ProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        if command.email is not None:
            other = find_by_email(normalize_email(command.email))
            if other is not None and str(other.id) != str(user.id):
                raise ValidationError({"email": ["Email is already in use"]})

        user.update_profile(name=command.name, email=command.email)
        repo.add(user)

    @handle(ChangePassword)
    def change_password(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.change_password(command.current_password, command.new_password)
        repo.add(user)
