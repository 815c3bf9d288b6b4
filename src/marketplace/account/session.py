"""Login and logout — commands and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.account.lookup import find_by_email
from marketplace.account.user import User
from marketplace.domain import marketplace
from marketplace.exceptions import NotAuthenticated


@marketplace.command(part_of="User")
class LogIn:
    email = String(required=True, max_length=255)
    password = String(required=True, max_length=255)


@marketplace.command(part_of="User")
class LogOut:
    user_id = Identifier(required=True)


@marketplace.command_handler(part_of=User)
class SessionHandler:
    @handle(LogIn)
    def log_in(self, command):
        user = find_by_email((command.email or "").strip().lower())
        if user is None or not user.verify_password(command.password):
            raise NotAuthenticated("Invalid credentials")

        token = user.start_session()
        current_domain.repository_for(User).add(user)
        return token

    @handle(LogOut)
    def log_out(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.end_session()
        repo.add(user)
