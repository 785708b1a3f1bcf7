"""User directory queries."""

from chatline.application.queries.users.get_user import GetUserQuery, GetUserHandler
from chatline.application.queries.users.search_users import (
    SearchUsersQuery,
    SearchUsersHandler,
)

__all__ = [
    "GetUserQuery",
    "GetUserHandler",
    "SearchUsersQuery",
    "SearchUsersHandler",
]
