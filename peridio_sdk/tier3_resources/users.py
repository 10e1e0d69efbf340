"""Users: the account behind the API key."""
from __future__ import annotations

from peridio_sdk.tier3_resources.base import ApiModel, Resource


class UserData(ApiModel):
    email: str
    username: str


class User(ApiModel):
    data: UserData


class UsersApi(Resource):
    async def me(self) -> User | None:
        return await self._api.execute("GET", "/users/me", response_type=User)
