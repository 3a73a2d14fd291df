"""In-memory store for users, session tokens, categories and todos.

Mutations never await, so each one is atomic with respect to other
requests running on the same event loop.
"""

from __future__ import annotations

import itertools
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from todo_server.exceptions import BadRequest, Conflict, NotFound


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class User:
    id: int
    username: str
    password_hash: str
    created_at: datetime

    def public(self) -> dict[str, Any]:
        return {"id": self.id, "username": self.username, "created_at": self.created_at}


@dataclass
class Category:
    id: int
    owner_id: int
    name: str
    created_at: datetime


@dataclass
class Todo:
    id: int
    owner_id: int
    title: str
    created_at: datetime
    updated_at: datetime
    description: str | None = None
    completed: bool = False
    category_id: int | None = None


@dataclass
class _Sequences:
    users: itertools.count = field(default_factory=lambda: itertools.count(1))
    categories: itertools.count = field(default_factory=lambda: itertools.count(1))
    todos: itertools.count = field(default_factory=lambda: itertools.count(1))


class Store:
    """Holds all entities of a running server."""

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._ids = _Sequences()
        self._users: dict[int, User] = {}
        self._usernames: dict[str, int] = {}
        self._tokens: dict[str, int] = {}
        self._categories: dict[int, Category] = {}
        self._todos: dict[int, Todo] = {}

    # -- users and tokens --

    def add_user(self, username: str, password_hash: str) -> User:
        key = username.casefold()
        if key in self._usernames:
            raise Conflict("Пользователь с таким именем уже существует")
        user = User(
            id=next(self._ids.users),
            username=username,
            password_hash=password_hash,
            created_at=self._clock(),
        )
        self._users[user.id] = user
        self._usernames[key] = user.id
        return user

    def user_by_username(self, username: str) -> User | None:
        user_id = self._usernames.get(username.casefold())
        return self._users.get(user_id) if user_id is not None else None

    def issue_token(self, user: User) -> str:
        token = secrets.token_urlsafe(32)
        self._tokens[token] = user.id
        return token

    def user_for_token(self, token: str) -> User | None:
        user_id = self._tokens.get(token)
        return self._users.get(user_id) if user_id is not None else None

    def revoke_token(self, token: str) -> None:
        self._tokens.pop(token, None)

    # -- categories --

    def categories_for(self, owner_id: int) -> list[Category]:
        return [c for c in self._categories.values() if c.owner_id == owner_id]

    def category(self, owner_id: int, category_id: int) -> Category:
        category = self._categories.get(category_id)
        if category is None or category.owner_id != owner_id:
            raise NotFound("Категория не найдена")
        return category

    def add_category(self, owner_id: int, name: str) -> Category:
        self._ensure_unique_category(owner_id, name)
        category = Category(
            id=next(self._ids.categories),
            owner_id=owner_id,
            name=name,
            created_at=self._clock(),
        )
        self._categories[category.id] = category
        return category

    def rename_category(self, owner_id: int, category_id: int, name: str) -> Category:
        category = self.category(owner_id, category_id)
        self._ensure_unique_category(owner_id, name, exclude=category_id)
        category.name = name
        return category

    def delete_category(self, owner_id: int, category_id: int) -> None:
        self.category(owner_id, category_id)
        del self._categories[category_id]
        for todo in self._todos.values():
            if todo.category_id == category_id:
                todo.category_id = None

    def _ensure_unique_category(
        self, owner_id: int, name: str, *, exclude: int | None = None
    ) -> None:
        key = name.casefold()
        for category in self.categories_for(owner_id):
            if category.id != exclude and category.name.casefold() == key:
                raise Conflict("Категория с таким названием уже существует")

    # -- todos --

    def todos_for(
        self,
        owner_id: int,
        *,
        completed: bool | None = None,
        category_id: int | None = None,
    ) -> list[Todo]:
        todos = [t for t in self._todos.values() if t.owner_id == owner_id]
        if completed is not None:
            todos = [t for t in todos if t.completed is completed]
        if category_id is not None:
            todos = [t for t in todos if t.category_id == category_id]
        return todos

    def todo(self, owner_id: int, todo_id: int) -> Todo:
        todo = self._todos.get(todo_id)
        if todo is None or todo.owner_id != owner_id:
            raise NotFound("Задача не найдена")
        return todo

    def add_todo(self, owner_id: int, **fields: Any) -> Todo:
        self._check_category(owner_id, fields.get("category_id"))
        now = self._clock()
        todo = Todo(
            id=next(self._ids.todos),
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
            **fields,
        )
        self._todos[todo.id] = todo
        return todo

    def update_todo(self, owner_id: int, todo_id: int, **changes: Any) -> Todo:
        todo = self.todo(owner_id, todo_id)
        if "category_id" in changes:
            self._check_category(owner_id, changes["category_id"])
        for name, value in changes.items():
            setattr(todo, name, value)
        todo.updated_at = self._clock()
        return todo

    def delete_todo(self, owner_id: int, todo_id: int) -> None:
        self.todo(owner_id, todo_id)
        del self._todos[todo_id]

    def _check_category(self, owner_id: int, category_id: int | None) -> None:
        if category_id is None:
            return
        category = self._categories.get(category_id)
        if category is None or category.owner_id != owner_id:
            raise BadRequest("Указанная категория не существует")
