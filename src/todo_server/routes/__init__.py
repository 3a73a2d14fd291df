"""Route groups mounted by the application."""

from todo_server.routes.auth import auth_routes
from todo_server.routes.categories import category_routes
from todo_server.routes.diagnostics import diagnostic_routes
from todo_server.routes.todos import todo_routes

__all__ = ["auth_routes", "category_routes", "diagnostic_routes", "todo_routes"]
