# Routers package for quotebook
from . import auth, dashboard, materials, pop, pricing, quotations

__all__ = ["auth", "dashboard", "materials", "pop", "pricing", "quotations"]
