# storefront/api/__init__.py
from fastapi import FastAPI
from storefront.api.routers import users, sessions, catalog, carts, checkout, orders


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Checkout Service",
        version="1.0.0",
    )

    app.include_router(users.router)
    app.include_router(sessions.router)
    app.include_router(catalog.router)
    app.include_router(carts.router)
    app.include_router(checkout.router)
    app.include_router(orders.router)

    return app
