"""Router aggregation for the ledger API."""

from fastapi import FastAPI

from . import accounts, budgets, categories, savings_products, statistics, stocks, transactions


def register_routers(app: FastAPI) -> None:
    """Attach all API routes to the FastAPI application."""

    for module in (accounts, categories, transactions, savings_products, statistics, budgets, stocks):
        app.include_router(module.router, prefix="/api")
