"""
Services 패키지

비즈니스 로직 서비스 클래스들을 제공합니다.
"""

from .transfer_service import TransferService
from .savings_product_service import SavingsProductService
from .account_service import AccountService
from .category_service import CategoryService
from .statistics_service import StatisticsService
from .budget_service import BudgetService
from .stock_service import StockService

__all__ = [
    "TransferService",
    "SavingsProductService",
    "AccountService",
    "CategoryService",
    "StatisticsService",
    "BudgetService",
    "StockService",
]
