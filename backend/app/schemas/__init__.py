from app.schemas.product import (
    ProductCreate, ProductUpdate, ProductResponse, ProductListResponse,
)
from app.schemas.employee import (
    EmployeeCreate, EmployeeUpdate, EmployeeResponse,
)
from app.schemas.transaction import (
    CartLine, SaleCreate, SaleReceipt, TransactionResponse, SalesHistoryResponse,
)
from app.schemas.report import (
    DashboardResponse, AnalyticsResponse,
)

__all__ = [
    "ProductCreate", "ProductUpdate", "ProductResponse", "ProductListResponse",
    "EmployeeCreate", "EmployeeUpdate", "EmployeeResponse",
    "CartLine", "SaleCreate", "SaleReceipt", "TransactionResponse", "SalesHistoryResponse",
    "DashboardResponse", "AnalyticsResponse",
]
