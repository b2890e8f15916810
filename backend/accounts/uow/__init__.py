from accounts.uow.base import NestedUnitOfWorkError, UnitOfWork
from accounts.uow.coordinator import AutocommitStore, TransactionCoordinator
from accounts.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

__all__ = [
    "AutocommitStore",
    "NestedUnitOfWorkError",
    "SQLAlchemyUnitOfWork",
    "TransactionCoordinator",
    "UnitOfWork",
]
