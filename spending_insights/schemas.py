"""Pydantic schemas validating records handed over by the storage layer"""

from datetime import datetime
from typing import Any, Iterable, List, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from spending_insights.domain.exceptions import InvalidTransactionDataError
from spending_insights.domain.models import Budget, Goal, Transaction, TransactionType


class TransactionRecord(BaseModel):
    """Raw transaction as stored"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1)
    date: datetime
    amount: float = Field(..., ge=0, description="Non-negative magnitude; direction is in type")
    type: TransactionType
    category: str = "other"
    description: str = ""

    def to_domain(self) -> Transaction:
        return Transaction(
            id=self.id,
            date=self.date,
            amount=self.amount,
            type=self.type,
            category=self.category,
            description=self.description,
        )


class BudgetRecord(BaseModel):
    """Raw budget as stored"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    category: str
    budget_amount: float = Field(..., ge=0, alias="budgetAmount")
    spent: float = Field(0.0, ge=0)
    period: str = "monthly"
    is_active: bool = Field(True, alias="isActive")
    name: str = ""

    def to_domain(self) -> Budget:
        return Budget(
            category=self.category,
            budget_amount=self.budget_amount,
            spent=self.spent,
            period=self.period,
            is_active=self.is_active,
            name=self.name,
        )


class GoalRecord(BaseModel):
    """Raw savings goal as stored"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    remaining_amount: float = Field(..., ge=0, alias="remainingAmount")
    days_remaining: int = Field(..., alias="daysRemaining")
    is_active: bool = Field(True, alias="isActive")
    is_completed: bool = Field(False, alias="isCompleted")
    target_amount: float = Field(0.0, ge=0, alias="targetAmount")

    def to_domain(self) -> Goal:
        return Goal(
            name=self.name,
            remaining_amount=self.remaining_amount,
            days_remaining=self.days_remaining,
            is_active=self.is_active,
            is_completed=self.is_completed,
            target_amount=self.target_amount,
        )


def parse_transactions(records: Iterable[Mapping[str, Any]]) -> List[Transaction]:
    """
    Validate raw transaction records and convert them to domain objects.

    Raises:
        InvalidTransactionDataError: On a missing field, negative amount or unknown type
    """
    try:
        return [TransactionRecord.model_validate(record).to_domain() for record in records]
    except ValidationError as e:
        raise InvalidTransactionDataError(f"Invalid transaction data: {e}") from e


def parse_budgets(records: Iterable[Mapping[str, Any]]) -> List[Budget]:
    try:
        return [BudgetRecord.model_validate(record).to_domain() for record in records]
    except ValidationError as e:
        raise InvalidTransactionDataError(f"Invalid budget data: {e}") from e


def parse_goals(records: Iterable[Mapping[str, Any]]) -> List[Goal]:
    try:
        return [GoalRecord.model_validate(record).to_domain() for record in records]
    except ValidationError as e:
        raise InvalidTransactionDataError(f"Invalid goal data: {e}") from e
