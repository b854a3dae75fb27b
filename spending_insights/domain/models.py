"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from spending_insights.utils.date_utils import to_wall_clock


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


@dataclass(frozen=True)
class Transaction:
    """Transaction supplied by the storage layer; direction is carried by type, never by sign"""

    id: str
    date: datetime
    amount: float
    type: TransactionType
    category: str
    description: str

    def __post_init__(self):
        # Dates are compared as recorded wall-clock time
        object.__setattr__(self, "date", to_wall_clock(self.date))


@dataclass(frozen=True)
class Budget:
    """Spending ceiling for one category"""

    category: str
    budget_amount: float
    spent: float
    period: str = "monthly"
    is_active: bool = True
    name: str = ""

    @property
    def remaining(self) -> float:
        return self.budget_amount - self.spent

    @property
    def percentage_used(self) -> float:
        """Share of the budget consumed; above 1.0 once overspent, 0 without a limit"""
        if self.budget_amount <= 0:
            return 0.0
        return self.spent / self.budget_amount


@dataclass(frozen=True)
class Goal:
    """Savings goal still to be funded"""

    name: str
    remaining_amount: float
    days_remaining: int
    is_active: bool = True
    is_completed: bool = False
    target_amount: float = 0.0

    @property
    def progress_percentage(self) -> Optional[float]:
        """Funded share of the target in percent, None when no target is known"""
        if self.target_amount <= 0:
            return None
        return (self.target_amount - self.remaining_amount) / self.target_amount * 100


@dataclass(frozen=True)
class MonthlySeries:
    """Per-month totals for one category, ordered by month key"""

    category: str
    transactions: List[Transaction]
    totals_by_month: Dict[str, float]
    values: List[float]
    average: float


class SpendingTrend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


@dataclass(frozen=True)
class MonthlyPrediction:
    """Forecast for a single calendar month (1-12)"""

    month: int
    predicted_amount: float
    confidence: float
    trend: SpendingTrend


@dataclass(frozen=True)
class ExpensePrediction:
    category: str
    predictions: List[MonthlyPrediction]
    historical_average: float
    trend_slope: float
    data_point_count: int


class AnomalyType(str, Enum):
    UNUSUAL_AMOUNT = "unusual_amount"
    FREQUENCY_SPIKE = "frequency_spike"
    UNUSUAL_TIMING = "unusual_timing"
    POTENTIAL_DUPLICATE = "potential_duplicate"


class AnomalySeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {AnomalySeverity.LOW: 0, AnomalySeverity.MEDIUM: 1, AnomalySeverity.HIGH: 2}


@dataclass(frozen=True)
class TransactionAnomaly:
    """Flag raised against a transaction; explanation is a message key"""

    id: str
    transaction: Transaction
    anomaly_type: AnomalyType
    severity: AnomalySeverity
    z_score: float
    expected_range: Tuple[float, float]
    explanation: str


class ImpactLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _IMPACT_RANK[self]


_IMPACT_RANK = {ImpactLevel.LOW: 0, ImpactLevel.MEDIUM: 1, ImpactLevel.HIGH: 2}


@dataclass(frozen=True)
class BudgetSuggestion:
    category: str
    suggested_amount: float
    current_amount: Optional[float]
    average_spending: float
    median_spending: float
    percentile_90: float
    confidence: float
    reasoning: str
    impact_level: ImpactLevel


class AdviceCategory(str, Enum):
    SPENDING = "spending"
    BUDGETING = "budgeting"
    GOALS = "goals"
    SAVINGS = "savings"
    INCOME = "income"
    RISK = "risk"


class AdvicePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    AdvicePriority.LOW: 0,
    AdvicePriority.MEDIUM: 1,
    AdvicePriority.HIGH: 2,
    AdvicePriority.CRITICAL: 3,
}


@dataclass(frozen=True)
class PersonalizedAdvice:
    """Advisory item; title and message are message keys interpolated with metadata"""

    id: str
    title: str
    message: str
    category: AdviceCategory
    priority: AdvicePriority
    actionable: bool
    potential_savings: float
    metadata: Dict[str, str] = field(default_factory=dict)


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _RISK_RANK[self]


_RISK_RANK = {RiskLevel.LOW: 0, RiskLevel.MEDIUM: 1, RiskLevel.HIGH: 2, RiskLevel.CRITICAL: 3}


@dataclass(frozen=True)
class BudgetPrediction:
    """Month-end projection of a budget at the current spending pace"""

    budget: Budget
    current_spent: float
    projected_total: float
    days_remaining: int
    risk_level: RiskLevel
    recommendation: str


class BudgetStatus(str, Enum):
    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"
    EXCEEDED = "exceeded"
    NO_BUDGET = "no_budget"


@dataclass(frozen=True)
class SpendingPattern:
    category: str
    total_spent: float
    average_transaction: float
    frequency: int
    trend: SpendingTrend
    budget_status: BudgetStatus


class InsightType(str, Enum):
    POSITIVE = "positive"
    WARNING = "warning"
    INFO = "info"


class InsightCategory(str, Enum):
    SPENDING = "spending"
    BUDGET = "budget"
    GOALS = "goals"
    SAVINGS = "savings"


class InsightPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _INSIGHT_PRIORITY_RANK[self]


_INSIGHT_PRIORITY_RANK = {
    InsightPriority.LOW: 0,
    InsightPriority.MEDIUM: 1,
    InsightPriority.HIGH: 2,
    InsightPriority.CRITICAL: 3,
}


@dataclass(frozen=True)
class FinancialInsight:
    """Dashboard insight; value is a percentage, an amount or a count depending on the title key"""

    id: str
    type: InsightType
    category: InsightCategory
    title: str
    message: str
    value: float
    priority: InsightPriority
    actionable: bool
    metadata: Dict[str, str] = field(default_factory=dict)
