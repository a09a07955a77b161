"""
Liquidity bucket allocation for the household simulation.

This module owns the four liquidity buckets (buffer, emergency, extra-payment
and deposito) and moves each month's net cash flow through them: surpluses
fill the buckets in priority order, deficits drain them in a fixed order, and
an optional deposito yield accrues on the extra-payment bucket.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field

from .simulation.config import EnginePolicy

# Drain order for monthly deficits.
DRAIN_ORDER = ("extra", "deposito", "emergency", "buffer")


class BucketState(BaseModel):
    """Balances of the four liquidity buckets."""

    buffer: float = Field(default=0.0, ge=0, description="Short-horizon buffer")
    emergency: float = Field(default=0.0, ge=0, description="Emergency fund")
    extra: float = Field(
        default=0.0, ge=0, description="Surplus earmarked for loan prepayment"
    )
    deposito: float = Field(default=0.0, ge=0, description="Interest-bearing deposit")

    @property
    def total(self) -> float:
        return self.buffer + self.emergency + self.extra + self.deposito


class BucketTargets(BaseModel):
    """Fill targets for the buffer and emergency buckets."""

    buffer: float = Field(..., ge=0, description="Buffer target")
    emergency: float = Field(..., ge=0, description="Emergency target")

    @classmethod
    def for_obligations(
        cls,
        monthly_expense: float,
        installment: float,
        policy: Optional[EnginePolicy] = None,
    ) -> "BucketTargets":
        """
        Build targets from monthly obligations.

        Args:
            monthly_expense: Total monthly expenses
            installment: Current (or baseline) mortgage installment
            policy: Engine policy holding the target multiples

        Returns:
            BucketTargets, by default 3x expenses + 1x installment for the
            buffer and 6x expenses + 6x installment for the emergency fund
        """
        policy = policy or EnginePolicy()
        return cls(
            buffer=policy.buffer_expense_months * monthly_expense
            + policy.buffer_installment_months * installment,
            emergency=policy.emergency_expense_months * monthly_expense
            + policy.emergency_installment_months * installment,
        )


class CashflowResult(BaseModel):
    """Outcome of allocating one month's net flow."""

    net_flow: float = Field(..., description="Income - expenses - installment")
    buckets: BucketState = Field(..., description="Bucket balances after the month")
    allocations: Dict[str, float] = Field(
        default_factory=dict, description="Amounts moved into each bucket"
    )
    draws: Dict[str, float] = Field(
        default_factory=dict, description="Amounts drawn from each bucket"
    )
    uncovered_deficit: float = Field(
        default=0.0, ge=0, description="Deficit left after all buckets were drained"
    )
    deposito_interest_earned: float = Field(
        default=0.0, ge=0, description="Deposito interest accrued this month"
    )
    has_bankruptcy: bool = Field(
        default=False, description="Deficit could not be covered"
    )


class CashAllocationEngine:
    """Waterfall allocator over the liquidity buckets of a single pass."""

    def __init__(
        self,
        use_deposito: bool,
        policy: Optional[EnginePolicy] = None,
        initial: Optional[BucketState] = None,
    ) -> None:
        """Initialize the buckets.

        Args:
            use_deposito: Whether the extra-payment bucket earns deposito yield
            policy: Engine policy (deposito rate, tolerances)
            initial: Opening balances; all buckets start empty by default
        """
        self.use_deposito = use_deposito
        self.policy = policy or EnginePolicy()
        opening = initial or BucketState()
        self.balances: Dict[str, float] = {
            "buffer": opening.buffer,
            "emergency": opening.emergency,
            "extra": opening.extra,
            "deposito": opening.deposito,
        }
        self.cumulative_interest = 0.0

    @property
    def buckets(self) -> BucketState:
        return BucketState(**self.balances)

    def process(self, net_flow: float, targets: BucketTargets) -> CashflowResult:
        """
        Allocate a surplus or cover a deficit, then accrue deposito interest.

        Args:
            net_flow: Income minus expenses minus the mortgage installment
            targets: Buffer and emergency fill targets for this month

        Returns:
            CashflowResult with balances, per-bucket movements and the
            bankruptcy signal
        """
        allocations: Dict[str, float] = {}
        draws: Dict[str, float] = {}
        uncovered = 0.0

        if net_flow > 0:
            allocations = self._fill(net_flow, targets)
        elif net_flow < 0:
            draws, uncovered = self._drain(-net_flow)

        has_bankruptcy = uncovered > self.policy.bankruptcy_tolerance

        interest = 0.0
        if self.use_deposito and self.balances["extra"] > 0:
            interest = self.balances["extra"] * (self.policy.deposito_rate / 100 / 12)
            self.balances["extra"] += interest
            self.cumulative_interest += interest

        return CashflowResult(
            net_flow=net_flow,
            buckets=self.buckets,
            allocations=allocations,
            draws=draws,
            uncovered_deficit=uncovered,
            deposito_interest_earned=interest,
            has_bankruptcy=has_bankruptcy,
        )

    def _fill(self, surplus: float, targets: BucketTargets) -> Dict[str, float]:
        remaining = surplus
        allocations = {"buffer": 0.0, "emergency": 0.0, "extra": 0.0}

        if self.balances["buffer"] < targets.buffer:
            fill = min(remaining, targets.buffer - self.balances["buffer"])
            self.balances["buffer"] += fill
            allocations["buffer"] = fill
            remaining -= fill

        buffer_full = (
            self.balances["buffer"] >= targets.buffer - self.policy.bucket_fill_tolerance
        )
        if buffer_full and self.balances["emergency"] < targets.emergency:
            fill = min(remaining, targets.emergency - self.balances["emergency"])
            self.balances["emergency"] += fill
            allocations["emergency"] = fill
            remaining -= fill

        if remaining > 0:
            self.balances["extra"] += remaining
            allocations["extra"] = remaining

        return allocations

    def _drain(self, deficit: float):
        draws: Dict[str, float] = {}
        for name in DRAIN_ORDER:
            if deficit <= 0:
                break
            taken = min(deficit, self.balances[name])
            if taken <= 0:
                continue
            self.balances[name] = max(0.0, self.balances[name] - taken)
            draws[name] = taken
            deficit -= taken
        return draws, max(0.0, deficit)

    def deduct_extra_payment(self, amount: float) -> None:
        """Withdraw a realized mortgage prepayment from the extra-payment bucket."""
        self.balances["extra"] = max(0.0, self.balances["extra"] - amount)
