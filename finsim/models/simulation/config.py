"""
Simulation policy configuration.

This module provides the Pydantic model holding every constant the monthly
engine relies on: horizon, deposito yield, BPJS growth, austerity, liquidity
bucket target multiples and the sentinels used in summaries.

The EnginePolicy is passed explicitly to each run so the engine stays a pure
function of its inputs; environment-driven overrides are applied by
``finsim.config.get_engine_policy``.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class EnginePolicy(BaseModel):
    """
    Constants and tunable policy for the household simulation engine.

    Example:
        ```python
        policy = EnginePolicy(austerity_multiplier=0.0, horizon_months=120)
        result = run_simulation(expenses, income, mortgage, macro,
                                ScenarioType.WORST_CASE, risk, policy=policy)
        ```
    """

    horizon_months: int = Field(
        default=240, ge=12, le=1200, description="Number of simulated months"
    )

    # Deposito / interest-bearing extra-payment bucket
    deposito_rate: float = Field(
        default=6.0, ge=0, le=100, description="Annual deposito yield (%)"
    )

    # BPJS severance savings
    bpjs_growth_rate: float = Field(
        default=5.7, ge=0, le=100, description="Annual BPJS growth rate (%)"
    )
    bpjs_contribution_rate: float = Field(
        default=0.057,
        ge=0,
        le=1,
        description="Monthly BPJS contribution as a fraction of salary",
    )
    severance_salary_months: float = Field(
        default=1.0, ge=0, description="Severance paid, in months of salary"
    )

    # Job-loss behaviour
    austerity_multiplier: float = Field(
        default=0.5,
        ge=0,
        le=1,
        description="Discretionary spending factor in survival mode/unemployment",
    )

    # Amortization
    dust_threshold: float = Field(
        default=10_000.0, ge=0, description="Principal below this is written off"
    )
    default_rate: float = Field(
        default=12.0, ge=0, le=100, description="Rate used when no tier is configured"
    )

    # Liquidity bucket targets
    buffer_expense_months: float = Field(default=3.0, ge=0)
    buffer_installment_months: float = Field(default=1.0, ge=0)
    emergency_expense_months: float = Field(default=6.0, ge=0)
    emergency_installment_months: float = Field(default=6.0, ge=0)
    bucket_fill_tolerance: float = Field(
        default=1.0, ge=0, description="Buffer counts as full within this amount"
    )
    bankruptcy_tolerance: float = Field(
        default=0.01, ge=0, description="Uncovered deficit tolerated as rounding"
    )
    milestone_tolerance: float = Field(
        default=100.0, ge=0, description="Bucket counts as full for milestones"
    )

    # Risk thresholds (months of runway)
    high_risk_runway_months: float = Field(default=3.0, ge=0)
    medium_risk_runway_months: float = Field(default=6.0, ge=0)
    fragile_runway_months: float = Field(default=1.0, ge=0)
    fragile_grace_months: int = Field(
        default=6, ge=0, description="Months before the fragile-buffer check applies"
    )

    # Sentinels
    runway_sentinel: float = Field(
        default=999.0, description="Runway reported when there is no burn"
    )
    never_paid_off: int = Field(
        default=9999, description="Payoff month index when the loan never clears"
    )

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def validate_risk_thresholds(self) -> "EnginePolicy":
        """High-risk runway must not exceed the medium-risk runway."""
        if self.high_risk_runway_months > self.medium_risk_runway_months:
            raise ValueError(
                "high_risk_runway_months must be <= medium_risk_runway_months"
            )
        return self
