"""Billing summaries for PsiPro."""

from psipro.billing.finance import MonthlySummary, monthly_summary

__all__ = ["MonthlySummary", "monthly_summary"]
