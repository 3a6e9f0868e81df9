"""
Pydantic schemas for the dashboard summary.

Field names are camelCase because the web front end reads
them directly.
"""

from pydantic import BaseModel


class ControlSummary(BaseModel):
    total: int
    activated: int
    compliant: int
    nonCompliant: int
    overdue: int
    compliancePercentage: float


class TicketSummary(BaseModel):
    totalTickets: int
    openTickets: int
    resolvedThisMonth: int


class CountSummary(BaseModel):
    total: int


class DashboardSummary(BaseModel):
    controls: ControlSummary
    tickets: TicketSummary
    assets: CountSummary
    documents: CountSummary
