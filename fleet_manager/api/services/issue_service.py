"""Issue and expense records."""
from __future__ import annotations

from .records import RecordService


class IssueService(RecordService):
    table = "issues"
    label = "issue"
    filter_fields = ("vehicle_id", "status", "priority")
    order_by = "created_at DESC, id DESC"


class ExpenseService(RecordService):
    table = "expenses"
    label = "expense"
    filter_fields = ("vehicle_id", "category")
    order_by = "expense_date DESC, id DESC"
