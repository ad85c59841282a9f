"""Structural correlation between unrelated types.

Usage:
    from clonekit.mapping import BeansCopy

    beans = BeansCopy(Person, PersonRecord)
    records = beans.to_b_list(people)
"""

from clonekit.mapping.beans import BeansCopy, clear_tables, correlation_table
from clonekit.mapping.models import CorrelationEntry, CorrelationTable

__all__ = [
    # Models
    "CorrelationEntry",
    "CorrelationTable",
    # Correlator
    "BeansCopy",
    "correlation_table",
    "clear_tables",
]
