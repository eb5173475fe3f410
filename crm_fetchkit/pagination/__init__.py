"""
Pagination package for CRM FetchKit.

Re-exports the step generators and the sync/async runners so the client can
import from ``crm_fetchkit.pagination`` directly.
"""

from crm_fetchkit.pagination.engine import fetch_all_steps, fetch_page_steps
from crm_fetchkit.pagination.runners import run_async, run_sync

__all__ = [
    "fetch_all_steps",
    "fetch_page_steps",
    "run_async",
    "run_sync",
]
