"""Builders for outbound notification collaborators, exposed as route dependencies.

Tests override these through ``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Optional, Protocol

from ...components.notifications.dedupe import RecentSendCache, get_recent_send_cache
from ...components.notifications.service import send_evaluation_results, send_welcome


class ResultsNotifierAdapter(Protocol):
    def __call__(
        self,
        *,
        to_email: str,
        evaluation_id: str,
        access_code: str,
        evaluation_type: str,
        score: int,
        display_name: str,
    ) -> Optional[str]: ...


class WelcomeSenderAdapter(Protocol):
    def __call__(self, *, to_email: str, first_name: str) -> Optional[str]: ...


def build_results_notifier() -> ResultsNotifierAdapter:
    return send_evaluation_results


def build_welcome_sender() -> WelcomeSenderAdapter:
    return send_welcome


def build_recent_send_cache() -> RecentSendCache:
    return get_recent_send_cache()
