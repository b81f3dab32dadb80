from __future__ import annotations

from typing import List


class FakeNotifier:
    """Records alerts and answers confirmations with a fixed reply."""

    def __init__(self, confirm_reply: bool = True) -> None:
        self.alerts: List[str] = []
        self.confirmations: List[str] = []
        self.confirm_reply = confirm_reply

    def alert(self, message: str) -> None:
        self.alerts.append(message)

    def confirm(self, message: str) -> bool:
        self.confirmations.append(message)
        return self.confirm_reply
