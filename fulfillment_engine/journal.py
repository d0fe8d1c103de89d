from __future__ import annotations

import logging
from typing import List


class Journal:
    """
    Log sink shared by the ledger, the order book and the coordinator.

    Every line is kept in memory (for the demo runner and the tests) and
    forwarded to the standard logger.
    """

    def __init__(self, name: str = "fulfillment_engine") -> None:
        self.lines: List[str] = []
        self._logger = logging.getLogger(name)

    def log(self, message: str) -> None:
        self.lines.append(message)
        self._logger.info(message)

    def warn(self, message: str) -> None:
        self.lines.append(message)
        self._logger.warning(message)

    def matching(self, fragment: str) -> List[str]:
        return [line for line in self.lines if fragment in line]
