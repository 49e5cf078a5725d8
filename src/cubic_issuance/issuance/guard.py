"""
Guard — reentrancy guard и журнал компенсаций для атомарных переходов

ReentrancyGuard: флаг взаимного исключения, захватываемый на входе в
buy/sell и освобождаемый на любом пути выхода (включая исключения).

TransitionJournal: каждая мутация внутри перехода регистрирует
компенсирующее действие; при исключении компенсации исполняются в обратном
порядке и исключение пробрасывается дальше. Состояние после неудачного
вызова совпадает с состоянием до него.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, List, Tuple

from cubic_issuance.core.errors import ReentrantCall

logger = logging.getLogger(__name__)


class ReentrancyGuard:
    """
    Non-reentrant lock для buy/sell.

    Повторный вход (рекурсивный через hook получателя или параллельный из
    другого потока) не ждёт, а сразу падает с ReentrantCall.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._operation: str | None = None

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def hold(self, operation: str) -> Iterator[None]:
        """
        Захват guard'а на время operation.

        Raises:
            ReentrantCall: Если guard уже захвачен
        """
        if not self._lock.acquire(blocking=False):
            raise ReentrantCall(
                f"{operation} re-entered while {self._operation} is in flight"
            )
        self._operation = operation
        try:
            yield
        finally:
            self._operation = None
            self._lock.release()


class TransitionJournal:
    """Журнал компенсирующих действий одного перехода."""

    def __init__(self, operation: str):
        self.operation = operation
        self._undo: List[Tuple[str, Callable[[], None]]] = []

    def record(self, description: str, compensation: Callable[[], None]) -> None:
        """Регистрация компенсации для только что выполненной мутации."""
        self._undo.append((description, compensation))

    def rollback(self) -> None:
        """Исполнение компенсаций в обратном порядке."""
        while self._undo:
            description, compensation = self._undo.pop()
            logger.debug(f"{self.operation}: undo {description}")
            compensation()

    @classmethod
    @contextmanager
    def atomic(cls, operation: str) -> Iterator["TransitionJournal"]:
        """
        Атомарный блок: при исключении откатывает все записанные мутации.

        Исключение всегда пробрасывается после отката.
        """
        journal = cls(operation)
        try:
            yield journal
        except Exception as e:
            logger.warning(f"{operation} rolled back: {getattr(e, 'reason', type(e).__name__)}: {e}")
            journal.rollback()
            raise
