"""IssuanceLedger — buy/sell переходы по кубической кривой выпуска.

Единственный компонент, которому разрешено менять supply:
- buy: цена по кривой при текущем supply → приём депозита → mint → проверка
  потолка → refund излишка
- sell: burn → payout по кривой при supply после burn
- implicit buy/sell: value или units, поступившие на адрес эмитента

Дисциплина переходов:
- Supply и mint обновляются до любой выплаты value (закрывает окно, в
  котором получатель мог бы увидеть устаревший supply)
- Выплата value (refund или payout) — последний шаг перехода
- Reentrancy guard удерживается на всё время buy/sell
- Любая ошибка откатывает все мутации вызова (atomic all-or-nothing)
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping

from cubic_issuance.core.contracts import validate_ledger_config, validate_ledger_event
from cubic_issuance.core.domain.events import Bought, LedgerEvent, Sold
from cubic_issuance.core.domain.requests import PurchaseRequest, SaleRequest
from cubic_issuance.core.errors import (
    AmountTooHigh,
    ArithmeticOverflow,
    InsufficientAmount,
    InsufficientFunds,
    SupplyCeilingReached,
    ZeroAmount,
)
from cubic_issuance.core.math.bonding_curve import SCALE, curve_price, inverse_curve
from cubic_issuance.core.math.uint256 import checked_add, checked_sub, validate_uint256
from cubic_issuance.issuance.collaborators import UnitLedger, ValueTransfer
from cubic_issuance.issuance.guard import ReentrancyGuard, TransitionJournal

logger = logging.getLogger(__name__)

EventListener = Callable[[LedgerEvent], None]


@dataclass(frozen=True)
class LedgerConfig:
    """Неизменяемая конфигурация ledger'а, фиксируется при создании.

    - issuer: собственный адрес эмитента (держатель value и implicit sell units)
    - max_buy_amount: per-call лимит количества units в buy
    - supply_ceiling: абсолютный потолок outstanding supply
    - scale: масштаб curve units → минимальные единицы value
    """
    issuer: str = "issuer"
    max_buy_amount: int = 1_000_000
    supply_ceiling: int = 100_000_000
    scale: int = SCALE

    def __post_init__(self):
        if not isinstance(self.issuer, str) or not self.issuer:
            raise ValueError(f"issuer must be a non-empty string, got {self.issuer!r}")

        for name in ("max_buy_amount", "supply_ceiling", "scale"):
            value = validate_uint256(getattr(self, name), name)
            if value == 0:
                raise ValueError(f"{name} must be positive, got 0")

        # Самая дорогая достижимая цена: supply у потолка плюс максимальный buy
        try:
            curve_price(checked_add(self.supply_ceiling, self.max_buy_amount), 0, self.scale)
        except ArithmeticOverflow as e:
            raise ValueError(
                f"supply_ceiling={self.supply_ceiling} with max_buy_amount={self.max_buy_amount} "
                f"and scale={self.scale} overflows the curve: {e}"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LedgerConfig":
        """Конфигурация из mapping'а, проверенного по схеме ledger_config.

        Большие целые можно передавать как int или как десятичные строки.

        Raises:
            jsonschema.ValidationError: Если данные не соответствуют схеме
            ValueError: Если значения не проходят проверку диапазонов
        """
        payload = dict(data)
        validate_ledger_config(payload)

        kwargs: Dict[str, Any] = {"issuer": payload["issuer"]}
        for name in ("max_buy_amount", "supply_ceiling", "scale"):
            if name in payload:
                kwargs[name] = int(payload[name])
        return cls(**kwargs)


@dataclass(frozen=True)
class BuyResult:
    """Результат buy."""

    requester: str
    amount: int
    cost: int
    refund: int
    supply_before: int
    supply_after: int


@dataclass(frozen=True)
class SellResult:
    """Результат sell."""

    requester: str
    amount: int
    payout: int
    supply_before: int
    supply_after: int


class IssuanceLedger:
    """Issuance engine: buy/sell переходы между состояниями (supply, collected value).

    Инварианты:
    - supply равен сумме всех чистых выпусков
    - collected value = curve_price(supply, 0) всегда покрыт value эмитента
    - payout при sell никогда не превышает value, собранное за эти units

    Коллабораторы:
    - unit_ledger: балансы units; переводы на issuer → on_units_received_by_self
    - value_transfer: value; поступления на issuer → on_value_received
    """

    def __init__(
        self,
        config: LedgerConfig,
        unit_ledger: UnitLedger,
        value_transfer: ValueTransfer,
    ):
        """
        Args:
            config: неизменяемая конфигурация
            unit_ledger: внешний ledger units
            value_transfer: внешний транспорт value
        """
        self.config = config
        self._units = unit_ledger
        self._value = value_transfer

        self._supply = 0
        self._guard = ReentrancyGuard()
        self._events: List[LedgerEvent] = []
        self._listeners: List[EventListener] = []

        unit_ledger.set_receive_hook(config.issuer, self.on_units_received_by_self)
        value_transfer.set_receive_hook(config.issuer, self.on_value_received)

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------

    @property
    def supply(self) -> int:
        return self._supply

    @property
    def collected_value(self) -> int:
        """Value, собранное за весь outstanding supply: интеграл кривой от 0 до supply."""
        return curve_price(self._supply, 0, self.config.scale)

    @property
    def events(self) -> List[LedgerEvent]:
        """История committed событий (копия)."""
        return list(self._events)

    def calculate_price_for_tokens(self, amount: int) -> int:
        """Цена выпуска amount units при текущем supply."""
        return curve_price(amount, self._supply, self.config.scale)

    def calculate_tokens_for_price(self, value: int) -> int:
        """Количество units, выпускаемых на value при текущем supply."""
        return inverse_curve(value, self._supply, self.config.scale)

    def event_log(self) -> List[Dict[str, Any]]:
        """История событий в JSON-представлении, проверенном по схеме ledger_event."""
        records = []
        for event in self._events:
            record = event.model_dump(mode="json")
            validate_ledger_event(record)
            records.append(record)
        return records

    def check_solvency(self) -> int:
        """Проверка, что value эмитента покрывает collected value.

        Returns:
            Избыток value сверх collected value

        Raises:
            InsufficientFunds: Если value эмитента меньше collected value
        """
        reserve = self._value.balance_of(self.config.issuer)
        collected = self.collected_value
        if reserve < collected:
            raise InsufficientFunds(
                f"Issuer reserve {reserve} below collected value {collected} at supply {self._supply}"
            )
        return reserve - collected

    def subscribe(self, listener: EventListener) -> None:
        """Регистрация listener'а committed событий."""
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Explicit entry points
    # ------------------------------------------------------------------

    def buy(self, requester: str, amount: int, deposited_value: int) -> BuyResult:
        """Покупка amount units за deposited_value.

        deposited_value списывается с requester'а на адрес эмитента внутри
        перехода (ValueTransfer.collect) и возвращается при откате. Излишек
        над ценой возвращается requester'у.

        Raises:
            ZeroAmount: amount == 0
            AmountTooHigh: amount > max_buy_amount
            InsufficientFunds: deposited_value == 0, меньше цены или
                больше value на балансе requester'а
            SupplyCeilingReached: новый supply > supply_ceiling
            ReentrantCall: buy/sell уже выполняется
        """
        request = PurchaseRequest(
            requester=requester, amount=amount, deposited_value=deposited_value
        )
        with self._guard.hold("buy"):
            return self._buy(request, collect_deposit=True)

    def sell(self, requester: str, amount: int) -> SellResult:
        """Продажа amount units эмитенту за payout по кривой.

        Raises:
            ZeroAmount: amount == 0
            InsufficientAmount: баланс requester'а < amount
            ReentrantCall: buy/sell уже выполняется
        """
        request = SaleRequest(requester=requester, amount=amount)
        with self._guard.hold("sell"):
            return self._sell(request, holder=request.requester)

    def execute(self, request: PurchaseRequest | SaleRequest) -> BuyResult | SellResult:
        """Исполнение готового запроса (PurchaseRequest → buy, SaleRequest → sell)."""
        if isinstance(request, PurchaseRequest):
            return self.buy(request.requester, request.amount, request.deposited_value)
        return self.sell(request.requester, request.amount)

    # ------------------------------------------------------------------
    # Implicit entry points (receive hooks)
    # ------------------------------------------------------------------

    def on_units_received_by_self(self, sender: str, amount: int) -> SellResult:
        """Implicit sell: units уже переведены на адрес эмитента.

        Units сжигаются из holding'а эмитента, payout уходит sender'у.
        """
        request = SaleRequest(requester=sender, amount=amount)
        with self._guard.hold("implicit_sell"):
            return self._sell(request, holder=self.config.issuer)

    def on_value_received(self, sender: str, value: int) -> BuyResult:
        """Implicit buy: value уже поступило на адрес эмитента.

        Количество units — inverse_curve(value, supply); buy исполняется с
        точным value как deposited_value (излишек возвращается).

        Raises:
            InsufficientFunds: value не покрывает цену даже одного unit
        """
        validate_uint256(value, "value")
        with self._guard.hold("implicit_buy"):
            amount = inverse_curve(value, self._supply, self.config.scale)
            if amount == 0:
                raise InsufficientFunds(
                    f"Value {value} below price of one unit "
                    f"({self.calculate_price_for_tokens(1)}) at supply {self._supply}"
                )

            logger.debug(f"Implicit buy: {sender} sent {value}, implied amount {amount}")
            request = PurchaseRequest(requester=sender, amount=amount, deposited_value=value)
            # value уже на адресе эмитента: транспорт зачислил его до вызова hook'а
            return self._buy(request, collect_deposit=False)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _buy(self, request: PurchaseRequest, collect_deposit: bool) -> BuyResult:
        requester = request.requester
        amount = request.amount
        deposited_value = request.deposited_value

        with TransitionJournal.atomic("buy") as journal:
            # 1. Amount bounds
            if amount == 0:
                raise ZeroAmount(f"{requester}: buy amount must be positive")
            if amount > self.config.max_buy_amount:
                raise AmountTooHigh(
                    f"{requester}: buy amount {amount} > max {self.config.max_buy_amount}"
                )

            # 2. Value attached
            if deposited_value == 0:
                raise InsufficientFunds(f"{requester}: no value attached to buy")

            # 3-4. Price at current supply
            supply_before = self._supply
            cost = curve_price(amount, supply_before, self.config.scale)
            logger.debug(f"Buy quote: {amount} units at supply {supply_before} cost {cost}")
            if deposited_value < cost:
                raise InsufficientFunds(
                    f"{requester}: deposited {deposited_value} < price {cost} "
                    f"for {amount} units at supply {supply_before}"
                )

            # 5. Deposit: requester -> issuer, без hook'ов
            if collect_deposit:
                self._collect(journal, requester, deposited_value)

            # 6. Mint before any outbound value movement
            self._mint(journal, requester, amount)

            # 7. Ceiling after mint, before refund
            if self._supply > self.config.supply_ceiling:
                raise SupplyCeilingReached(
                    f"Supply {self._supply} would exceed ceiling {self.config.supply_ceiling}"
                )

            # 8. Refund excess
            refund = deposited_value - cost
            if refund > 0:
                self._value.send(self.config.issuer, requester, refund)

            # 9. Event
            event = self._record_event(journal, Bought(account=requester, amount=amount))

        logger.info(
            f"Bought: {requester} +{amount} units for {cost} (refund {refund}), "
            f"supply {supply_before} -> {self._supply}"
        )
        self._notify(event)
        return BuyResult(
            requester=requester,
            amount=amount,
            cost=cost,
            refund=refund,
            supply_before=supply_before,
            supply_after=self._supply,
        )

    def _sell(self, request: SaleRequest, holder: str) -> SellResult:
        requester = request.requester
        amount = request.amount

        with TransitionJournal.atomic("sell") as journal:
            if amount == 0:
                raise ZeroAmount(f"{requester}: sell amount must be positive")

            # 1. Balance
            balance = self._units.balance_of(holder)
            if balance < amount:
                raise InsufficientAmount(f"{holder}: balance {balance} < sell amount {amount}")

            # 2. Burn
            supply_before = self._supply
            self._burn(journal, holder, amount)

            # 3. Payout priced at post-burn supply
            payout = curve_price(amount, self._supply, self.config.scale)

            # 4. Value transfer
            self._value.send(self.config.issuer, requester, payout)

            # 5. Event
            event = self._record_event(journal, Sold(account=requester, amount=amount))

        logger.info(
            f"Sold: {requester} -{amount} units for {payout}, "
            f"supply {supply_before} -> {self._supply}"
        )
        self._notify(event)
        return SellResult(
            requester=requester,
            amount=amount,
            payout=payout,
            supply_before=supply_before,
            supply_after=self._supply,
        )

    # ------------------------------------------------------------------
    # Journaled mutations
    # ------------------------------------------------------------------

    def _set_supply(self, journal: TransitionJournal, new_supply: int) -> None:
        previous = self._supply
        self._supply = new_supply
        journal.record(f"supply {previous} -> {new_supply}", lambda: self._restore_supply(previous))

    def _restore_supply(self, previous: int) -> None:
        self._supply = previous

    def _collect(self, journal: TransitionJournal, payer: str, value: int) -> None:
        issuer = self.config.issuer
        self._value.collect(payer, issuer, value)
        journal.record(
            f"collect {value} from {payer}", lambda: self._value.collect(issuer, payer, value)
        )

    def _mint(self, journal: TransitionJournal, account: str, amount: int) -> None:
        # supply обновляется раньше mint: hook получателя видит актуальный supply
        self._set_supply(journal, checked_add(self._supply, amount))
        self._units.mint(account, amount)
        journal.record(f"mint {amount} to {account}", lambda: self._units.burn(account, amount))

    def _burn(self, journal: TransitionJournal, account: str, amount: int) -> None:
        self._units.burn(account, amount)
        journal.record(f"burn {amount} from {account}", lambda: self._units.mint(account, amount))
        self._set_supply(journal, checked_sub(self._supply, amount))

    def _record_event(self, journal: TransitionJournal, event: LedgerEvent) -> LedgerEvent:
        self._events.append(event)
        journal.record(f"event {event.kind.value}", self._events.pop)
        return event

    def _notify(self, event: LedgerEvent) -> None:
        # После commit: переход уже необратим, ошибка listener'а только логируется
        for listener in self._listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(f"Listener {listener!r} failed on {event.kind.value} event")
