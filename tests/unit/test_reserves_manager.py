"""Tests for ReservesManager: custody, cancel, liquidation, payment and collateral."""

import pytest

from src.rm_chain.addresses import derive_address
from src.rm_chain.chain import Chain
from src.rm_chain.clock import ManualClock
from src.rm_common.datetime_utils import hours
from src.rm_common.errors import (
    ActiveProposalNotFoundError,
    AlreadyPaidError,
    AppError,
    BuyerPaymentPeriodNotFinishedError,
    InsufficientCollateralError,
    InvalidAmountError,
    InvalidReserveCallerError,
    OnlyBuyerError,
    OnlyMarketplaceError,
    OnlyProposalBuyerError,
    PaymentPeriodFinishedError,
    PriceAlreadyPaidError,
    ReserveExpiredError,
    ReserveNotFoundError,
    ReservePeriodNotFinishedError,
    TokenError,
    UncollateralizeReserveError,
)
from src.rm_reserves.domain.contract import ReservesManager
from tests.support import Accounts, ReserveDriver

UNKNOWN_RESERVE = "0x" + "00" * 32


@pytest.fixture
def manager(driver: ReserveDriver) -> ReservesManager:
    return driver.deployment.manager


@pytest.fixture
def reserve_id(driver: ReserveDriver) -> str:
    return driver.start_reserve()


# ---------------------------------------------------------------------------
# start_reserve
# ---------------------------------------------------------------------------


class TestStartReserve:
    def test_only_marketplace(
        self, manager: ReservesManager, driver: ReserveDriver, accounts: Accounts
    ) -> None:
        with pytest.raises(OnlyMarketplaceError) as exc:
            manager.start_reserve(
                accounts.other,
                seller=accounts.seller,
                buyer=accounts.buyer,
                **driver.terms(),
            )
        assert exc.value.message == "Only callable from the marketplace"

    def test_reserve_record(
        self,
        clock: ManualClock,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
        reserve_id: str,
    ) -> None:
        reserve = manager.get_reserve(reserve_id)
        assert reserve.seller == accounts.seller
        assert reserve.buyer == accounts.buyer
        assert reserve.start_timestamp == clock.now()
        assert reserve.price_paid_deadline == clock.now() + driver.reserve_period
        assert reserve.collateral_amount == driver.collateral
        assert reserve.paid is False
        assert manager.active_reserve_ids() == [reserve_id]

    def test_custody(
        self, manager: ReservesManager, driver: ReserveDriver, accounts: Accounts, reserve_id: str
    ) -> None:
        assert driver.collection.owner_of(driver.token_id) == manager.address
        assert driver.dai.balance_of(manager.address) == driver.collateral
        assert driver.dai.balance_of(accounts.buyer) == driver.buyer_funds - driver.collateral

    def test_get_reserve_returns_a_copy(self, manager: ReservesManager, reserve_id: str) -> None:
        manager.get_reserve(reserve_id).paid = True
        assert manager.get_reserve(reserve_id).paid is False

    def test_unknown_reserve(self, manager: ReservesManager) -> None:
        with pytest.raises(ReserveNotFoundError) as exc:
            manager.reserve_amounts(UNKNOWN_RESERVE)
        assert exc.value.message == "Non-existent active reserve"

    def test_amounts(self, manager: ReservesManager, driver: ReserveDriver, reserve_id: str) -> None:
        amounts = manager.reserve_amounts(reserve_id)
        assert (amounts.collateral, amounts.payment) == (driver.collateral, 0)


# ---------------------------------------------------------------------------
# cancel_reserve
# ---------------------------------------------------------------------------


class TestCancelReserve:
    def test_unknown_reserve(self, manager: ReservesManager, accounts: Accounts) -> None:
        with pytest.raises(ActiveProposalNotFoundError) as exc:
            manager.cancel_reserve(accounts.seller, UNKNOWN_RESERVE)
        assert exc.value.message == "Non-existent active proposal"

    def test_invalid_caller(
        self, manager: ReservesManager, accounts: Accounts, reserve_id: str
    ) -> None:
        with pytest.raises(InvalidReserveCallerError) as exc:
            manager.cancel_reserve(accounts.other, reserve_id)
        assert exc.value.message == "Invalid caller. Should be buyer or seller"

    def test_expired_at_deadline(
        self,
        clock: ManualClock,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
        reserve_id: str,
    ) -> None:
        clock.increase(driver.reserve_period)
        with pytest.raises(ReserveExpiredError) as exc:
            manager.cancel_reserve(accounts.buyer, reserve_id)
        assert exc.value.message == "Reserve expired. Pay or liquidate"

    def test_one_second_before_deadline(
        self,
        clock: ManualClock,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
        reserve_id: str,
    ) -> None:
        clock.increase(driver.reserve_period - 1)
        manager.cancel_reserve(accounts.buyer, reserve_id)
        assert manager.active_reserve_ids() == []

    def test_seller_cancel(
        self,
        chain: Chain,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
        reserve_id: str,
    ) -> None:
        manager.cancel_reserve(accounts.seller, reserve_id)

        assert driver.collection.owner_of(driver.token_id) == accounts.seller
        assert driver.dai.balance_of(accounts.seller) == driver.seller_funds - driver.fee
        assert driver.dai.balance_of(accounts.buyer) == driver.buyer_funds + driver.fee
        assert driver.dai.balance_of(manager.address) == 0
        with pytest.raises(ReserveNotFoundError):
            manager.get_reserve(reserve_id)

        event = chain.events.last("ReserveCanceled")
        assert event is not None
        assert event.args["reserveId"] == reserve_id
        assert event.args["fee"] == driver.fee
        assert event.args["executor"] == accounts.seller

    def test_buyer_cancel(
        self, manager: ReservesManager, driver: ReserveDriver, accounts: Accounts, reserve_id: str
    ) -> None:
        manager.cancel_reserve(accounts.buyer, reserve_id)

        assert driver.collection.owner_of(driver.token_id) == accounts.seller
        assert driver.dai.balance_of(accounts.buyer) == driver.buyer_funds - driver.fee
        assert driver.dai.balance_of(accounts.seller) == driver.seller_funds + driver.fee

    def test_fee_goes_to_beneficiary(
        self, manager: ReservesManager, driver: ReserveDriver, accounts: Accounts
    ) -> None:
        driver.sell(beneficiary=accounts.seller_beneficiary)
        outcome = driver.buy(beneficiary=accounts.buyer_beneficiary)
        assert outcome.reserve_id is not None

        manager.cancel_reserve(accounts.seller, outcome.reserve_id)
        assert driver.dai.balance_of(accounts.buyer_beneficiary) == driver.fee
        # Collateral refund goes to the payer, not the beneficiary.
        assert driver.dai.balance_of(accounts.buyer) == driver.buyer_funds

    def test_fee_needs_allowance(
        self, manager: ReservesManager, driver: ReserveDriver, accounts: Accounts, reserve_id: str
    ) -> None:
        driver.dai.approve(accounts.seller, manager.address, 0)
        with pytest.raises(TokenError) as exc:
            manager.cancel_reserve(accounts.seller, reserve_id)
        assert exc.value.message == "ERC20: insufficient allowance"
        # Fully reverted: still active and in custody.
        assert manager.active_reserve_ids() == [reserve_id]
        assert driver.collection.owner_of(driver.token_id) == manager.address

    def test_zero_fee_needs_no_allowance(
        self, manager: ReservesManager, driver: ReserveDriver, accounts: Accounts, reserve_id: str
    ) -> None:
        driver.deployment.parameters.set_seller_cancel_fee_percent(accounts.deployer, 0)
        driver.dai.approve(accounts.seller, manager.address, 0)
        manager.cancel_reserve(accounts.seller, reserve_id)
        assert driver.dai.balance_of(accounts.seller) == driver.seller_funds

    def test_fee_uses_current_parameters(
        self, manager: ReservesManager, driver: ReserveDriver, accounts: Accounts, reserve_id: str
    ) -> None:
        driver.deployment.parameters.set_buyer_cancel_fee_percent(accounts.deployer, 20)
        manager.cancel_reserve(accounts.buyer, reserve_id)
        assert driver.dai.balance_of(accounts.seller) == driver.seller_funds + driver.price // 5

    def test_cancel_after_payment_refunds_price(
        self, manager: ReservesManager, driver: ReserveDriver, accounts: Accounts, reserve_id: str
    ) -> None:
        manager.pay_the_price(accounts.buyer, reserve_id)
        manager.cancel_reserve(accounts.seller, reserve_id)
        assert driver.dai.balance_of(accounts.buyer) == driver.buyer_funds + driver.fee
        assert driver.dai.balance_of(manager.address) == 0


# ---------------------------------------------------------------------------
# liquidate_reserve
# ---------------------------------------------------------------------------


class TestLiquidateUnpaid:
    def test_invalid_caller(
        self, manager: ReservesManager, accounts: Accounts, reserve_id: str
    ) -> None:
        with pytest.raises(InvalidReserveCallerError):
            manager.liquidate_reserve(accounts.other, reserve_id)

    def test_unknown_reserve(self, manager: ReservesManager, accounts: Accounts) -> None:
        with pytest.raises(ReserveNotFoundError):
            manager.liquidate_reserve(accounts.seller, UNKNOWN_RESERVE)

    def test_buyer_before_deadline(
        self,
        clock: ManualClock,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
        reserve_id: str,
    ) -> None:
        clock.increase(driver.reserve_period - 1)
        with pytest.raises(ReservePeriodNotFinishedError) as exc:
            manager.liquidate_reserve(accounts.buyer, reserve_id)
        assert exc.value.message == "Reserve period not finished yet"

    def test_seller_before_deadline(
        self,
        clock: ManualClock,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
        reserve_id: str,
    ) -> None:
        clock.increase(driver.reserve_period - 1)
        with pytest.raises(BuyerPaymentPeriodNotFinishedError) as exc:
            manager.liquidate_reserve(accounts.seller, reserve_id)
        assert exc.value.message == "Buyer period to pay not finished yet"

    @pytest.mark.parametrize("party", ["seller", "buyer"])
    def test_at_deadline_collateral_goes_to_seller(
        self,
        chain: Chain,
        clock: ManualClock,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
        reserve_id: str,
        party: str,
    ) -> None:
        clock.increase(driver.reserve_period)
        caller = getattr(accounts, party)
        manager.liquidate_reserve(caller, reserve_id)

        assert driver.collection.owner_of(driver.token_id) == accounts.seller
        assert driver.dai.balance_of(accounts.seller) == driver.seller_funds + driver.collateral
        assert driver.dai.balance_of(accounts.buyer) == driver.buyer_funds - driver.collateral
        assert manager.active_reserve_ids() == []

        event = chain.events.last("PurchaseCanceled")
        assert event is not None
        assert event.args["collateral"] == driver.collateral
        assert event.args["executor"] == caller

    def test_collateral_goes_to_seller_beneficiary(
        self,
        clock: ManualClock,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
    ) -> None:
        driver.sell(beneficiary=accounts.seller_beneficiary)
        outcome = driver.buy()
        assert outcome.reserve_id is not None
        clock.increase(driver.reserve_period)
        manager.liquidate_reserve(accounts.seller, outcome.reserve_id)
        assert driver.dai.balance_of(accounts.seller_beneficiary) == driver.collateral
        assert driver.collection.owner_of(driver.token_id) == accounts.seller

    def test_grace_period_delays_seller_only(
        self,
        clock: ManualClock,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
        reserve_id: str,
    ) -> None:
        driver.deployment.parameters.set_buyer_purchase_grace_period(accounts.deployer, hours(1))
        clock.increase(driver.reserve_period)
        with pytest.raises(BuyerPaymentPeriodNotFinishedError):
            manager.liquidate_reserve(accounts.seller, reserve_id)
        clock.increase(hours(1))
        manager.liquidate_reserve(accounts.seller, reserve_id)
        assert manager.active_reserve_ids() == []

    def test_buyer_may_liquidate_during_grace(
        self,
        clock: ManualClock,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
        reserve_id: str,
    ) -> None:
        driver.deployment.parameters.set_buyer_purchase_grace_period(accounts.deployer, hours(1))
        clock.increase(driver.reserve_period)
        manager.liquidate_reserve(accounts.buyer, reserve_id)
        assert driver.dai.balance_of(accounts.seller) == driver.seller_funds + driver.collateral


class TestLiquidatePaid:
    @pytest.mark.parametrize("party", ["seller", "buyer"])
    def test_before_deadline(
        self,
        clock: ManualClock,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
        reserve_id: str,
        party: str,
    ) -> None:
        manager.pay_the_price(accounts.buyer, reserve_id)
        clock.increase(driver.reserve_period - 1)
        with pytest.raises(ReservePeriodNotFinishedError):
            manager.liquidate_reserve(getattr(accounts, party), reserve_id)

    def test_executes_purchase(
        self,
        chain: Chain,
        clock: ManualClock,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
        reserve_id: str,
    ) -> None:
        manager.pay_the_price(accounts.buyer, reserve_id)
        clock.increase(driver.reserve_period)
        manager.liquidate_reserve(accounts.seller, reserve_id)

        assert driver.collection.owner_of(driver.token_id) == accounts.buyer
        assert driver.dai.balance_of(accounts.seller) == driver.seller_funds + driver.price
        assert driver.dai.balance_of(accounts.buyer) == driver.buyer_funds - driver.price
        assert driver.dai.balance_of(manager.address) == 0

        event = chain.events.last("PurchaseExecuted")
        assert event is not None
        assert event.args["payment"] == driver.price
        assert event.args["collateral"] == driver.collateral
        assert event.args["executor"] == accounts.seller

    def test_proceeds_go_to_beneficiaries(
        self,
        clock: ManualClock,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
    ) -> None:
        driver.sell(beneficiary=accounts.seller_beneficiary)
        outcome = driver.buy(beneficiary=accounts.buyer_beneficiary)
        assert outcome.reserve_id is not None
        manager.pay_the_price(accounts.buyer, outcome.reserve_id)
        clock.increase(driver.reserve_period)
        manager.liquidate_reserve(accounts.buyer, outcome.reserve_id)

        assert driver.dai.balance_of(accounts.seller_beneficiary) == driver.price
        assert driver.collection.owner_of(driver.token_id) == accounts.buyer_beneficiary
        assert driver.dai.balance_of(accounts.buyer) == driver.buyer_funds - driver.price


# ---------------------------------------------------------------------------
# pay_the_price
# ---------------------------------------------------------------------------


class TestPayThePrice:
    def test_only_buyer(
        self, manager: ReservesManager, accounts: Accounts, reserve_id: str
    ) -> None:
        for caller in (accounts.seller, accounts.other):
            with pytest.raises(OnlyProposalBuyerError) as exc:
                manager.pay_the_price(caller, reserve_id)
            assert exc.value.message == "Only proposal buyer allowed"

    def test_unknown_reserve(self, manager: ReservesManager, accounts: Accounts) -> None:
        with pytest.raises(ReserveNotFoundError):
            manager.pay_the_price(accounts.buyer, UNKNOWN_RESERVE)

    def test_pays(
        self,
        chain: Chain,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
        reserve_id: str,
    ) -> None:
        manager.pay_the_price(accounts.buyer, reserve_id)
        assert manager.get_reserve(reserve_id).paid is True
        assert manager.reserve_amounts(reserve_id).payment == driver.price
        assert driver.dai.balance_of(manager.address) == driver.price + driver.collateral
        event = chain.events.last("ReservePricePaid")
        assert event is not None
        assert event.args == {"reserveId": reserve_id, "buyer": accounts.buyer, "price": driver.price}

    def test_twice(self, manager: ReservesManager, accounts: Accounts, reserve_id: str) -> None:
        manager.pay_the_price(accounts.buyer, reserve_id)
        with pytest.raises(AlreadyPaidError) as exc:
            manager.pay_the_price(accounts.buyer, reserve_id)
        assert exc.value.message == "Already paid"

    def test_at_deadline(
        self,
        clock: ManualClock,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
        reserve_id: str,
    ) -> None:
        clock.increase(driver.reserve_period)
        with pytest.raises(PaymentPeriodFinishedError) as exc:
            manager.pay_the_price(accounts.buyer, reserve_id)
        assert exc.value.message == "Period to pay finished"

    def test_grace_period_does_not_extend_payment(
        self,
        clock: ManualClock,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
        reserve_id: str,
    ) -> None:
        driver.deployment.parameters.set_buyer_purchase_grace_period(accounts.deployer, hours(1))
        clock.increase(driver.reserve_period)
        with pytest.raises(PaymentPeriodFinishedError) as exc:
            manager.pay_the_price(accounts.buyer, reserve_id)
        assert exc.value.message == "Period to pay finished"
        assert manager.get_reserve(reserve_id).paid is False

    def test_period_checked_before_already_paid(
        self,
        clock: ManualClock,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
        reserve_id: str,
    ) -> None:
        manager.pay_the_price(accounts.buyer, reserve_id)
        clock.increase(driver.reserve_period)
        with pytest.raises(PaymentPeriodFinishedError):
            manager.pay_the_price(accounts.buyer, reserve_id)

    def test_needs_allowance(
        self, manager: ReservesManager, driver: ReserveDriver, accounts: Accounts, reserve_id: str
    ) -> None:
        driver.dai.approve(accounts.buyer, manager.address, driver.price - 1)
        with pytest.raises(TokenError):
            manager.pay_the_price(accounts.buyer, reserve_id)
        assert manager.get_reserve(reserve_id).paid is False


# ---------------------------------------------------------------------------
# Collateral adjustments
# ---------------------------------------------------------------------------


class TestCollateral:
    def test_increase(
        self,
        chain: Chain,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
        reserve_id: str,
    ) -> None:
        manager.increase_reserve_collateral(accounts.buyer, reserve_id, 5)
        assert manager.reserve_amounts(reserve_id).collateral == driver.collateral + 5
        assert driver.dai.balance_of(manager.address) == driver.collateral + 5
        event = chain.events.last("CollateralIncreased")
        assert event is not None and event.args == {"reserveId": reserve_id, "amount": 5}

    def test_increase_only_buyer(
        self, manager: ReservesManager, accounts: Accounts, reserve_id: str
    ) -> None:
        with pytest.raises(OnlyBuyerError) as exc:
            manager.increase_reserve_collateral(accounts.seller, reserve_id, 5)
        assert exc.value.message == "Only buyer allowed"

    def test_increase_after_payment(
        self, manager: ReservesManager, accounts: Accounts, reserve_id: str
    ) -> None:
        manager.pay_the_price(accounts.buyer, reserve_id)
        with pytest.raises(PriceAlreadyPaidError) as exc:
            manager.increase_reserve_collateral(accounts.buyer, reserve_id, 5)
        assert exc.value.message == "Price already paid"

    def test_increase_unknown(self, manager: ReservesManager, accounts: Accounts) -> None:
        with pytest.raises(ReserveNotFoundError):
            manager.increase_reserve_collateral(accounts.buyer, UNKNOWN_RESERVE, 5)

    def test_negative_amount(
        self, manager: ReservesManager, accounts: Accounts, reserve_id: str
    ) -> None:
        with pytest.raises(InvalidAmountError):
            manager.increase_reserve_collateral(accounts.buyer, reserve_id, -1)
        with pytest.raises(InvalidAmountError):
            manager.decrease_reserve_collateral(accounts.buyer, reserve_id, -1)

    def test_decrease_only_buyer(
        self, manager: ReservesManager, accounts: Accounts, reserve_id: str
    ) -> None:
        with pytest.raises(OnlyBuyerError):
            manager.decrease_reserve_collateral(accounts.other, reserve_id, 1)

    def test_unpaid_floor(
        self,
        chain: Chain,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
        reserve_id: str,
    ) -> None:
        with pytest.raises(UncollateralizeReserveError) as exc:
            manager.decrease_reserve_collateral(accounts.buyer, reserve_id, 1)
        assert exc.value.message == "Attemp to uncollateralize reserve"

        manager.increase_reserve_collateral(accounts.buyer, reserve_id, 5)
        manager.decrease_reserve_collateral(accounts.buyer, reserve_id, 5)
        assert manager.reserve_amounts(reserve_id).collateral == driver.collateral
        event = chain.events.last("CollateralDecreased")
        assert event is not None and event.args == {"reserveId": reserve_id, "amount": 5}

        with pytest.raises(UncollateralizeReserveError):
            manager.decrease_reserve_collateral(accounts.buyer, reserve_id, 1)

    def test_paid_can_withdraw_everything(
        self, manager: ReservesManager, driver: ReserveDriver, accounts: Accounts, reserve_id: str
    ) -> None:
        manager.pay_the_price(accounts.buyer, reserve_id)
        with pytest.raises(InsufficientCollateralError) as exc:
            manager.decrease_reserve_collateral(accounts.buyer, reserve_id, driver.collateral + 1)
        assert exc.value.message == "Insufficient amount for request"

        manager.decrease_reserve_collateral(accounts.buyer, reserve_id, driver.collateral)
        assert manager.reserve_amounts(reserve_id).collateral == 0
        assert driver.dai.balance_of(manager.address) == driver.price

    def test_running_balance(
        self, manager: ReservesManager, driver: ReserveDriver, accounts: Accounts, reserve_id: str
    ) -> None:
        for amount in (3, 4, 8):
            manager.increase_reserve_collateral(accounts.buyer, reserve_id, amount)
        for amount in (2, 6):
            manager.decrease_reserve_collateral(accounts.buyer, reserve_id, amount)
        assert manager.reserve_amounts(reserve_id).collateral == driver.collateral + 15 - 8
        assert driver.dai.balance_of(manager.address) == driver.collateral + 7

    def test_liquidation_pays_out_running_balance(
        self,
        clock: ManualClock,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
        reserve_id: str,
    ) -> None:
        manager.increase_reserve_collateral(accounts.buyer, reserve_id, 7)
        clock.increase(driver.reserve_period)
        manager.liquidate_reserve(accounts.seller, reserve_id)
        assert driver.dai.balance_of(accounts.seller) == driver.seller_funds + driver.collateral + 7


# ---------------------------------------------------------------------------
# Re-entrancy through the ERC721 receiver hook
# ---------------------------------------------------------------------------


class TestReentrancy:
    def test_reentrant_cancel_finds_nothing(
        self, manager: ReservesManager, driver: ReserveDriver, accounts: Accounts, reserve_id: str
    ) -> None:
        seen: list[str] = []

        def reenter(operator: str, sender: str, token_id: int) -> None:
            try:
                manager.cancel_reserve(accounts.seller, reserve_id)
            except AppError as exc:
                seen.append(exc.message)

        driver.collection.register_receiver(accounts.seller, reenter)
        manager.cancel_reserve(accounts.seller, reserve_id)

        assert seen == ["Non-existent active proposal"]
        # Fee charged and collateral refunded exactly once.
        assert driver.dai.balance_of(accounts.seller) == driver.seller_funds - driver.fee
        assert driver.dai.balance_of(accounts.buyer) == driver.buyer_funds + driver.fee

    def test_reentrant_liquidation_finds_nothing(
        self,
        clock: ManualClock,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
        reserve_id: str,
    ) -> None:
        seen: list[str] = []

        def reenter(operator: str, sender: str, token_id: int) -> None:
            try:
                manager.liquidate_reserve(accounts.buyer, reserve_id)
            except AppError as exc:
                seen.append(exc.message)

        manager.pay_the_price(accounts.buyer, reserve_id)
        clock.increase(driver.reserve_period)
        driver.collection.register_receiver(accounts.buyer, reenter)
        manager.liquidate_reserve(accounts.buyer, reserve_id)

        assert seen == ["Non-existent active reserve"]
        assert driver.dai.balance_of(accounts.seller) == driver.seller_funds + driver.price
        assert driver.dai.balance_of(manager.address) == 0

    def test_rejecting_receiver_reverts_settlement(
        self,
        clock: ManualClock,
        manager: ReservesManager,
        driver: ReserveDriver,
        accounts: Accounts,
        reserve_id: str,
    ) -> None:
        def reject(operator: str, sender: str, token_id: int) -> None:
            raise AppError(4999, "ERC721: transfer to non ERC721Receiver implementer", 422)

        clock.increase(driver.reserve_period)
        driver.collection.register_receiver(accounts.seller, reject)
        with pytest.raises(AppError):
            manager.liquidate_reserve(accounts.seller, reserve_id)
        assert manager.active_reserve_ids() == [reserve_id]
        assert driver.dai.balance_of(manager.address) == driver.collateral


def test_unknown_address_is_not_a_party(manager: ReservesManager, reserve_id: str) -> None:
    with pytest.raises(InvalidReserveCallerError):
        manager.liquidate_reserve(derive_address("stranger"), reserve_id)
