"""ProtocolParameters: governance-controlled tunables for the reserve protocol."""

import logging

from src.rm_chain.addresses import to_address
from src.rm_chain.chain import Chain, transactional
from src.rm_chain.upgradeable import UpgradeableContract
from src.rm_common.errors import NotInitializedError, OnlyGovernanceError
from src.rm_parameters.domain.models import (
    ParameterName,
    ProtocolParameterSet,
    validate_parameter,
)

logger = logging.getLogger(__name__)


class ProtocolParameters(UpgradeableContract):
    _storage_fields = UpgradeableContract._storage_fields + ("_params",)

    def __init__(self, chain: Chain, address: str) -> None:
        super().__init__(chain, address)
        self._params: ProtocolParameterSet | None = None

    @transactional
    def initialize(
        self,
        caller: str,
        minimum_reserve_period: int,
        seller_cancel_fee_percent: int,
        buyer_cancel_fee_percent: int,
        buyer_purchase_grace_period: int,
        governance: str,
    ) -> None:
        self._initializer(caller)
        validate_parameter(ParameterName.MINIMUM_RESERVE_PERIOD, minimum_reserve_period)
        validate_parameter(ParameterName.SELLER_CANCEL_FEE_PERCENT, seller_cancel_fee_percent)
        validate_parameter(ParameterName.BUYER_CANCEL_FEE_PERCENT, buyer_cancel_fee_percent)
        validate_parameter(ParameterName.BUYER_PURCHASE_GRACE_PERIOD, buyer_purchase_grace_period)
        self._params = ProtocolParameterSet(
            minimum_reserve_period=minimum_reserve_period,
            seller_cancel_fee_percent=seller_cancel_fee_percent,
            buyer_cancel_fee_percent=buyer_cancel_fee_percent,
            buyer_purchase_grace_period=buyer_purchase_grace_period,
            governance=to_address(governance),
        )
        logger.info("Protocol parameters initialized at %s: %s", self.address, self._params)

    # ------------------------------------------------------------------
    # Getters
    # ------------------------------------------------------------------

    @property
    def parameters(self) -> ProtocolParameterSet:
        if self._params is None:
            raise NotInitializedError("protocol parameters")
        return self._params

    @property
    def minimum_reserve_period(self) -> int:
        return self.parameters.minimum_reserve_period

    @property
    def seller_cancel_fee_percent(self) -> int:
        return self.parameters.seller_cancel_fee_percent

    @property
    def buyer_cancel_fee_percent(self) -> int:
        return self.parameters.buyer_cancel_fee_percent

    @property
    def buyer_purchase_grace_period(self) -> int:
        return self.parameters.buyer_purchase_grace_period

    @property
    def governance(self) -> str:
        return self.parameters.governance

    # ------------------------------------------------------------------
    # Governance setters
    # ------------------------------------------------------------------

    def set_minimum_reserve_period(self, caller: str, value: int) -> None:
        self.set_parameter(caller, ParameterName.MINIMUM_RESERVE_PERIOD, value)

    def set_seller_cancel_fee_percent(self, caller: str, value: int) -> None:
        self.set_parameter(caller, ParameterName.SELLER_CANCEL_FEE_PERCENT, value)

    def set_buyer_cancel_fee_percent(self, caller: str, value: int) -> None:
        self.set_parameter(caller, ParameterName.BUYER_CANCEL_FEE_PERCENT, value)

    def set_buyer_purchase_grace_period(self, caller: str, value: int) -> None:
        self.set_parameter(caller, ParameterName.BUYER_PURCHASE_GRACE_PERIOD, value)

    @transactional
    def set_parameter(self, caller: str, name: ParameterName, value: int) -> None:
        params = self.parameters
        if to_address(caller) != params.governance:
            raise OnlyGovernanceError()
        validate_parameter(name, value)

        previous = getattr(params, name.value)
        setattr(params, name.value, value)
        # Emitted even when the value is unchanged.
        self.emit(name.event_name, **{"from": previous, "to": value})
        logger.info("%s changed from %s to %s", name.value, previous, value)
