"""Unified error codes and custom exceptions.

Every message is the exact revert reason existing integrations match on.
Do not reword them.

Error code ranges:
  1xxx: Authorization (caller lacks the required role)
  2xxx: Validation (parameter out of allowed range)
  3xxx: State (operation invalid for the current lifecycle state)
  4xxx: Token (propagated verbatim from the token contract)
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Authorization ---

class NotOwnerError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Ownable: caller is not the owner", 403)


class OnlyGovernanceError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Only governance allowed", 403)


class OnlyMarketplaceError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Only callable from the marketplace", 403)


class OnlyTokenOwnerCanApproveError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Only owner can approve", 403)


class OnlyOwnerCanCancelError(AppError):
    def __init__(self) -> None:
        super().__init__(1005, "Only owner can cancel", 403)


class OnlyBuyerCanCancelError(AppError):
    def __init__(self) -> None:
        super().__init__(1006, "Only buyer can cancel", 403)


class InvalidReserveCallerError(AppError):
    def __init__(self) -> None:
        super().__init__(1007, "Invalid caller. Should be buyer or seller", 403)


class OnlyProposalBuyerError(AppError):
    def __init__(self) -> None:
        super().__init__(1008, "Only proposal buyer allowed", 403)


class OnlyBuyerError(AppError):
    def __init__(self) -> None:
        super().__init__(1009, "Only buyer allowed", 403)


# --- 2xxx: Validation ---

class InvalidMinimumReservePeriodError(AppError):
    def __init__(self) -> None:
        super().__init__(2001, "Invalid minimum reserve period", 422)


class InvalidSellerCancelFeePercentError(AppError):
    def __init__(self) -> None:
        super().__init__(2002, "Invalid seller cancel fee percent", 422)


class InvalidBuyerCancelFeePercentError(AppError):
    def __init__(self) -> None:
        super().__init__(2003, "Invalid buyer cancel fee percent", 422)


class InvalidBuyerPurchaseGracePeriodError(AppError):
    def __init__(self) -> None:
        super().__init__(2004, "Invalid buyer purchase grace period", 422)


class ReservePeriodTooShortError(AppError):
    def __init__(self) -> None:
        super().__init__(2005, "Reserve period must be greater", 422)


class InvalidCollateralPercentError(AppError):
    def __init__(self) -> None:
        super().__init__(2006, "Invalid collateral percent", 422)


class InvalidAddressError(AppError):
    def __init__(self, value: object) -> None:
        super().__init__(2007, f"Invalid address: {value}", 422)


class InvalidAmountError(AppError):
    def __init__(self, amount: int) -> None:
        super().__init__(2008, f"Invalid amount: {amount}", 422)


class InvalidValidityPeriodError(AppError):
    def __init__(self) -> None:
        super().__init__(2009, "Invalid validity period", 422)


# --- 3xxx: State ---

class AlreadyInitializedError(AppError):
    def __init__(self) -> None:
        super().__init__(3001, "Initializable: contract is already initialized", 409)


class NotInitializedError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3002, f"Not initialized: {detail}", 409)


class ProposalNotFoundError(AppError):
    def __init__(self) -> None:
        super().__init__(3003, "Non-existent proposal", 404)


class ProposalAlreadyExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(3004, "Proposal already exists", 409)


class NotEnoughCollateralBalanceError(AppError):
    def __init__(self) -> None:
        super().__init__(3005, "Not enough balance to pay for collateral", 422)


class ActiveProposalNotFoundError(AppError):
    """Raised by reserve cancellation; the wording predates the reserve/proposal split."""

    def __init__(self) -> None:
        super().__init__(3006, "Non-existent active proposal", 404)


class ReserveNotFoundError(AppError):
    def __init__(self) -> None:
        super().__init__(3007, "Non-existent active reserve", 404)


class ReserveAlreadyActiveError(AppError):
    def __init__(self) -> None:
        super().__init__(3008, "Reserve already active", 409)


class ReserveExpiredError(AppError):
    def __init__(self) -> None:
        super().__init__(3009, "Reserve expired. Pay or liquidate", 422)


class ReservePeriodNotFinishedError(AppError):
    def __init__(self) -> None:
        super().__init__(3010, "Reserve period not finished yet", 422)


class BuyerPaymentPeriodNotFinishedError(AppError):
    def __init__(self) -> None:
        super().__init__(3011, "Buyer period to pay not finished yet", 422)


class PaymentPeriodFinishedError(AppError):
    def __init__(self) -> None:
        super().__init__(3012, "Period to pay finished", 422)


class AlreadyPaidError(AppError):
    def __init__(self) -> None:
        super().__init__(3013, "Already paid", 422)


class PriceAlreadyPaidError(AppError):
    def __init__(self) -> None:
        super().__init__(3014, "Price already paid", 422)


class InsufficientCollateralError(AppError):
    def __init__(self) -> None:
        super().__init__(3015, "Insufficient amount for request", 422)


class UncollateralizeReserveError(AppError):
    def __init__(self) -> None:
        # Spelling is part of the wire contract.
        super().__init__(3016, "Attemp to uncollateralize reserve", 422)


class NotUpgradeableImplementationError(AppError):
    def __init__(self) -> None:
        super().__init__(3017, "ERC1967Upgrade: new implementation is not UUPS", 422)


# --- 4xxx: Token ---

class TokenError(AppError):
    """Revert raised by a token contract; the message is propagated unchanged."""

    def __init__(self, message: str) -> None:
        super().__init__(4001, message, 422)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class ContractNotFoundError(AppError):
    def __init__(self, address: str, expected: str = "contract") -> None:
        super().__init__(9003, f"No {expected} deployed at {address}", 404)


class ClockNotAdjustableError(AppError):
    def __init__(self) -> None:
        super().__init__(9004, "Block time can only be moved on a local network", 409)
