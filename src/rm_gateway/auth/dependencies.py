"""FastAPI dependency: get_caller.

The caller is the account a transaction is sent from. The service sits
behind a signer/relayer that has already authenticated the account and
forwards it in the X-Caller-Address header.

Usage in any router:
    from src.rm_gateway.auth.dependencies import get_caller

    @router.post("/something")
    async def something(caller: str = Depends(get_caller)):
        ...
"""

from typing import Annotated

from fastapi import Header, HTTPException, status

from src.rm_chain.addresses import to_address

CALLER_HEADER = "X-Caller-Address"

_MISSING_CALLER_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail=f"Missing {CALLER_HEADER} header",
)


async def get_caller(
    x_caller_address: Annotated[str | None, Header(alias=CALLER_HEADER)] = None,
) -> str:
    """Return the checksummed caller address.

    Raises HTTP 401 if the header is missing, InvalidAddressError (422) if it
    is not an address.
    """
    if not x_caller_address:
        raise _MISSING_CALLER_EXCEPTION
    return to_address(x_caller_address)
