"""Shared test fixtures.

Every test gets a fresh in-memory chain with a manual clock and the protocol
deployed with the hardhat defaults (5 minute minimum reserve period, 5% cancel
fees, no grace period).
"""

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from config.networks import get_network
from src.main import app
from src.rm_chain.addresses import derive_address
from src.rm_chain.chain import Chain
from src.rm_chain.clock import ManualClock
from src.rm_deploy.application.runtime import ReserveRuntime, build_runtime, get_runtime
from src.rm_deploy.deployer import Deployment, deploy
from tests.support import BUYER_FUNDS, SELLER_FUNDS, TOKEN_ID, Accounts, ReserveDriver


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def chain(clock: ManualClock) -> Chain:
    return Chain(clock=clock, chain_id=31337)


@pytest.fixture
def accounts() -> Accounts:
    return Accounts(
        deployer=derive_address("deployer"),
        seller=derive_address("seller"),
        buyer=derive_address("buyer"),
        other=derive_address("other"),
        seller_beneficiary=derive_address("seller-beneficiary"),
        buyer_beneficiary=derive_address("buyer-beneficiary"),
    )


@pytest.fixture
def deployment(chain: Chain, accounts: Accounts) -> Deployment:
    return deploy(chain, accounts.deployer, get_network("hardhat"))


@pytest.fixture
def funded(deployment: Deployment, accounts: Accounts) -> Deployment:
    """Seller owns TOKEN_ID; both sides hold DAI and have approved the manager."""
    assert deployment.dai is not None and deployment.collection is not None
    manager = deployment.manager.address
    deployment.collection.mint(accounts.seller, TOKEN_ID)
    deployment.collection.set_approval_for_all(accounts.seller, manager, True)
    deployment.dai.mint(accounts.buyer, BUYER_FUNDS)
    deployment.dai.mint(accounts.seller, SELLER_FUNDS)
    deployment.dai.approve(accounts.buyer, manager, BUYER_FUNDS)
    deployment.dai.approve(accounts.seller, manager, SELLER_FUNDS)
    return deployment


@pytest.fixture
def driver(funded: Deployment, accounts: Accounts) -> ReserveDriver:
    return ReserveDriver(funded, accounts)


@pytest.fixture
def runtime(clock: ManualClock, accounts: Accounts) -> ReserveRuntime:
    return build_runtime("hardhat", accounts.deployer, clock)


@pytest.fixture
async def client(runtime: ReserveRuntime) -> AsyncIterator[AsyncClient]:
    """Async HTTP client for testing FastAPI endpoints against a fresh runtime."""
    app.dependency_overrides[get_runtime] = lambda: runtime
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
