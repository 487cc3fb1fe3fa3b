"""Deploy sequence for the reserve protocol.

Order matters, the marketplace and the manager reference each other:

1. ProtocolParameters, initialized with the network defaults; the deployer
   is governance.
2. ReserveMarketplace(protocol_parameters), not yet initialized.
3. PriceOracleMock, price of itself set to 1.
4. ReservesManager(marketplace, protocol_parameters).initialize(oracle).
5. marketplace.initialize(manager).

Local and test networks also get DAIMock (18 decimals), Token8Mock
(8 decimals) and an ERC721 collection mock.
"""

import logging
from dataclasses import dataclass

from config.networks import NetworkConfig, ProtocolDefaults
from src.rm_chain.addresses import derive_address, to_address
from src.rm_chain.chain import Chain
from src.rm_marketplace.domain.contract import ReserveMarketplace
from src.rm_oracle.infrastructure.price_oracle_mock import PriceOracleMock
from src.rm_parameters.domain.contract import ProtocolParameters
from src.rm_reserves.domain.contract import ReservesManager
from src.rm_token.infrastructure.erc20_mock import ERC20Mock
from src.rm_token.infrastructure.erc721_mock import ERC721Mock

logger = logging.getLogger(__name__)


@dataclass
class Deployment:
    network: NetworkConfig
    deployer: str
    parameters: ProtocolParameters
    marketplace: ReserveMarketplace
    manager: ReservesManager
    oracle: PriceOracleMock
    dai: ERC20Mock | None = None
    token8: ERC20Mock | None = None
    collection: ERC721Mock | None = None

    def addresses(self) -> dict[str, str]:
        contracts = {
            "ProtocolParameters": self.parameters,
            "ReserveMarketplace": self.marketplace,
            "ReservesManager": self.manager,
            "PriceOracleMock": self.oracle,
            "DAIMock": self.dai,
            "Token8Mock": self.token8,
            "CollectionMock": self.collection,
        }
        return {name: c.address for name, c in contracts.items() if c is not None}


def contract_address(network: NetworkConfig, name: str) -> str:
    """Deterministic address of a named contract on a network."""
    return derive_address(f"{network.name}/{name}")


def deploy(
    chain: Chain,
    deployer: str,
    network: NetworkConfig,
    defaults: ProtocolDefaults | None = None,
) -> Deployment:
    """Deploy and wire the protocol on `chain`, all-or-nothing."""
    deployer = to_address(deployer)
    defaults = defaults or network.defaults
    if defaults is None:
        raise ValueError(f"No protocol defaults for network {network.name}")

    with chain.atomic():
        parameters = ProtocolParameters(chain, contract_address(network, "ProtocolParameters"))
        parameters.initialize(
            deployer,
            defaults.minimum_reserve_period,
            defaults.seller_cancel_fee_percent,
            defaults.buyer_cancel_fee_percent,
            defaults.buyer_purchase_grace_period,
            governance=deployer,
        )

        marketplace = ReserveMarketplace(
            chain, contract_address(network, "ReserveMarketplace"), parameters.address
        )

        oracle = PriceOracleMock(chain, contract_address(network, "PriceOracleMock"))
        oracle.set_price(deployer, oracle.address, 1)

        manager = ReservesManager(
            chain,
            contract_address(network, "ReservesManager"),
            marketplace.address,
            parameters.address,
        )
        manager.initialize(deployer, oracle.address)
        marketplace.initialize(deployer, manager.address)

        deployment = Deployment(
            network=network,
            deployer=deployer,
            parameters=parameters,
            marketplace=marketplace,
            manager=manager,
            oracle=oracle,
        )
        if network.deploys_mocks:
            deployment.dai = ERC20Mock(
                chain, contract_address(network, "DAIMock"), "DAI Mock", "DAI", decimals=18
            )
            deployment.token8 = ERC20Mock(
                chain, contract_address(network, "Token8Mock"), "Token8 Mock", "TK8", decimals=8
            )
            deployment.collection = ERC721Mock(
                chain, contract_address(network, "CollectionMock"), "Collection Mock", "NFTM"
            )

    logger.info("Deployed on %s (chain %d): %s", network.name, network.chain_id, deployment.addresses())
    return deployment
