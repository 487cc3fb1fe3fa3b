"""Network profiles for deployments.

Chain ids and default protocol parameters per network. Local and test
networks get mock tokens and a mock price oracle deployed alongside the
protocol contracts.
"""

from dataclasses import dataclass

from src.rm_common.datetime_utils import minutes


@dataclass(frozen=True)
class ProtocolDefaults:
    minimum_reserve_period: int
    seller_cancel_fee_percent: int
    buyer_cancel_fee_percent: int
    buyer_purchase_grace_period: int


@dataclass(frozen=True)
class NetworkConfig:
    chain_id: int
    name: str
    is_local: bool = False
    is_testnet: bool = False
    defaults: ProtocolDefaults | None = None

    @property
    def deploys_mocks(self) -> bool:
        return self.is_local or self.is_testnet


_DEFAULTS = ProtocolDefaults(
    minimum_reserve_period=minutes(5),
    seller_cancel_fee_percent=5,
    buyer_cancel_fee_percent=5,
    buyer_purchase_grace_period=0,
)

NETWORKS: dict[str, NetworkConfig] = {
    "localhost": NetworkConfig(chain_id=1337, name="localhost", is_local=True),
    "hardhat": NetworkConfig(chain_id=31337, name="hardhat", is_local=True, defaults=_DEFAULTS),
    "bsc": NetworkConfig(chain_id=56, name="bsc"),
    "rinkeby": NetworkConfig(chain_id=4, name="rinkeby", is_testnet=True, defaults=_DEFAULTS),
    "mumbai": NetworkConfig(chain_id=80001, name="mumbai", is_testnet=True, defaults=_DEFAULTS),
    "polygon": NetworkConfig(chain_id=137, name="polygon"),
}


def get_network(name: str) -> NetworkConfig:
    try:
        return NETWORKS[name]
    except KeyError:
        raise ValueError(f"Unknown network: {name}") from None


def get_network_by_chain_id(chain_id: int) -> NetworkConfig:
    for network in NETWORKS.values():
        if network.chain_id == chain_id:
            return network
    raise ValueError(f"Unknown chain id: {chain_id}")
