import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_RPC_URL = "http://127.0.0.1:8545"

default_config = dict(
    ERC20_MOCK_NAME="ERC20Mock",
    ERC20_MOCK_ARGS=("Mock", "MOCK"),
    MINT_AMOUNT=10**38,
    TRANSFER_AMOUNT=10**38,
    DEFAULT_RPC_URL=DEFAULT_RPC_URL,
    DEFAULT_ARTIFACTS_DIR="artifacts",
    RECEIPT_WAIT_TIMEOUT=120,
)


class ConfigurationError(Exception):
    """Raised when a required configuration value is missing or malformed"""


def _require(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name)
    if not value:
        raise ConfigurationError(f"{name} not set")
    return value


@dataclass(frozen=True)
class TransferConfig:
    destination: str  # SYBIL_ADDRESS, receives the transferred tokens
    contract_address: str  # ERC20_MOCK_ADDRESS, previously deployed ERC20Mock

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TransferConfig":
        if environ is None:
            environ = os.environ
        # order matters, the first missing variable is the one reported
        destination = _require(environ, "SYBIL_ADDRESS")
        contract_address = _require(environ, "ERC20_MOCK_ADDRESS")
        return cls(destination=destination, contract_address=contract_address)


@dataclass
class NetworkConfig:
    rpc_url: str
    artifacts_dir: str
    private_key: Optional[str] = None
    receipt_timeout: int = default_config["RECEIPT_WAIT_TIMEOUT"]

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "NetworkConfig":
        if environ is None:
            environ = os.environ
        timeout = environ.get("SYBIL_RECEIPT_TIMEOUT")
        if timeout:
            try:
                receipt_timeout = int(timeout)
            except ValueError:
                raise ConfigurationError(
                    f"SYBIL_RECEIPT_TIMEOUT must be an integer, got {timeout!r}")
        else:
            receipt_timeout = default_config["RECEIPT_WAIT_TIMEOUT"]
        return cls(
            rpc_url=environ.get("SYBIL_RPC_URL") or DEFAULT_RPC_URL,
            artifacts_dir=environ.get("SYBIL_ARTIFACTS_DIR") or default_config["DEFAULT_ARTIFACTS_DIR"],
            private_key=environ.get("DEPLOYER_PRIVATE_KEY") or None,
            receipt_timeout=receipt_timeout,
        )
