import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from eth_typing import ChecksumAddress
from hexbytes import HexBytes
from web3 import Web3

from .rpc import RpcClient, TransactionFailedError
from sybil_e2e.framework.util import load_contract_metadata

logger = logging.getLogger("SybilScript.contracts")


class ContractHandle:
    """A deployed contract bound to an address. Every call goes to the node."""

    def __init__(self, client: RpcClient, name: str, address: ChecksumAddress, contract):
        self.client = client
        self.name = name
        self.address = address
        self.contract = contract

    def __repr__(self):
        return f"ContractHandle({self.name}@{self.address})"

    async def transact(self, fn_name: str, *args, sender: Optional[ChecksumAddress] = None) -> HexBytes:
        """Submit a state-changing call and return its hash once the node accepted it.

        The receipt is not awaited, use `RpcClient.wait_for_receipt` for that.
        """
        if sender is None:
            sender = await self.client.first_account()
        fn = getattr(self.contract.functions, fn_name)
        tx_hash = await fn(*args).transact({"from": sender})
        logger.debug("%s.%s submitted as %s", self.name, fn_name, HexBytes(tx_hash).to_0x_hex())
        return HexBytes(tx_hash)

    async def mint(self, to: str, amount: int, *, sender: Optional[ChecksumAddress] = None) -> HexBytes:
        return await self.transact("mint", Web3.to_checksum_address(to), amount, sender=sender)

    async def transfer(self, to: str, amount: int, *, sender: Optional[ChecksumAddress] = None) -> HexBytes:
        return await self.transact("transfer", Web3.to_checksum_address(to), amount, sender=sender)


class ContractFactory:
    def __init__(self, client: RpcClient, name: str, metadata: Dict[str, Any]):
        self.client = client
        self.name = name
        self.metadata = metadata

    @classmethod
    def load(cls, client: RpcClient, name: str, artifacts_dir: Union[str, Path]) -> "ContractFactory":
        return cls(client, name, load_contract_metadata(name, artifacts_dir))

    def _contract_class(self):
        return self.client.eth.contract(
            abi=self.metadata["abi"], bytecode=self.metadata["bytecode"])

    async def deploy(self, *args) -> ContractHandle:
        sender = await self.client.first_account()
        logger.info("Deploying %s%s from %s", self.name, args, sender)
        tx_hash = await self._contract_class().constructor(*args).transact({"from": sender})
        receipt = await self.client.wait_for_receipt(tx_hash)
        address = receipt.get("contractAddress")
        if not address:
            raise TransactionFailedError(tx_hash, receipt, "created no contract")
        return self.attach(address)

    def attach(self, address: str) -> ContractHandle:
        address = Web3.to_checksum_address(address)
        contract = self.client.eth.contract(address=address, abi=self.metadata["abi"])
        return ContractHandle(self.client, self.name, address, contract)
