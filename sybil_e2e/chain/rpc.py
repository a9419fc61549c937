import logging
from typing import List, Optional

from eth_account import Account
from eth_typing import ChecksumAddress
from hexbytes import HexBytes
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.middleware import SignAndSendRawMiddlewareBuilder
from web3.types import TxReceipt

from .config import NetworkConfig, default_config
from sybil_e2e.framework.util import encode_hex_0x

rpc_logger = logging.getLogger("SybilRPC")


class NoAccountsError(Exception):
    """Raised when the node exposes no unlocked account to sign with"""


class TransactionFailedError(Exception):
    def __init__(self, tx_hash, receipt: Optional[TxReceipt] = None, reason: str = "reverted"):
        self.tx_hash = encode_hex_0x(tx_hash)
        self.receipt = receipt
        self.reason = reason

    def __str__(self):
        return f"transaction {self.tx_hash} {self.reason}"


class RpcClient:
    def __init__(self, w3: AsyncWeb3, receipt_timeout: float = default_config["RECEIPT_WAIT_TIMEOUT"],
                 signer: Optional[ChecksumAddress] = None):
        self.w3 = w3
        self.receipt_timeout = receipt_timeout
        self.signer = signer

    @classmethod
    def from_config(cls, config: NetworkConfig) -> "RpcClient":
        """Bind a client to `config.rpc_url`. No request is sent until the first await."""
        w3 = AsyncWeb3(AsyncHTTPProvider(config.rpc_url))
        signer = None
        if config.private_key:
            account = Account.from_key(config.private_key)
            w3.middleware_onion.inject(SignAndSendRawMiddlewareBuilder.build(account), layer=0)
            w3.eth.default_account = account.address
            signer = account.address
        rpc_logger.debug("Using endpoint %s (signer %s)", config.rpc_url, signer or "node accounts")
        return cls(w3, receipt_timeout=config.receipt_timeout, signer=signer)

    @property
    def eth(self):
        return self.w3.eth

    async def list_accounts(self) -> List[ChecksumAddress]:
        accounts = list(await self.w3.eth.accounts)
        rpc_logger.debug("eth_accounts returned %d accounts", len(accounts))
        return accounts

    async def first_account(self) -> ChecksumAddress:
        if self.signer is not None:
            return self.signer
        accounts = await self.list_accounts()
        if not accounts:
            raise NoAccountsError("node returned no accounts")
        return accounts[0]

    async def wait_for_receipt(self, tx_hash) -> TxReceipt:
        tx_hash = HexBytes(tx_hash)
        rpc_logger.debug("Waiting for receipt of %s", tx_hash.to_0x_hex())
        receipt = await self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)
        if receipt.get("status") == 0:
            raise TransactionFailedError(tx_hash, receipt)
        rpc_logger.debug("Transaction %s included in block %s", tx_hash.to_0x_hex(), receipt.get("blockNumber"))
        return receipt
