import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from hexbytes import HexBytes

from sybil_e2e.chain.rpc import RpcClient

ERC20_MOCK_ABI = [
    {
        "type": "constructor",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "name", "type": "string"},
            {"name": "symbol", "type": "string"},
        ],
    },
    {
        "type": "function",
        "name": "mint",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "account", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "transfer",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
]

NODE_ACCOUNT = "0x" + "ac" * 20
SYBIL_ADDRESS = "0x" + "5b" * 20
ERC20_MOCK_ADDRESS = "0x" + "e2" * 20
DEPLOY_TX_HASH = HexBytes("0x" + "d0" * 32)
MINT_TX_HASH = HexBytes("0x" + "a1" * 32)
TRANSFER_TX_HASH = HexBytes("0x" + "7f" * 32)


class FakeEth:
    """Stands in for `AsyncWeb3.eth`; `accounts` is an awaitable property there too."""

    def __init__(self, accounts):
        self._accounts = accounts
        self.accounts_queries = 0
        self.wait_for_transaction_receipt = AsyncMock()
        self.contract = MagicMock()
        self.default_account = None

    @property
    async def accounts(self):
        self.accounts_queries += 1
        return self._accounts


class FakeWeb3:
    def __init__(self, accounts):
        self.eth = FakeEth(accounts)


@pytest.fixture
def node_accounts():
    return [NODE_ACCOUNT, "0x" + "bc" * 20]


@pytest.fixture
def fake_w3(node_accounts):
    return FakeWeb3(node_accounts)


@pytest.fixture
def client(fake_w3):
    return RpcClient(fake_w3, receipt_timeout=5)


@pytest.fixture
def erc20_mock_metadata():
    return {
        "contractName": "ERC20Mock",
        "abi": ERC20_MOCK_ABI,
        "bytecode": "0x6080604052348015600f57600080fd5b50",
    }


@pytest.fixture
def artifacts_dir(tmp_path, erc20_mock_metadata):
    # Hardhat layout: artifacts/contracts/<Source>.sol/<Name>.json
    contract_dir = tmp_path / "artifacts" / "contracts" / "mocks" / "ERC20Mock.sol"
    contract_dir.mkdir(parents=True)
    (contract_dir / "ERC20Mock.json").write_text(json.dumps(erc20_mock_metadata))
    (contract_dir / "ERC20Mock.dbg.json").write_text(json.dumps({"buildInfo": "../build-info/x.json"}))
    return tmp_path / "artifacts"


@pytest.fixture
def environ(artifacts_dir):
    return {
        "SYBIL_ADDRESS": SYBIL_ADDRESS,
        "ERC20_MOCK_ADDRESS": ERC20_MOCK_ADDRESS,
        "SYBIL_ARTIFACTS_DIR": str(artifacts_dir),
    }
