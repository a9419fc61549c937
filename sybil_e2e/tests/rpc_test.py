import asyncio

import pytest
from eth_account import Account
from hexbytes import HexBytes

from conftest import NODE_ACCOUNT, TRANSFER_TX_HASH
from sybil_e2e.chain.config import NetworkConfig
from sybil_e2e.chain.rpc import NoAccountsError, RpcClient, TransactionFailedError


def test_list_accounts(client, fake_w3, node_accounts):
    assert asyncio.run(client.list_accounts()) == node_accounts
    assert fake_w3.eth.accounts_queries == 1


def test_first_account_is_first_node_account(client):
    assert asyncio.run(client.first_account()) == NODE_ACCOUNT


@pytest.mark.parametrize("node_accounts", [[]])
def test_first_account_without_accounts(client):
    with pytest.raises(NoAccountsError, match="node returned no accounts"):
        asyncio.run(client.first_account())


def test_first_account_prefers_configured_signer(fake_w3):
    signer = "0x" + "99" * 20
    client = RpcClient(fake_w3, signer=signer)  # type: ignore
    assert asyncio.run(client.first_account()) == signer
    assert fake_w3.eth.accounts_queries == 0


def test_wait_for_receipt(client, fake_w3):
    receipt = {"transactionHash": TRANSFER_TX_HASH, "status": 1, "blockNumber": 7}
    fake_w3.eth.wait_for_transaction_receipt.return_value = receipt

    assert asyncio.run(client.wait_for_receipt(TRANSFER_TX_HASH.to_0x_hex())) == receipt
    fake_w3.eth.wait_for_transaction_receipt.assert_awaited_once_with(TRANSFER_TX_HASH, timeout=5)


def test_wait_for_receipt_reverted(client, fake_w3):
    receipt = {"transactionHash": TRANSFER_TX_HASH, "status": 0}
    fake_w3.eth.wait_for_transaction_receipt.return_value = receipt

    with pytest.raises(TransactionFailedError) as excinfo:
        asyncio.run(client.wait_for_receipt(TRANSFER_TX_HASH))
    assert excinfo.value.receipt == receipt
    assert str(excinfo.value) == f"transaction {TRANSFER_TX_HASH.to_0x_hex()} reverted"


def test_wait_for_receipt_propagates_timeout(client, fake_w3):
    fake_w3.eth.wait_for_transaction_receipt.side_effect = asyncio.TimeoutError()
    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(client.wait_for_receipt(HexBytes(TRANSFER_TX_HASH)))


def test_from_config_without_key():
    client = RpcClient.from_config(NetworkConfig(rpc_url="http://127.0.0.1:8545", artifacts_dir="artifacts"))
    assert client.signer is None
    assert client.receipt_timeout == 120


def test_from_config_with_key():
    key = "0x" + "11" * 32
    client = RpcClient.from_config(NetworkConfig(
        rpc_url="http://127.0.0.1:8545", artifacts_dir="artifacts", private_key=key, receipt_timeout=9))
    expected = Account.from_key(key).address
    assert client.signer == expected
    assert client.w3.eth.default_account == expected
    assert client.receipt_timeout == 9
    assert asyncio.run(client.first_account()) == expected
