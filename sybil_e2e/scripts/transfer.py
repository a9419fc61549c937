#!/usr/bin/env python3
"""Mint ERC20Mock tokens to the first node account and send them to SYBIL_ADDRESS."""
from typing import Mapping

from sybil_e2e.chain.config import ConfigurationError, TransferConfig, default_config
from sybil_e2e.chain.contracts import ContractFactory
from sybil_e2e.chain.rpc import RpcClient
from sybil_e2e.framework.script_framework import ScriptResult, SybilScript, run_script
from sybil_e2e.framework.util import encode_hex_0x


async def distribute(config: TransferConfig, client: RpcClient, factory: ContractFactory) -> ScriptResult:
    try:
        erc20_mock = factory.attach(config.contract_address)
        account = await client.first_account()

        # only submission is awaited, the mint receipt is never checked
        await erc20_mock.mint(account, default_config["MINT_AMOUNT"], sender=account)

        tx_hash = await erc20_mock.transfer(config.destination, default_config["TRANSFER_AMOUNT"], sender=account)
        receipt = await client.wait_for_receipt(tx_hash)
    except Exception as e:
        return ScriptResult.failed(e)
    return ScriptResult.succeeded(encode_hex_0x(receipt["transactionHash"]))


class TransferScript(SybilScript):
    name = "sybil-transfer"
    description = "Mint ERC20Mock tokens and transfer them to $SYBIL_ADDRESS"

    async def run(self, environ: Mapping[str, str]) -> ScriptResult:
        try:
            transfer_config = TransferConfig.from_env(environ)
        except ConfigurationError as e:
            return ScriptResult.failed(e)

        config = self.network_config(environ)
        client = RpcClient.from_config(config)
        factory = ContractFactory.load(client, default_config["ERC20_MOCK_NAME"], config.artifacts_dir)
        return await distribute(transfer_config, client, factory)


def main():
    run_script(TransferScript)


if __name__ == "__main__":
    main()
