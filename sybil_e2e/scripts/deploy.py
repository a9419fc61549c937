#!/usr/bin/env python3
"""Deploy the ERC20Mock token and print its address."""
from typing import Mapping

from sybil_e2e.chain.config import default_config
from sybil_e2e.chain.contracts import ContractFactory
from sybil_e2e.chain.rpc import RpcClient
from sybil_e2e.framework.script_framework import ScriptResult, SybilScript, run_script


async def deploy_erc20_mock(factory: ContractFactory) -> ScriptResult:
    try:
        erc20_mock = await factory.deploy(*default_config["ERC20_MOCK_ARGS"])
    except Exception as e:
        return ScriptResult.failed(e)
    return ScriptResult.succeeded(erc20_mock.address)


class DeployScript(SybilScript):
    name = "sybil-deploy"
    description = "Deploy the ERC20Mock token contract and print its address"

    async def run(self, environ: Mapping[str, str]) -> ScriptResult:
        config = self.network_config(environ)
        client = RpcClient.from_config(config)
        factory = ContractFactory.load(client, default_config["ERC20_MOCK_NAME"], config.artifacts_dir)
        return await deploy_erc20_mock(factory)


def main():
    run_script(DeployScript)


if __name__ == "__main__":
    main()
