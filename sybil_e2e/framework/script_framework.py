#!/usr/bin/env python3
"""Base class for the deployment scripts."""
import argparse
import asyncio
import logging
import os
import sys
import time
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Sequence

from sybil_e2e.chain.config import NetworkConfig


class ScriptStatus(Enum):
    SUCCEEDED = 1
    FAILED = 2


SCRIPT_EXIT_SUCCEEDED = 0
SCRIPT_EXIT_FAILED = 1


@dataclass
class ScriptResult:
    status: ScriptStatus
    output: Optional[str] = None
    error: Optional[BaseException] = None

    @classmethod
    def succeeded(cls, output: str) -> "ScriptResult":
        return cls(ScriptStatus.SUCCEEDED, output=output)

    @classmethod
    def failed(cls, error: BaseException) -> "ScriptResult":
        return cls(ScriptStatus.FAILED, error=error)

    @property
    def ok(self) -> bool:
        return self.status == ScriptStatus.SUCCEEDED


@dataclass
class ScriptOptions:
    loglevel: int  # log events at this level and higher to stderr, errors are always shown
    trace_rpc: bool  # print out all RPC steps as they are made
    rpc_url: Optional[str]  # overrides SYBIL_RPC_URL
    artifacts_dir: Optional[str]  # overrides SYBIL_ARTIFACTS_DIR


def parse_loglevel(value: str) -> int:
    """Accept a level as a number or a name (eg DEBUG)."""
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    if not isinstance(level, int):
        raise argparse.ArgumentTypeError(f"unknown log level {value!r}")
    return level


class SybilScript:
    """Base class for a script run against a node.

    Scripts subclass this and override run(). run() returns a ScriptResult and must not exit
    the process or print its result; main() turns the result into stdout output and an exit code.

    The main() method should not be overridden."""

    name = "script"
    description = None

    def __init__(self):
        self.log = logging.getLogger("SybilScript")
        self.options: Optional[ScriptOptions] = None

    def parse_options(self, argv: Optional[Sequence[str]], environ: Mapping[str, str]) -> ScriptOptions:
        parser = argparse.ArgumentParser(prog=self.name, description=self.description)
        parser.add_argument(
            "--loglevel",
            dest="loglevel",
            type=parse_loglevel,
            default=environ.get("SYBIL_LOGLEVEL") or "INFO",
            help="log events at this level and higher to stderr. Can be set to DEBUG, INFO, WARNING, ERROR or CRITICAL")
        parser.add_argument(
            "--trace-rpc",
            dest="trace_rpc",
            default=False,
            action="store_true",
            help="Print out all RPC steps as they are made")
        parser.add_argument(
            "--rpc-url",
            dest="rpc_url",
            default=None,
            help="JSON-RPC endpoint (default: $SYBIL_RPC_URL or http://127.0.0.1:8545)")
        parser.add_argument(
            "--artifacts",
            dest="artifacts_dir",
            default=None,
            help="Directory holding compiled contract artifacts (default: $SYBIL_ARTIFACTS_DIR or ./artifacts)")
        args = parser.parse_args(argv)
        return ScriptOptions(
            loglevel=args.loglevel,
            trace_rpc=args.trace_rpc,
            rpc_url=args.rpc_url,
            artifacts_dir=args.artifacts_dir,
        )

    def network_config(self, environ: Mapping[str, str]) -> NetworkConfig:
        config = NetworkConfig.from_env(environ)
        if self.options.rpc_url:
            config.rpc_url = self.options.rpc_url
        if self.options.artifacts_dir:
            config.artifacts_dir = self.options.artifacts_dir
        return config

    async def run(self, environ: Mapping[str, str]) -> ScriptResult:
        raise NotImplementedError

    def main(self, argv: Optional[Sequence[str]] = None, environ: Optional[Mapping[str, str]] = None) -> int:
        if environ is None:
            environ = os.environ
        self.options = self.parse_options(argv, environ)
        self._start_logging()
        try:
            result = asyncio.run(self._run(environ))
            return self._report(result)
        finally:
            self._stop_logging()

    # Private helper methods. These should not be accessed by the subclass scripts.

    async def _run(self, environ: Mapping[str, str]) -> ScriptResult:
        try:
            return await self.run(environ)
        except Exception as e:
            return ScriptResult.failed(e)

    def _report(self, result: ScriptResult) -> int:
        if result.ok:
            print(result.output)
            return SCRIPT_EXIT_SUCCEEDED
        self.log.error("%s failed: %s", self.name, result.error, exc_info=result.error)
        return SCRIPT_EXIT_FAILED

    def _start_logging(self):
        self.log.setLevel(logging.DEBUG)
        # Console handler on stderr, stdout carries only the script result.
        ch = logging.StreamHandler(sys.stderr)
        # failures are reported at ERROR, keep them visible whatever --loglevel says
        ch.setLevel(min(self.options.loglevel, logging.ERROR))
        formatter = logging.Formatter(
            fmt=
            '%(asctime)s.%(msecs)03d000Z %(name)s (%(levelname)s): %(message)s',
            datefmt='%Y-%m-%dT%H:%M:%S')
        formatter.converter = time.gmtime
        ch.setFormatter(formatter)
        self.log.addHandler(ch)

        if self.options.trace_rpc:
            rpc_logger = logging.getLogger("SybilRPC")
            rpc_logger.setLevel(logging.DEBUG)
            rpc_handler = logging.StreamHandler(sys.stderr)
            rpc_handler.setLevel(logging.DEBUG)
            rpc_handler.setFormatter(formatter)
            rpc_logger.addHandler(rpc_handler)

    def _stop_logging(self):
        for name in ("SybilScript", "SybilRPC"):
            logger = logging.getLogger(name)
            for handler in logger.handlers[:]:
                logger.removeHandler(handler)
                handler.close()


def run_script(script_class):
    sys.exit(script_class().main())
