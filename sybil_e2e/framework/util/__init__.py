#!/usr/bin/env python3

import json
import logging
import re
from pathlib import Path
from typing import Union

import eth_utils

logger = logging.getLogger("SybilScript.utils")


class ContractNotFoundError(Exception):
    """Raised when no compiled artifact exists for a contract name"""


# Assert functions
##################


def assert_equal(thing1, thing2, *args):
    if thing1 != thing2 or any(thing1 != arg for arg in args):
        raise AssertionError("not(%s)" % " == ".join(
            str(arg) for arg in (thing1, thing2) + args))


def assert_is_hex_string(string):
    try:
        if string != "0x":
            int(string, 16)
    except Exception as e:
        raise AssertionError(
            "Couldn't interpret %r as hexadecimal; raised: %s" % (string, e))


def assert_is_hash_string(string, length=64):
    if not isinstance(string, str):
        raise AssertionError("Expected a string, got type %r" % type(string))

    if string.startswith("0x"):
        string = string[2:]

    if length and len(string) != length:
        raise AssertionError(
            "String of length %d expected; got %d" % (length, len(string)))

    if not re.match('[abcdef0-9]+$', string):
        raise AssertionError(
            "String %r contains invalid characters for a hash." % string)


# Utility functions
###################


def encode_hex_0x(value: Union[bytes, bytearray, str]) -> str:
    if isinstance(value, (bytes, bytearray)):
        return eth_utils.encode_hex(value)
    if value.startswith("0x"):
        return value
    return "0x" + value


def load_contract_metadata(name: str, artifacts_dir: Union[str, Path]):
    """Find `<name>.json` anywhere below a Hardhat artifacts directory.

    Debug files (`<name>.dbg.json`) never match since rglob compares the whole file name.
    """
    path = Path(artifacts_dir)
    try:
        found_file = next(path.rglob(f"{name}.json"))
    except StopIteration:
        raise ContractNotFoundError(f"Cannot find contract {name}'s metadata under {path}")
    logger.debug("Loading %s metadata from %s", name, found_file)
    with open(found_file, "r") as f:
        metadata = json.loads(f.read())
    if "abi" not in metadata or "bytecode" not in metadata:
        raise ContractNotFoundError(f"{found_file} is not a contract artifact")
    return metadata
