"""Pytest configuration and shared fixtures."""

import copy

import pytest
from solders.pubkey import Pubkey

from anchor_codec import Coder, Idl

PROGRAM_ADDRESS = "Fg6PaFpoGXkYsidMpWTK6W2BeZ7FEfcYkg476zPFsLnS"

SAMPLE_IDL = {
    "address": PROGRAM_ADDRESS,
    "metadata": {"name": "sample_program", "version": "0.1.0", "spec": "0.1.0"},
    "instructions": [
        {
            "name": "initialize",
            "accounts": [
                {
                    "name": "data",
                    "writable": True,
                    "pda": {
                        "seeds": [
                            {"kind": "const", "value": [100, 97, 116, 97]},
                            {"kind": "account", "path": "authority"},
                        ]
                    },
                },
                {"name": "authority", "writable": True, "signer": True},
                {"name": "system_program", "address": "11111111111111111111111111111111"},
            ],
            "args": [
                {"name": "id", "type": "u64"},
                {"name": "name", "type": "string"},
            ],
        },
        {
            "name": "set_active",
            "accounts": [{"name": "data", "writable": True}],
            "args": [{"name": "is_active", "type": "bool"}],
        },
    ],
    "accounts": [
        {"name": "Data", "discriminator": [1, 2, 3, 4, 5, 6, 7, 8]},
    ],
    "events": [
        {"name": "Transfer"},
    ],
    "errors": [
        {"code": 6000, "name": "Unauthorized", "msg": "Not allowed"},
    ],
    "types": [
        {
            "name": "Data",
            "type": {
                "kind": "struct",
                "fields": [
                    {"name": "id", "type": "u64"},
                    {"name": "name", "type": "string"},
                    {"name": "isActive", "type": "bool"},
                ],
            },
        },
        {
            "name": "Transfer",
            "type": {
                "kind": "struct",
                "fields": [
                    {"name": "from", "type": "pubkey"},
                    {"name": "to", "type": "pubkey"},
                    {"name": "amount", "type": "u64"},
                ],
            },
        },
        {
            "name": "Point",
            "type": {
                "kind": "struct",
                "fields": [
                    {"name": "x", "type": "i32"},
                    {"name": "y", "type": "i32"},
                ],
            },
        },
        {
            "name": "Shape",
            "type": {
                "kind": "enum",
                "variants": [
                    {"name": "Empty"},
                    {"name": "Circle", "fields": [{"name": "radius", "type": "u32"}]},
                    {
                        "name": "Line",
                        "fields": [{"defined": {"name": "Point"}}, {"defined": {"name": "Point"}}],
                    },
                ],
            },
        },
    ],
}


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (run offline)")
    config.addinivalue_line("markers", "pda: Tests that run the PDA bump search")


@pytest.fixture
def idl_dict():
    return copy.deepcopy(SAMPLE_IDL)


@pytest.fixture
def idl(idl_dict):
    return Idl.from_dict(idl_dict)


@pytest.fixture
def coder(idl):
    return Coder(idl)


@pytest.fixture
def program_id():
    return Pubkey.from_string(PROGRAM_ADDRESS)
