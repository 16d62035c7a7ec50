"""Unit tests for ContractUtility."""

import json

import pytest

from gasprice.src.ContractUtility import BRIDGE_GAS_PRICE_ABI, ContractUtility

BRIDGE_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"

CUSTOM_ABI = [
    {
        "inputs": [],
        "name": "gasPrice",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "requiredSignatures",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]


class TestBridgeContract:
    """Test bridge contract construction."""

    def test_default_abi(self) -> None:
        """Without an ABI file the built-in gasPrice() ABI should be used."""
        utility = ContractUtility("http://localhost:8545")
        contract = utility.bridge_contract(BRIDGE_ADDRESS.lower())

        assert contract.address == BRIDGE_ADDRESS
        assert contract.abi == BRIDGE_GAS_PRICE_ABI
        assert utility.rpc_url == "http://localhost:8545"

    def test_custom_abi(self, tmp_path) -> None:
        """An ABI file should replace the built-in ABI."""
        abi_path = tmp_path / "HomeBridge.json"
        abi_path.write_text(json.dumps({"abi": CUSTOM_ABI}))

        contract = ContractUtility("http://localhost:8545").bridge_contract(
            BRIDGE_ADDRESS, abi_path
        )

        assert contract.abi == CUSTOM_ABI

    def test_invalid_address(self) -> None:
        """Malformed addresses should be rejected."""
        with pytest.raises(ValueError):
            ContractUtility("http://localhost:8545").bridge_contract("0x1234")


class TestLoadAbi:
    """Test ContractUtility.load_abi()."""

    def test_compiler_artifact(self, tmp_path) -> None:
        """The abi key of a compiler artifact should be returned."""
        path = tmp_path / "artifact.json"
        path.write_text(json.dumps({"abi": CUSTOM_ABI, "bytecode": {"object": "0x"}}))
        assert ContractUtility.load_abi(path) == CUSTOM_ABI

    def test_bare_abi(self, tmp_path) -> None:
        """A bare ABI list should be returned as-is."""
        path = tmp_path / "abi.json"
        path.write_text(json.dumps(CUSTOM_ABI))
        assert ContractUtility.load_abi(str(path)) == CUSTOM_ABI

    def test_no_abi(self, tmp_path) -> None:
        """Files without an ABI should raise ValueError."""
        path = tmp_path / "other.json"
        path.write_text(json.dumps({"name": "HomeBridge"}))
        with pytest.raises(ValueError, match="No contract ABI"):
            ContractUtility.load_abi(path)
