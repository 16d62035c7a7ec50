"""ContractUtility: AsyncWeb3 initialization and bridge contract ABI loading."""

import json
from pathlib import Path

from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.contract import AsyncContract

# Only the read-only gasPrice() view is needed from the bridge contracts.
BRIDGE_GAS_PRICE_ABI: list[dict] = [
    {
        "constant": True,
        "inputs": [],
        "name": "gasPrice",
        "outputs": [{"name": "", "type": "uint256"}],
        "payable": False,
        "stateMutability": "view",
        "type": "function",
    }
]


class ContractUtility:
    """Utility for AsyncWeb3 connection and bridge contract setup.

    :ivar rpc_url: Chain RPC URL.
    :ivar w3: AsyncWeb3 instance bound to ``rpc_url``.
    """

    def __init__(self, rpc_url: str) -> None:
        """Initialize the contract utility.

        No connection is made until the first call.

        :param rpc_url: JSON-RPC endpoint of the chain.
        """
        self.rpc_url = rpc_url
        self.w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))

    def bridge_contract(
        self, address: str, abi_path: str | Path | None = None
    ) -> AsyncContract:
        """Build the bridge contract handle used for the fallback gas price.

        :param address: Bridge contract address.
        :param abi_path: Optional ABI JSON file; the built-in ``gasPrice()``
            ABI is used when omitted.
        :returns: AsyncContract instance.
        """
        abi = self.load_abi(abi_path) if abi_path else BRIDGE_GAS_PRICE_ABI
        return self.w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(address), abi=abi
        )

    @staticmethod
    def load_abi(path: str | Path) -> list:
        """Load a contract ABI from a JSON file.

        Accepts either a bare ABI list or a compiler artifact with an
        ``abi`` key.

        :param path: Path to the JSON file.
        :returns: The ABI.
        :raises ValueError: If the file holds no ABI.
        """
        with open(Path(path).resolve(), "r") as file:
            contract_data = json.load(file)

        if isinstance(contract_data, dict):
            contract_data = contract_data.get("abi")
        if not isinstance(contract_data, list):
            raise ValueError(f"No contract ABI found in {path}")
        return contract_data
