"""Minimal ABI fragments for Uniswap-V2-style factories and pairs."""

ALL_PAIRS_LENGTH = {
    "constant": True,
    "inputs": [],
    "name": "allPairsLength",
    "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
    "payable": False,
    "stateMutability": "view",
    "type": "function",
}

ALL_PAIRS = {
    "constant": True,
    "inputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
    "name": "allPairs",
    "outputs": [{"internalType": "address", "name": "", "type": "address"}],
    "payable": False,
    "stateMutability": "view",
    "type": "function",
}

TOKEN0 = {
    "constant": True,
    "inputs": [],
    "name": "token0",
    "outputs": [{"internalType": "address", "name": "", "type": "address"}],
    "payable": False,
    "stateMutability": "view",
    "type": "function",
}

TOKEN1 = {**TOKEN0, "name": "token1"}
