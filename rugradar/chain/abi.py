# Minimal JSON ABIs for the read-only calls the probes make

def _view(name, inputs, outputs):
    return {
        "name": name,
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": f"arg{i}", "type": t} for i, t in enumerate(inputs)],
        "outputs": [{"name": "", "type": t} for t in outputs],
    }


ERC20_ABI = [
    _view("name", [], ["string"]),
    _view("symbol", [], ["string"]),
    _view("decimals", [], ["uint8"]),
    _view("totalSupply", [], ["uint256"]),
    _view("owner", [], ["address"]),
    _view("balanceOf", ["address"], ["uint256"]),
]

FACTORY_ABI = [
    _view("getPair", ["address", "address"], ["address"]),
]

PAIR_ABI = [
    _view("token0", [], ["address"]),
    _view("token1", [], ["address"]),
    _view("getReserves", [], ["uint112", "uint112", "uint32"]),
    _view("totalSupply", [], ["uint256"]),
    _view("balanceOf", ["address"], ["uint256"]),
]
