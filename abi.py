MINING_ABI = """
[
    {
        "inputs": [],
        "name": "active",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    }
]
"""
