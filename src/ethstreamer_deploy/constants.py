"""Configuration constants for ethstreamer-deploy."""

# Contract deployed by the deploy-eth-streamer task
ETH_STREAMER_CONTRACT = "EthStreamer"

# Hardhat dev node account #0, used as the EthStreamer constructor argument
DEFAULT_STREAMER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

CONFIG_FILENAME = "ethstreamer.config.json"
CONFIG_ENV = "ETHSTREAMER_CONFIG"

# Defaults mirror the shipped ethstreamer.config.json
DEFAULT_SOLIDITY_VERSION = "0.8.30"
DEFAULT_OPTIMIZER = {
    "enabled": True,
    "runs": 1000,
}

DEFAULT_NETWORK = "localhost"
NETWORK_CONFIG = {
    "localhost": {
        "url": "http://127.0.0.1:8545",
        "chainId": 31337,
    },
}

DEFAULT_PATHS = {
    "sources": "contracts",
    "artifacts": "artifacts",
}

# Hardhat artifact format marker
ARTIFACT_FORMAT = "hh-sol-artifact-1"

# Compiler outputs needed to build artifacts
SOLC_OUTPUT_SELECTION = {
    "*": {
        "*": [
            "abi",
            "evm.bytecode.object",
            "evm.bytecode.linkReferences",
            "evm.deployedBytecode.object",
            "evm.deployedBytecode.linkReferences",
        ],
    },
}
