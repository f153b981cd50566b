"""Create a wasm contract and its integration tests for the Dimension platform."""

__version__ = "0.1.0"
