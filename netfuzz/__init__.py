"""netfuzz — cooperative swarm fuzzer for reliable-UDP transports."""

__version__ = "0.1.0"
