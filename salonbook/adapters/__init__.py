"""
Adapters layer - Storage collaborators implementing the gateway contract.
"""

from .memory_gateway import InMemorySalonGateway

__all__ = ["InMemorySalonGateway"]
