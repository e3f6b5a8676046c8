"""
Vanity Keypair Job Queue

A durable, concurrency-bounded job queue wrapping the solana-vanity
keypair search tool, with crash recovery and a small HTTP API.
"""

__version__ = "1.0.0"
