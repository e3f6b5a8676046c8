"""
Generator module.
Wraps the external vanity search binary and verifies its keypairs.
"""

from vanity_queue.generator.adapter import GeneratorAdapter, parse_output
from vanity_queue.generator.keys import FullKey, Seed, SecretKeyMaterial

__all__ = ["GeneratorAdapter", "parse_output", "Seed", "FullKey", "SecretKeyMaterial"]
