"""
Command-line interface for MerkleForge.
"""
