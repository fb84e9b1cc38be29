"""
rune: enclave-aware container runtime helpers.
"""
