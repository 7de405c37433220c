"""
Kernel Layer

Foundational pieces shared by every catalog screen:
- Flag Core (bit-flag values, per-domain registries)
- Permission Core (capability gates built on account capability flags)
"""
