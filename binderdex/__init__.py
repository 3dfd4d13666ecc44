"""
BinderDex.

Binder slot resolution and sync engine for trading-card collections.
"""
