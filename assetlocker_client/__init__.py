"""
AssetLocker Client

Lock coordination for shared binary assets: lock client, status cache,
save gate and auto-unlock engine.
"""

__version__ = "1.0.0"
