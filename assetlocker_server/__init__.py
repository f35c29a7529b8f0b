"""
AssetLocker Server

Authoritative lock store for shared binary assets, served over HTTP.
"""

__version__ = "1.0.0"
