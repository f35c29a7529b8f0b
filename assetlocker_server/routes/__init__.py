"""
AssetLocker Server - Routes Package

This package contains the API routers of the lock service.
"""
