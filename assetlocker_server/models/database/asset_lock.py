"""
AssetLocker Server - Asset Lock Database Model

AssetLock model holding the current holder of each locked asset.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint, Index

from .base import Base


class AssetLock(Base):
    """
    Asset locks table - one row per locked asset within an origin/branch scope
    """
    __tablename__ = "asset_locks"

    lock_id = Column(Integer, primary_key=True, autoincrement=True)
    origin = Column(String, nullable=False)
    branch = Column(String, nullable=False)
    file_path = Column(String, nullable=False)
    holder = Column(String, nullable=False)
    locked_at_utc = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        # At most one holder per asset in a scope; a racing second insert fails here
        UniqueConstraint('origin', 'branch', 'file_path', name='uq_asset_locks_scope_path'),
        # Index for listing all locks of a scope
        Index('idx_asset_locks_scope', 'origin', 'branch'),
    )

    def __repr__(self):
        return f"<AssetLock {self.origin}@{self.branch}:{self.file_path} by {self.holder}>"
