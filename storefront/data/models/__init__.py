#import modeli zeby SQLAlchemy je zarejestrowal w base metadata

from storefront.data.models.snapshot import SnapshotModel

__all__ = ["SnapshotModel"]
