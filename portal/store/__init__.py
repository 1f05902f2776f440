"""Record store access."""

from portal.store.gateway import RecordStoreGateway

__all__ = ["RecordStoreGateway"]
