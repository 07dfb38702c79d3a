from dataclasses import dataclass

from src.catalog.core.storage import KeyValueStore, StorageEngine
from src.catalog.entities.service.product import Product


@dataclass
class ApplicationDependencies:
    kv_store: KeyValueStore
    product_storage: StorageEngine[Product]
