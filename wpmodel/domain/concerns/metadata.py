"""Metadata concern - post/term meta for models.

Два способи працювати з meta:
- Metadata relation: ``page.meta().get_meta("color")`` (тонка обгортка)
- HasMetadata mixin: meta ↔ attributes mapping через ``maps``

Example:
    >>> class Product(HasMetadata, Post):
    ...     object_type = "product"
    ...     maps = {"price": "_price", "gallery": "gallery"}
    >>> product = Product.find(100)
    >>> product.price            # loaded from _price meta on hydration
    '9.99'
    >>> product.price = "12.50"
    >>> product.save()           # writes _price meta after the post update
"""

from typing import Any, ClassVar, Iterable, Mapping

from wpmodel.config import get_logger
from wpmodel.infrastructure.wordpress import MetadataAPI, get_wordpress

logger = get_logger(__name__)


def _meta_api() -> MetadataAPI:
    return get_wordpress().meta


class Metadata:
    """Metadata relation of one model."""

    def __init__(self, model: Any, meta_type: str = "post") -> None:
        self.model = model
        self.meta_type = meta_type

    def get_meta(self, key: str) -> Any:
        return _meta_api().get_metadata(self.meta_type, self.model.get_id(), key, single=True)

    def add_meta(self, meta_key: str, meta_value: Any) -> int | bool:
        return _meta_api().add_metadata(self.meta_type, self.model.get_id(), meta_key, meta_value, unique=True)

    def update_meta(self, meta_key: str, meta_value: Any) -> int | bool:
        return _meta_api().update_metadata(self.meta_type, self.model.get_id(), meta_key, meta_value)

    def delete_meta(self, meta_key: str) -> bool:
        return _meta_api().delete_metadata(self.meta_type, self.model.get_id(), meta_key)

    def __repr__(self) -> str:
        return f"Metadata(meta_type={self.meta_type!r}, object_id={self.model.get_id()!r})"


def normalize_mapping(maps: Mapping[str, str] | Iterable[Any] | None) -> dict[str, str]:
    """Normalize ``maps`` into attribute → meta key.

    Example:
        >>> normalize_mapping(["gallery", {"price": "_price"}])
        {'gallery': 'gallery', 'price': '_price'}
    """
    if not maps:
        return {}

    if isinstance(maps, Mapping):
        return {str(attribute): str(meta_key) for attribute, meta_key in maps.items()}

    mapping: dict[str, str] = {}
    for item in maps:
        if isinstance(item, Mapping):
            mapping.update(normalize_mapping(item))
        else:
            # Same name for attribute and meta key
            mapping[str(item)] = str(item)

    return mapping


class HasMetadata:
    """Mixin: meta CRUD and attribute ↔ meta key mapping.

    Put it before the model base: ``class Product(HasMetadata, Post)``.
    """

    maps: ClassVar[Mapping[str, str] | Iterable[Any]] = {}
    meta_type: ClassVar[str | None] = None

    # Filled by boot_has_metadata() per class
    _meta_mapping: ClassVar[dict[str, str]] = {}

    @classmethod
    def boot_has_metadata(cls) -> None:
        cls._meta_mapping = normalize_mapping(cls.maps)

    def initialize_has_metadata(self) -> None:
        self._meta_relation = None

    def get_meta_type(self) -> str:
        return self.meta_type or self.resolve_internal_type()

    def meta(self) -> Metadata:
        """Metadata relation of this model (cached per instance)."""
        if self._meta_relation is None:
            self._meta_relation = Metadata(self, self.get_meta_type())
        return self._meta_relation

    # ==================== Meta CRUD ====================

    def get_meta(self, meta_key: str, single: bool = True) -> Any:
        """Get meta value, None when the key does not exist."""
        api = _meta_api()

        if single and not api.metadata_exists(self.get_meta_type(), self.get_id(), meta_key):
            return None

        value = api.get_metadata(self.get_meta_type(), self.get_id(), meta_key, single)
        return None if value is False else value

    def add_meta(self, meta_key: str, meta_value: Any, unique: bool = True) -> int | bool:
        added = _meta_api().add_metadata(self.get_meta_type(), self.get_id(), meta_key, meta_value, unique)

        if added is False:
            return False

        self.update_attribute_meta(meta_key, meta_value)
        return added

    def update_meta(self, meta_key: str, meta_value: Any, prev_value: Any = "") -> bool:
        updated = _meta_api().update_metadata(self.get_meta_type(), self.get_id(), meta_key, meta_value, prev_value)

        if updated is False:
            return False

        self.update_attribute_meta(meta_key, meta_value)
        return True

    def delete_meta(self, meta_key: str, meta_value: Any = "", delete_all: bool = False) -> bool:
        deleted = _meta_api().delete_metadata(self.get_meta_type(), self.get_id(), meta_key, meta_value, delete_all)

        if not deleted:
            return False

        self.update_attribute_meta(meta_key, None)
        return True

    def update_attribute_meta(self, meta_key: str, meta_value: Any) -> None:
        """Set the mapped attribute to the stored meta value (stays clean)."""
        attribute = self.get_mapping_attribute(meta_key)

        if attribute is not None:
            self.set_attribute(attribute, meta_value)
            self.sync_original_attribute(attribute)

    # ==================== Mapping ====================

    def get_mapping(self) -> dict[str, str]:
        return type(self)._meta_mapping

    def has_mapping(self, *attributes: Any) -> bool:
        """Check if any mapping exists, or if any of the attributes is mapped."""
        mapping = self.get_mapping()

        if len(attributes) == 1 and isinstance(attributes[0], (list, tuple, set)):
            attributes = tuple(attributes[0])

        if not attributes:
            return len(mapping) > 0

        return any(attribute in mapping for attribute in attributes)

    def get_mapping_metakey(self, attribute: str) -> str | None:
        return self.get_mapping().get(attribute)

    def get_mapping_attribute(self, meta_key: str) -> str | None:
        for attribute, key in self.get_mapping().items():
            if key == meta_key:
                return attribute
        return None

    def get_mapped_metadata(self) -> dict[str, Any]:
        """Read every mapped meta key: attribute → value (None when missing)."""
        return {attribute: self.get_meta(meta_key) for attribute, meta_key in self.get_mapping().items()}

    def perform_update_metadata(self, changes: Iterable[str]) -> list[str] | None:
        """Write mapped attributes to meta.

        Right after insert every mapped attribute that is set is written,
        otherwise only the changed ones.

        Returns:
            Attributes whose meta was written, None if nothing to write.
        """
        mapping = self.get_mapping()

        if self.recently_created:
            attributes = list(mapping)
        else:
            attributes = [attribute for attribute in changes if attribute in mapping]

        attributes = [attribute for attribute in attributes if self._attributes.has(attribute)]

        if not attributes:
            return None

        updated = [
            attribute
            for attribute in attributes
            if self.update_meta(mapping[attribute], self.get_attribute(attribute))
        ]

        logger.debug(
            "model.metadata_updated",
            object_type=self.get_object_type(),
            id=self.get_id(),
            attributes=updated,
        )
        return updated

    # ==================== Model hooks ====================

    def after_hydrate(self) -> None:
        super().after_hydrate()

        if self.has_mapping():
            self.set_raw_attributes({**self.get_attributes(), **self.get_mapped_metadata()}, sync=True)

    def finish_save(self) -> None:
        # Dirty set ще не скинутий: sync_original() відбувається у super()
        self.perform_update_metadata(list(self.get_dirty()))
        super().finish_save()
