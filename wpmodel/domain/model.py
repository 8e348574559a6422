"""Model - base class for WordPress entities (posts, terms, table rows).

Model складається з:
- AttributeStore: значення + dirty tracking
- ModelEvents: lifecycle events (saving, created, deleted, ...)
- Builder factory: new_query() вибирає backend (DBQuery / PostQuery / TermQuery)

Lifecycle:
    NEW ──save()──▶ PERSISTED ──delete()──▶ DELETED
                     │  ▲
                     └──┘ save() (update тільки якщо dirty)

Example:
    >>> class Book(Model):
    ...     table = "books"
    ...     object_type = "book"
    >>> book = Book({"title": "Dune"})
    >>> book.save()
    True
    >>> book.title = "Dune Messiah"
    >>> book.is_dirty("title")
    True
"""

import json
from typing import Any, Callable, ClassVar, Iterable, Mapping

from wpmodel.config import get_logger
from wpmodel.domain.collection import Collection
from wpmodel.domain.concerns.attributes import AttributeStore
from wpmodel.domain.concerns.events import ModelEvents, listen
from wpmodel.domain.exceptions import UnsupportedActionError
from wpmodel.infrastructure.database import get_database
from wpmodel.infrastructure.sql_builder import TableQuery
from wpmodel.query.builder import Builder
from wpmodel.query.db_query import DBQuery
from wpmodel.query.base import Query
from wpmodel.utils import class_basename, snake_case

logger = get_logger(__name__)

# Public instance fields that are model state, not attributes
_INSTANCE_FIELDS = frozenset({"exists", "recently_created"})


def _class_attr(cls: type, name: str) -> Any:
    """Look up name in the class MRO without triggering dynamic forwarding."""
    for klass in cls.__mro__:
        if name in klass.__dict__:
            return klass.__dict__[name]
    return None


class ModelMeta(type):
    """Forwards unknown class-level calls to a new query builder.

    Example:
        >>> Page.limit(5).get()    # == Page.query().limit(5).get()
    """

    def __getattr__(cls, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)

        return getattr(cls.query(), name)


class Model(metaclass=ModelMeta):
    """Base model.

    Class attributes:
        object_type: Object type name (post type, taxonomy, ...), також
            namespace для events.
        table: Table name without prefix ("posts" by default).
        primary_key: Name of the key attribute.
    """

    object_type: ClassVar[str | None] = None
    table: ClassVar[str | None] = None
    primary_key: ClassVar[str] = "ID"

    # Boot registry: class → booted, class → initializer method names
    _booted: ClassVar[dict[type, bool]] = {}
    _trait_initializers: ClassVar[dict[type, list[str]]] = {}

    def __init__(self, attributes: Mapping[str, Any] | None = None) -> None:
        """Initialize model.

        Args:
            attributes: Attributes to fill (go through the sanitizer and
                stay dirty until saved).
        """
        self._attributes = AttributeStore(key_name=self.get_key_name(), sanitizer=self.sanitize_attribute)
        self._events = ModelEvents(self, self.get_object_type())
        self.exists = False
        self.recently_created = False

        self._maybe_boot()

        # Subclass hook runs before the mixin initializers
        if _class_attr(type(self), "initialize") is not None:
            self.initialize(attributes)

        self._initialize_traits()
        self._attributes.sync_original()

        if isinstance(attributes, Mapping):
            self.fill(attributes)

    # ==================== Booting ====================

    def _maybe_boot(self) -> None:
        cls = type(self)

        if cls not in Model._booted:
            Model._booted[cls] = True

            self._events.fire("booting")
            cls.boot()
            self._events.fire("booted")

    @classmethod
    def boot(cls) -> None:
        """Boot the model class (once per class)."""
        cls.boot_traits()

    @classmethod
    def boot_traits(cls) -> None:
        """Call boot_<mixin>() and collect initialize_<mixin>() for every class in the MRO.

        Mixin HasMetadata → boot_has_metadata / initialize_has_metadata.
        """
        booted: list[str] = []
        initializers: list[str] = []

        for klass in reversed(cls.__mro__):
            if klass is object:
                continue

            name = snake_case(klass.__name__)
            boot_method = f"boot_{name}"
            initialize_method = f"initialize_{name}"

            if _class_attr(cls, boot_method) is not None and boot_method not in booted:
                getattr(cls, boot_method)()
                booted.append(boot_method)

            if _class_attr(cls, initialize_method) is not None and initialize_method not in initializers:
                initializers.append(initialize_method)

        Model._trait_initializers[cls] = initializers
        logger.debug("model.booted", model=cls.__name__, booted=booted, initializers=initializers)

    def _initialize_traits(self) -> None:
        for method in Model._trait_initializers.get(type(self), []):
            getattr(self, method)()

    @classmethod
    def clear_booted_models(cls) -> None:
        """Clear the boot registry so models are booted again (for testing)."""
        Model._booted.clear()
        Model._trait_initializers.clear()

    # ==================== Attributes ====================

    def get_attribute(self, key: str) -> Any:
        return self._attributes.get(key)

    def set_attribute(self, key: str, value: Any) -> "Model":
        self._attributes.set(key, value)
        return self

    def sanitize_attribute(self, key: str, value: Any) -> Any:
        """Run value through the "sanitize_attribute" filter."""
        return self._events.filter("sanitize_attribute", value, key)

    def get_attributes(self) -> dict[str, Any]:
        return self._attributes.all()

    def set_raw_attributes(self, attributes: Mapping[str, Any], sync: bool = False) -> "Model":
        self._attributes.set_raw(attributes, sync)
        return self

    def fill(self, attributes: Mapping[str, Any]) -> "Model":
        """Set several attributes (through the sanitizer)."""
        for key, value in attributes.items():
            self.set_attribute(key, value)
        return self

    def only(self, *keys: Any) -> dict[str, Any]:
        return self._attributes.only(*keys)

    def get_original(self, key: str | None = None, default: Any = None) -> Any:
        return self._attributes.get_original(key, default)

    def sync_original(self) -> "Model":
        self._attributes.sync_original()
        return self

    def sync_original_attribute(self, key: str) -> "Model":
        self._attributes.sync_original_attribute(key)
        return self

    def sync_changes(self) -> "Model":
        self._attributes.sync_changes()
        return self

    def revert_attribute(self, key: str) -> "Model":
        self._attributes.revert(key)
        return self

    def get_dirty(self) -> dict[str, Any]:
        return self._attributes.get_dirty()

    def get_changes(self) -> dict[str, Any]:
        return self._attributes.get_changes()

    def is_dirty(self, *keys: Any) -> bool:
        return self._attributes.is_dirty(*keys)

    def is_clean(self, *keys: Any) -> bool:
        return self._attributes.is_clean(*keys)

    def was_changed(self, *keys: Any) -> bool:
        return self._attributes.was_changed(*keys)

    # ==================== Identity ====================

    def get_key_name(self) -> str:
        return self.primary_key

    def get_key(self) -> Any:
        return self._attributes.get_key()

    def get_id(self) -> int | None:
        """Primary key as int (None for a new model)."""
        key = self.get_key()

        try:
            return int(key) if key is not None else None
        except (TypeError, ValueError):
            return None

    def get_key_for_save(self) -> Any:
        """Original key value (the row to update even if the key attribute changed)."""
        return self._attributes.get_original(self.get_key_name(), self.get_key())

    def get_table(self) -> str:
        return self.table or "posts"

    def get_object_type(self) -> str | None:
        return self.object_type

    def resolve_internal_type(self) -> str:
        """WordPress internal type: "post", "term", ..."""
        return "post"

    # ==================== Instances ====================

    def new_instance(self, attributes: Mapping[str, Any] | None = None, exists: bool = False) -> "Model":
        model = type(self)(attributes or {})
        model.exists = exists
        return model

    def new_from_builder(self, attributes: Any = None) -> "Model":
        """Create an existing model from a raw row (attributes synced, clean)."""
        if not isinstance(attributes, Mapping):
            # fields="ids" queries return bare IDs
            attributes = {self.get_key_name(): attributes} if attributes is not None else {}

        model = self.new_instance({}, True)
        model.set_raw_attributes(dict(attributes), sync=True)
        model.after_hydrate()

        model._events.fire("retrieved")

        return model

    def after_hydrate(self) -> None:
        """Hook called after a row is loaded into a fresh model."""

    def new_collection(self, models: Iterable[Any], map: bool = False) -> Collection:
        collection = Collection(models)
        return collection.map_into(type(self)) if map else collection

    # ==================== Persistence ====================

    def update(self, attributes: Mapping[str, Any] | None = None) -> bool:
        """Fill and save an existing model, False when it does not exist."""
        if not self.exists:
            return False

        return self.fill(attributes or {}).save()

    def save(self) -> bool:
        """Save the model (insert or update).

        Returns:
            True on success (clean existing model counts as success),
            False if cancelled or rejected by the backend.
        """
        if self._events.until("saving").cancelled:
            return False

        self.recently_created = False

        if self.exists:
            saved = self.perform_update() if self.is_dirty() else True
        else:
            saved = self.perform_insert()

        if saved:
            self.finish_save()

        return saved

    def finish_save(self) -> None:
        self.flush_cache()
        self.sync_original()
        self._events.fire("saved")

    def flush_cache(self) -> None:
        """Hook for clearing caches after a write."""

    def perform_update(self) -> bool:
        if self._events.until("updating").cancelled:
            return False

        dirty = self.get_dirty()

        if dirty:
            if self.doing("update", self.get_key_for_save(), dirty) is False:
                logger.warning(
                    "model.update_failed",
                    model=class_basename(self),
                    id=self.get_key_for_save(),
                    dirty=list(dirty),
                )
                return False

            self.sync_changes()
            self._events.fire("updated", self.get_changes())

        return True

    def perform_insert(self) -> bool:
        if self._events.until("creating").cancelled:
            return False

        insert_id = self.doing("insert", self.get_attributes())

        if not isinstance(insert_id, int) or isinstance(insert_id, bool) or insert_id <= 0:
            logger.warning("model.insert_failed", model=class_basename(self), result=repr(insert_id))
            return False

        # exists до "created", щоб listeners могли одразу зробити update
        self.exists = True
        self.recently_created = True

        self.set_attribute(self.get_key_name(), insert_id)

        self._events.fire("created")
        logger.debug("model.created", model=class_basename(self), id=insert_id)

        return True

    def delete(self, force: bool = False) -> bool | None:
        """Delete the model.

        Args:
            force: Bypass the trash (posts).

        Returns:
            None if the model does not exist, False if cancelled or rejected,
            True on success.
        """
        if not self.exists:
            return None

        if self._events.until("deleting").cancelled:
            return False

        if not self.doing("delete", self.get_key_for_save(), force):
            return False

        self.exists = False
        self.flush_cache()
        self._events.fire("deleted")

        logger.debug("model.deleted", model=class_basename(self), id=self.get_key_for_save(), force=force)
        return True

    def doing(self, action: str, *args: Any) -> Any:
        """Run a persistence action.

        Model method ``doing_<action>`` has priority over the backend's
        ``<action>``.

        Raises:
            UnsupportedActionError: If neither handles the action.
        """
        method = f"doing_{action}"
        if _class_attr(type(self), method) is not None:
            return getattr(self, method)(*args)

        query = self.new_query_builder().get_query()
        if callable(getattr(type(query), action, None)):
            return getattr(query, action)(*args)

        raise UnsupportedActionError(
            f'The "{action}" action is not supported in the [{class_basename(self)}]',
            action=action,
            model=class_basename(self),
        )

    @classmethod
    def destroy(cls, *ids: Any) -> int:
        """Force-delete models by IDs, return how many were deleted.

        Example:
            >>> Page.destroy(1, 2, 3)
            >>> Page.destroy([1, 2, 3])
        """
        if len(ids) == 1 and isinstance(ids[0], (list, tuple, set)):
            ids = tuple(ids[0])

        count = 0
        for id in ids:
            model = cls.find(id)

            if model is not None and model.delete(True):
                count += 1

        return count

    # ==================== Querying ====================

    @classmethod
    def query(cls, query_vars: Mapping[str, Any] | None = None) -> Builder:
        """Begin querying the model."""
        return cls().new_query_builder(query_vars)

    @classmethod
    def all(cls) -> Collection:
        return cls().new_query_builder().get()

    @classmethod
    def find(cls, id: Any) -> "Model | None":
        return cls().new_query_builder().find(id)

    def new_query_builder(self, query_vars: Mapping[str, Any] | None = None) -> Builder:
        builder = Builder(self.new_query()).set_model(self)

        if query_vars:
            builder.get_query().apply_query_vars(query_vars)

        return builder

    def new_query(self) -> Query:
        """Backend factory (Post / Term override it)."""
        return DBQuery(self.new_db_query())

    def new_db_query(self) -> TableQuery:
        return get_database().table(self.get_table())

    # ==================== Events ====================

    @classmethod
    def on(cls, event: str, callback: Callable[..., Any]) -> None:
        """Register a listener for an event of this model's object type."""
        listen(cls.object_type, event, callback)

    @classmethod
    def retrieved(cls, callback: Callable[..., Any]) -> None:
        cls.on("retrieved", callback)

    @classmethod
    def saving(cls, callback: Callable[..., Any]) -> None:
        cls.on("saving", callback)

    @classmethod
    def saved(cls, callback: Callable[..., Any]) -> None:
        cls.on("saved", callback)

    @classmethod
    def creating(cls, callback: Callable[..., Any]) -> None:
        cls.on("creating", callback)

    @classmethod
    def created(cls, callback: Callable[..., Any]) -> None:
        cls.on("created", callback)

    @classmethod
    def updating(cls, callback: Callable[..., Any]) -> None:
        cls.on("updating", callback)

    @classmethod
    def updated(cls, callback: Callable[..., Any]) -> None:
        cls.on("updated", callback)

    @classmethod
    def deleting(cls, callback: Callable[..., Any]) -> None:
        cls.on("deleting", callback)

    @classmethod
    def deleted(cls, callback: Callable[..., Any]) -> None:
        cls.on("deleted", callback)

    @classmethod
    def booting(cls, callback: Callable[..., Any]) -> None:
        cls.on("booting", callback)

    @classmethod
    def booted(cls, callback: Callable[..., Any]) -> None:
        cls.on("booted", callback)

    # ==================== Serialization ====================

    def to_array(self) -> dict[str, Any]:
        return dict(self.get_attributes())

    def to_json(self, **kwargs: Any) -> str:
        return json.dumps(self.to_array(), default=str, **kwargs)

    # ==================== Dunder ====================

    def __getattr__(self, key: str) -> Any:
        # Called only when normal lookup fails
        if key.startswith("_"):
            raise AttributeError(key)
        return self.get_attribute(key)

    def __setattr__(self, key: str, value: Any) -> None:
        if key.startswith("_") or key in _INSTANCE_FIELDS:
            object.__setattr__(self, key, value)
        else:
            self.set_attribute(key, value)

    def __delattr__(self, key: str) -> None:
        if key.startswith("_") or key in _INSTANCE_FIELDS:
            object.__delattr__(self, key)
        else:
            self._attributes.remove(key)

    def __getitem__(self, key: str) -> Any:
        return self.get_attribute(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.set_attribute(key, value)

    def __delitem__(self, key: str) -> None:
        self._attributes.remove(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get_attribute(key) is not None

    def __eq__(self, other: object) -> bool:
        """Models are equal when they are of the same class with the same key."""
        if not isinstance(other, Model) or type(other) is not type(self):
            return False

        if self.get_key() is None and other.get_key() is None:
            return self is other

        return str(self.get_key()) == str(other.get_key())

    def __hash__(self) -> int:
        key = self.get_key()
        if key is None:
            return hash(id(self))
        return hash((type(self), str(key)))

    def __str__(self) -> str:
        return self.to_json()

    def __repr__(self) -> str:
        return f"{class_basename(self)}({self.get_key_name()}={self.get_key()!r}, exists={self.exists})"
