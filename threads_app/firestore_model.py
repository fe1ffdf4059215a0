import logging
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, ClassVar, Dict, Iterable, List, Optional, Set, Tuple, Type, Union

from google.api_core.exceptions import NotFound
from google.cloud.firestore_v1 import AsyncClient, ArrayUnion
from google.cloud.firestore_v1.base_query import FieldFilter
from google.cloud.firestore_v1.field_path import FieldPath
from pydantic import BaseModel, ConfigDict, Field

from .enums import OrderByDirection, FirestoreOperators
from .firestore_client import FirestoreDB
from .firestore_fields import FirestoreField
from .population import Populate, populate


# Alias for the first element in order-by tuple
FieldType = Union[str, FirestoreField]
# Alias for field ordering tuples
FieldOrderType = Tuple[FieldType, OrderByDirection]
FilterType = Tuple[FieldType, Union[FirestoreOperators, str], Any]
OrderByType = Union[List[Union[FieldType, FieldOrderType]], FieldType, FieldOrderType]

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _operator(op: Union[FirestoreOperators, str]) -> str:
    return op.value if isinstance(op, FirestoreOperators) else str(op)


def _direction(direction: Union[OrderByDirection, str]) -> str:
    return str(OrderByDirection.parse(direction))


def _to_storage(value: Any) -> Any:
    """Collapse populated references back to ids before writing."""
    if isinstance(value, BaseFirestoreModel):
        return value.id
    if isinstance(value, list):
        return [_to_storage(item) for item in value]
    if isinstance(value, BaseModel):
        return value.model_dump()
    return value


class BaseFirestoreModel(BaseModel):
    """
    Base document for the threads collections, with asynchronous CRUD,
    queries and reference population.
    """

    # Firestore document id
    id: Optional[str] = Field(default=None)

    # Injected by init_models() / connect_to_db()
    _db: ClassVar[Optional[FirestoreDB]] = None

    class Settings:
        name: str = "BaseCollection"  # Override in subclasses

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def initialize_fields(cls) -> None:
        """Expose every field at class level as a :class:`FirestoreField`."""
        for field_name, field_info in cls.model_fields.items():
            alias = (
                FieldPath.document_id() if field_name == "id"
                else (field_info.alias or field_name)
            )
            setattr(cls, field_name, FirestoreField(alias, attribute=field_name))

    @classmethod
    def initialize_db(cls, db: FirestoreDB):
        """Inject the FirestoreDB instance to be used for all operations."""
        cls._db = db

    @classmethod
    def _client(cls) -> AsyncClient:
        if not cls._db:
            raise RuntimeError("Database must be initialized before using the model.")
        return cls._db.client

    @property
    def collection_name(self) -> str:
        return self.get_collection_name()

    @classmethod
    def get_collection_name(cls) -> str:
        if hasattr(cls, "Settings") and hasattr(cls.Settings, "name"):
            return cls.Settings.name
        return cls.__name__

    @classmethod
    def _storage_name(cls, field_name: str) -> str:
        info = cls.model_fields.get(field_name)
        if info is None:
            return field_name
        return info.alias or field_name

    def to_document(
        self,
        include: Optional[Set[str]] = None,
        exclude_none: bool = False,
        exclude_unset: bool = False,
    ) -> Dict[str, Any]:
        """
        Data written to Firestore for this model.

        ``id`` is never part of the payload (it is the document key) and
        populated references are stored as ids.
        """
        data: Dict[str, Any] = {}
        for field_name in type(self).model_fields:
            if field_name == "id":
                continue
            if include is not None and field_name not in include:
                continue
            if exclude_unset and field_name not in self.model_fields_set:
                continue
            if field_name not in self.__dict__:
                continue
            value = _to_storage(self.__dict__[field_name])
            if value is None and exclude_none:
                continue
            data[self._storage_name(field_name)] = value
        return data

    @classmethod
    def _from_snapshot(cls, snapshot, partial: bool = False) -> "BaseFirestoreModel":
        data = snapshot.to_dict() or {}
        data["id"] = snapshot.id
        if partial:
            # Projected reads skip validation: required fields may be absent.
            by_alias = {cls._storage_name(name): name for name in cls.model_fields}
            values = {by_alias.get(key, key): value for key, value in data.items()}
            document = cls.model_construct(**values)
            # Unfetched fields stay unset instead of taking their defaults.
            for name in cls.model_fields:
                if name not in values:
                    document.__dict__.pop(name, None)
            return document
        return cls.model_validate(data)

    # --------------------------------------------------------------------------
    # CRUD operations: create/update/delete
    # --------------------------------------------------------------------------
    async def save(self, exclude_none=False, exclude_unset=False) -> "BaseFirestoreModel":
        """
        Create the document. Without an ``id`` one is generated; an explicit
        ``id`` that already exists raises :class:`RuntimeError`.
        """
        collection_ref = self._client().collection(self.collection_name)
        data_to_save = self.to_document(exclude_none=exclude_none, exclude_unset=exclude_unset)

        if not self.id:
            doc_ref = collection_ref.document()
            self.id = doc_ref.id
        else:
            doc_ref = collection_ref.document(self.id)
            if (await doc_ref.get()).exists:
                raise RuntimeError("Error creating object: provided ID already exists.")

        await doc_ref.set(data_to_save)
        logger.debug("Created %s/%s", self.collection_name, self.id)
        return self

    async def update(
        self,
        include: Optional[Set[str]] = None,
        exclude_none=False,
        exclude_unset=False,
    ) -> "BaseFirestoreModel":
        """Write fields of an existing document (all of them, or ``include``)."""
        if not self.id:
            raise ValueError("Cannot update a document without an ID.")
        doc_ref = self._client().collection(self.collection_name).document(self.id)

        updates = self.to_document(include=include, exclude_none=exclude_none, exclude_unset=exclude_unset)
        logger.debug("Update: %s - id=%s, fields=%s", self.collection_name, self.id, sorted(updates))
        if updates:
            await doc_ref.update(updates)
        return self

    async def delete(self) -> None:
        if not self.id:
            raise ValueError("Cannot delete a document without an ID.")
        doc_ref = self._client().collection(self.collection_name).document(self.id)
        await doc_ref.delete()

    @classmethod
    async def push(cls, doc_id: str, field_name: str, *values: Any) -> bool:
        """
        Append ``values`` to an array field of document ``doc_id`` without
        reading it first. Values already present are not duplicated.

        Returns False, and writes nothing, when the document does not exist.
        """
        if not doc_id:
            raise ValueError("Cannot update a document without an ID.")
        doc_ref = cls._client().collection(cls.get_collection_name()).document(doc_id)
        try:
            await doc_ref.update({cls._storage_name(field_name): ArrayUnion([_to_storage(v) for v in values])})
        except NotFound:
            logger.warning("Push skipped: %s/%s does not exist", cls.get_collection_name(), doc_id)
            return False
        logger.debug("Push: %s/%s.%s += %s", cls.get_collection_name(), doc_id, field_name, values)
        return True

    @classmethod
    async def find_one_and_update(
        cls,
        filters: List[FilterType],
        values: Dict[str, Any],
        upsert: bool = False,
    ) -> Optional["BaseFirestoreModel"]:
        """
        Apply ``values`` to the first document matching ``filters``.

        With ``upsert`` and no match, a new document is created from
        ``values`` plus the equality filters.
        """
        document = await cls.find_one(filters)
        if document is None:
            if not upsert:
                return None
            by_alias = {cls._storage_name(name): name for name in cls.model_fields}
            seed = {
                by_alias[str(field)]: value
                for field, op, value in filters
                if _operator(op) == FirestoreOperators.EQ.value and str(field) in by_alias
            }
            document = cls(**{**seed, **values})
            await document.save()
            logger.info("Upserted %s/%s", cls.get_collection_name(), document.id)
            return document

        for name, value in values.items():
            setattr(document, name, value)
        await document.update(include=set(values))
        return document

    # --------------------------------------------------------------------------
    # Reads by id
    # --------------------------------------------------------------------------
    @classmethod
    async def get(cls, doc_id: str) -> Optional["BaseFirestoreModel"]:
        """Retrieve a document by its ID, or None."""
        doc_ref = cls._client().collection(cls.get_collection_name()).document(doc_id)
        doc_snap = await doc_ref.get()

        if doc_snap.exists:
            return cls._from_snapshot(doc_snap)
        return None

    find_by_id = get

    @classmethod
    async def get_many(
        cls,
        doc_ids: Iterable[str],
        select: Optional[Iterable[str]] = None,
    ) -> Dict[str, "BaseFirestoreModel"]:
        """
        Fetch several documents in one round trip, keyed by id.

        Missing ids are absent from the result. With ``select`` only those
        fields are read and the returned documents are partial.
        """
        client = cls._client()
        collection_ref = client.collection(cls.get_collection_name())
        refs = [collection_ref.document(doc_id) for doc_id in dict.fromkeys(doc_ids)]
        if not refs:
            return {}

        field_paths = None
        if select is not None:
            field_paths = [cls._storage_name(name) for name in select if name != "id"]

        found: Dict[str, BaseFirestoreModel] = {}
        async for snapshot in client.get_all(refs, field_paths=field_paths):
            if snapshot.exists:
                found[snapshot.id] = cls._from_snapshot(snapshot, partial=select is not None)
        return found

    @classmethod
    async def exists(cls, doc_id: str) -> bool:
        doc_ref = cls._client().collection(cls.get_collection_name()).document(doc_id)
        doc_snap = await doc_ref.get()
        return doc_snap.exists

    # --------------------------------------------------------------------------
    # Queries
    # --------------------------------------------------------------------------
    @classmethod
    async def count(cls, filters: Optional[List[FilterType]] = None) -> int:
        """
        Return the number of documents matching the given filters.
        Falls back to fetching empty projections when aggregation queries are
        unavailable.
        """
        query = cls._build_query(cls._client(), filters=filters or [])
        try:
            count_snapshot = await query.count().get()
            return count_snapshot[0][0].value
        except AttributeError:
            logger.warning("Firestore: Performing count by fetching all items with empty select")
            docs = await query.select([]).get()
            return len(docs)

    @classmethod
    async def find(
        cls,
        filters: Optional[List[FilterType]] = None,
        projection: Optional[Type[BaseModel]] = None,
        order_by: Optional[OrderByType] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> AsyncGenerator[Union["BaseFirestoreModel", BaseModel], None]:
        """Asynchronously search for documents matching filters and yield instances."""
        query = cls._build_query(cls._client(), filters=filters or [], projection=projection)

        if order_by:
            if not isinstance(order_by, list):
                order_by = [order_by]
            for order_by_field in order_by:
                if isinstance(order_by_field, tuple):
                    field, direction = order_by_field
                    query = query.order_by(str(field), direction=_direction(direction))
                else:
                    query = query.order_by(str(order_by_field))

        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        async for doc in query.stream():
            if projection is None:
                yield cls._from_snapshot(doc)
            else:
                data = doc.to_dict() or {}
                data["id"] = doc.id
                yield projection(**data)

    @classmethod
    async def find_all(cls, *args, **kwargs) -> List[Union["BaseFirestoreModel", BaseModel]]:
        """:meth:`find` collected into a list."""
        return [item async for item in cls.find(*args, **kwargs)]

    @classmethod
    async def find_one(
        cls,
        filters: Optional[List[FilterType]] = None,
        projection: Optional[Type[BaseModel]] = None,
        order_by: Optional[OrderByType] = None,
    ) -> Optional[Union["BaseFirestoreModel", BaseModel]]:
        """Return the first document matching filters, or None if no match."""
        async for obj in cls.find(
            filters=filters, projection=projection, order_by=order_by, limit=1
        ):
            return obj
        return None

    @classmethod
    def _build_query(
        cls,
        db_client: AsyncClient,
        filters: List[FilterType],
        projection: Optional[Type[BaseModel]] = None,
    ):
        query = db_client.collection(cls.get_collection_name())

        for (field_name, op, value) in filters:
            query = query.where(filter=FieldFilter(str(field_name), _operator(op), value))

        if projection:
            select_fields = [name for name in projection.model_fields if name != "id"]
            logger.debug("Build Query: select fields: %s", select_fields)
            query = query.select(select_fields)

        return query

    # --------------------------------------------------------------------------
    # Population
    # --------------------------------------------------------------------------
    @classmethod
    async def populate(
        cls,
        documents: Union[Optional["BaseFirestoreModel"], List[Optional["BaseFirestoreModel"]]],
        *directives: Populate,
    ):
        """
        Resolve reference fields on one document or a list of documents and
        return what was passed in.
        """
        batch = documents if isinstance(documents, list) else [documents]
        await populate(batch, *directives)
        return documents
