"""
Reference population for Firestore documents.

Documents store references to other documents as plain document ids. A
:class:`Populate` directive names a reference field and the model it points
to; :func:`populate` replaces the ids held in that field with the referenced
documents. Directives nest, so a thread can have its replies populated and
the replies' authors populated in turn::

    await populate(
        threads,
        Populate("author", User),
        Populate(
            "children",
            Thread,
            populate=[Populate("author", User, select=["name", "image"])],
        ),
    )

Every directive costs one batched read, whatever the number of documents.
"""
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Sequence, Type

if TYPE_CHECKING:
    from .firestore_model import BaseFirestoreModel

logger = logging.getLogger(__name__)


@dataclass
class Populate:
    """
    A single population directive.

    path :
        Name of the reference field on the documents being populated. It may
        hold one id or a list of ids.
    model :
        Document model the ids point to.
    select :
        Optional field names to fetch from the referenced documents. Populated
        documents are then partial; ``id`` is always present.
    populate :
        Directives applied to the populated documents.
    """

    path: str
    model: Type["BaseFirestoreModel"]
    select: Optional[Sequence[str]] = None
    populate: Sequence["Populate"] = field(default_factory=tuple)

    def fetched_fields(self) -> Optional[List[str]]:
        """Fields to read, widened with the paths nested directives need."""
        if self.select is None:
            return None
        names = [name for name in self.select if name != "id"]
        for nested in self.populate:
            if nested.path not in names:
                names.append(nested.path)
        return names


def _reference_id(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    # Already populated.
    return getattr(value, "id", None)


def _collect_ids(documents: Iterable["BaseFirestoreModel"], path: str) -> List[str]:
    ids: Dict[str, None] = {}
    for document in documents:
        value = document.__dict__.get(path)
        values = value if isinstance(value, list) else [value]
        for item in values:
            ref_id = _reference_id(item)
            if ref_id:
                ids[ref_id] = None
    return list(ids)


def _assign(document: "BaseFirestoreModel", path: str, fetched: Dict[str, Any]) -> None:
    value = document.__dict__.get(path)
    if isinstance(value, list):
        # Dangling ids in a list are dropped.
        resolved = [fetched[ref_id] for ref_id in map(_reference_id, value) if ref_id in fetched]
    else:
        # A dangling single reference becomes None.
        resolved = fetched.get(_reference_id(value))
    document.__dict__[path] = resolved


async def populate(
    documents: Sequence[Optional["BaseFirestoreModel"]],
    *directives: Populate,
) -> None:
    """
    Resolve reference fields of ``documents`` in place.

    ``None`` entries are skipped so the result of a lookup can be passed
    straight through.
    """
    present = [document for document in documents if document is not None]
    if not present:
        return

    for directive in directives:
        ids = _collect_ids(present, directive.path)
        fetched = await directive.model.get_many(ids, select=directive.fetched_fields()) if ids else {}
        logger.debug(
            "Populate %s -> %s: %d ids, %d found",
            directive.path,
            directive.model.get_collection_name(),
            len(ids),
            len(fetched),
        )
        if directive.populate and fetched:
            await populate(list(fetched.values()), *directive.populate)
        for document in present:
            _assign(document, directive.path, fetched)
