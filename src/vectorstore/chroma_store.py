"""ChromaDB vector index for document chunk embeddings."""

import logging
import re
from typing import Any

import chromadb
from chromadb.config import Settings as ChromaSettings

from src.errors import CollaboratorError, InvalidInputError
from src.models.search import IndexMatch, IndexRecord, IndexStats
from src.vectorstore.index import DEFAULT_UPSERT_BATCH_SIZE, VectorIndex

logger = logging.getLogger(__name__)

DEFAULT_INDEX_NAME = "vector-embedding-rag"

_INVALID_NAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]+")
_VALID_NAMESPACE = re.compile(r"[a-zA-Z0-9](?:[a-zA-Z0-9._-]*[a-zA-Z0-9])?")

MAX_COLLECTION_NAME_LENGTH = 63


def collection_prefix(index_name: str) -> str:
    """Collection-name prefix shared by every namespace of an index."""
    prefix = _INVALID_NAME_CHARS.sub("-", index_name).strip("._-")
    if not prefix:
        raise InvalidInputError(f"index name {index_name!r} has no letters or digits")
    return prefix


def collection_name(index_name: str, namespace: str) -> str:
    """Chroma collection backing a namespace of the index.

    Chroma names must be 3-63 characters of [a-zA-Z0-9._-] starting and
    ending with an alphanumeric character. Namespaces are used verbatim and
    one Chroma cannot store as-is raises InvalidInputError.
    """
    if not _VALID_NAMESPACE.fullmatch(namespace) or ".." in namespace:
        raise InvalidInputError(
            f"namespace {namespace!r} must be letters, digits, '.', '_' or '-' "
            "and start and end with a letter or digit"
        )
    name = f"{collection_prefix(index_name)}-{namespace}"
    if len(name) > MAX_COLLECTION_NAME_LENGTH:
        raise InvalidInputError(
            f"namespace {namespace!r} is too long for index {index_name!r} "
            f"(collection names are limited to {MAX_COLLECTION_NAME_LENGTH} characters)"
        )
    return name


def _clean_metadata(metadata: dict[str, Any]) -> dict[str, Any]:
    """Chroma only stores str, int, float and bool metadata values."""
    cleaned = {}
    for key, value in metadata.items():
        if value is None:
            continue
        if isinstance(value, (str, int, float, bool)):
            cleaned[key] = value
        else:
            cleaned[key] = str(value)
    return cleaned


def _build_where(where: dict[str, Any]) -> dict[str, Any]:
    """Combine plain multi-key equality filters with $and."""
    if len(where) <= 1 or any(key.startswith("$") for key in where):
        return where
    return {"$and": [{key: value} for key, value in where.items()]}


class ChromaVectorIndex(VectorIndex):
    """ChromaDB-backed vector index.

    Each namespace is a separate collection using cosine distance. Scores
    are reported as cosine similarity (1 - distance).
    """

    def __init__(
        self,
        path: str = "./data/chroma",
        host: str | None = None,
        port: int = 8000,
        index_name: str = DEFAULT_INDEX_NAME,
        batch_size: int = DEFAULT_UPSERT_BATCH_SIZE,
    ):
        collection_prefix(index_name)
        chroma_settings = ChromaSettings(anonymized_telemetry=False)
        if host:
            self._client = chromadb.HttpClient(host=host, port=port, settings=chroma_settings)
        elif path == ":memory:":
            self._client = chromadb.Client(settings=chroma_settings)
        else:
            self._client = chromadb.PersistentClient(path=path, settings=chroma_settings)
        self.index_name = index_name
        self.batch_size = max(1, batch_size)

    def upsert(self, namespace: str, records: list[IndexRecord]) -> bool:
        if not records:
            return True

        try:
            collection = self._collection(namespace, create=True)
            total_batches = (len(records) + self.batch_size - 1) // self.batch_size
            logger.info(
                "Storing %d vectors in namespace %r (%d batches)",
                len(records), namespace, total_batches,
            )
            for batch_number, start in enumerate(range(0, len(records), self.batch_size), start=1):
                batch = records[start:start + self.batch_size]
                collection.upsert(
                    ids=[r.id for r in batch],
                    embeddings=[list(r.vector) for r in batch],
                    documents=[str(r.metadata.get("content", "")) for r in batch],
                    metadatas=[_clean_metadata(r.metadata) for r in batch],
                )
                logger.info("  Uploaded batch %d/%d", batch_number, total_batches)
        except InvalidInputError:
            raise
        except Exception as e:
            logger.error("Failed to store vectors in namespace %r: %s", namespace, e)
            return False
        return True

    def query(
        self,
        namespace: str,
        vector: list[float],
        top_k: int = 5,
        where: dict[str, Any] | None = None,
    ) -> list[IndexMatch]:
        try:
            collection = self._collection(namespace)
            if collection is None:
                return []
            count = collection.count()
            if count == 0 or top_k <= 0:
                return []

            kwargs: dict[str, Any] = {
                "query_embeddings": [list(vector)],
                "n_results": min(top_k, count),
                "include": ["documents", "metadatas", "distances"],
            }
            if where:
                kwargs["where"] = _build_where(where)
            results = collection.query(**kwargs)
        except InvalidInputError:
            raise
        except Exception as e:
            raise CollaboratorError(f"Vector query failed in namespace {namespace!r}: {e}") from e

        matches = []
        if results["ids"] and results["ids"][0]:
            documents = results["documents"][0] if results.get("documents") else None
            metadatas = results["metadatas"][0] if results.get("metadatas") else None
            distances = results["distances"][0] if results.get("distances") else None
            for i, match_id in enumerate(results["ids"][0]):
                metadata = dict(metadatas[i] or {}) if metadatas else {}
                if documents and "content" not in metadata:
                    metadata["content"] = documents[i] or ""
                distance = distances[i] if distances else 1.0
                matches.append(IndexMatch(id=match_id, score=1.0 - float(distance), metadata=metadata))

        matches.sort(key=lambda m: m.score, reverse=True)
        return matches

    def delete_by_metadata(self, namespace: str, key: str, value: Any) -> bool:
        try:
            collection = self._collection(namespace)
            if collection is not None:
                collection.delete(where={key: value})
        except InvalidInputError:
            raise
        except Exception as e:
            logger.error("Failed to delete %s=%r from namespace %r: %s", key, value, namespace, e)
            return False
        logger.info("Deleted vectors with %s=%r from namespace %r", key, value, namespace)
        return True

    def clear_namespace(self, namespace: str) -> bool:
        logger.warning("Clearing all vectors from namespace %r", namespace)
        try:
            if self._collection(namespace) is not None:
                self._client.delete_collection(collection_name(self.index_name, namespace))
        except InvalidInputError:
            raise
        except Exception as e:
            logger.error("Failed to clear namespace %r: %s", namespace, e)
            return False
        return True

    def stats(self, namespace: str | None = None) -> IndexStats | None:
        try:
            if namespace is not None:
                collection = self._collection(namespace)
                collections = {namespace: collection} if collection is not None else {}
            else:
                collections = self._namespace_collections()

            namespaces = {}
            dimension = None
            for name, collection in collections.items():
                namespaces[name] = collection.count()
                if dimension is None and namespaces[name] > 0:
                    dimension = self._dimension(collection)
        except Exception as e:
            logger.error("Failed to get index stats: %s", e)
            return None

        return IndexStats(
            vector_count=sum(namespaces.values()),
            dimension=dimension,
            namespaces=namespaces,
        )

    def health_check(self) -> bool:
        try:
            return bool(self._client.heartbeat())
        except Exception as e:
            logger.error("Chroma heartbeat failed: %s", e)
            return False

    def _collection(self, namespace: str, create: bool = False):
        name = collection_name(self.index_name, namespace)
        if create:
            return self._client.get_or_create_collection(
                name=name,
                metadata={"hnsw:space": "cosine"},
            )
        if name not in self._collection_names():
            return None
        return self._client.get_collection(name=name)

    def _collection_names(self) -> list[str]:
        # Older clients return Collection objects, newer ones return names
        return [getattr(c, "name", c) for c in self._client.list_collections()]

    def _namespace_collections(self) -> dict[str, Any]:
        prefix = collection_prefix(self.index_name) + "-"
        collections = {}
        for name in self._collection_names():
            if name.startswith(prefix):
                collections[name[len(prefix):]] = self._client.get_collection(name=name)
        return collections

    @staticmethod
    def _dimension(collection) -> int | None:
        sample = collection.get(limit=1, include=["embeddings"])
        embeddings = sample.get("embeddings")
        if embeddings is None or len(embeddings) == 0:
            return None
        return len(embeddings[0])
