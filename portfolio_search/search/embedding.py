"""Embedding generation for search queries."""

import logging
import math
import numbers
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, List, Mapping, Optional, Union

from ..models.search_params import SearchDomain
from ..utils.logging import get_logger, log_with_context
from .enhancer import QueryEnhancer


logger = get_logger("EmbeddingGenerator")


EMBEDDING_DIMENSIONS = 768

# Takes a text, returns its raw embedding vector
EmbeddingFn = Callable[[str], Awaitable[Iterable[Any]]]


@dataclass
class EmbeddingResponse:
    """A fixed-size query embedding and the text it was computed from."""

    values: List[float]
    processed_text: str

    def to_dict(self):
        return {"values": self.values, "processed_text": self.processed_text}


def sanitize_value(value: Any) -> float:
    """Return value as a float if it is a finite real number, else 0.0."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return 0.0
    try:
        number = float(value)
    except OverflowError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def normalize_vector(raw: Union[Iterable[Any], Mapping[Any, Any]], dimensions: int = EMBEDDING_DIMENSIONS) -> List[float]:
    """
    Sanitize a raw vector and fit it to exactly ``dimensions`` elements.

    Non-finite and non-numeric components become 0.0; short vectors are
    zero-padded and long ones truncated.

    Raises:
        ValueError: If raw is a string or bytes
    """
    if isinstance(raw, (str, bytes)):
        raise ValueError("Embedding must be a sequence of numbers, not text")
    if isinstance(raw, Mapping):
        raw = raw.values()
    values = [sanitize_value(value) for value in raw][:dimensions]
    values.extend([0.0] * (dimensions - len(values)))
    return values


class EmbeddingGenerator:
    """
    Turns query text into a fixed-length embedding.

    The text goes through the QueryEnhancer first; the enhanced text is
    what gets embedded and is returned alongside the vector.
    """

    def __init__(
        self,
        embedding_fn: EmbeddingFn,
        enhancer: QueryEnhancer,
        dimensions: int = EMBEDDING_DIMENSIONS
    ):
        """
        Initialize Embedding Generator.

        Args:
            embedding_fn: Async function returning a raw vector for a text
            enhancer: Query enhancer applied before embedding
            dimensions: Exact length of every returned vector
        """
        self.embedding_fn = embedding_fn
        self.enhancer = enhancer
        self.dimensions = dimensions

    async def embed(
        self,
        text: Optional[str],
        domain: Union[SearchDomain, str] = SearchDomain.CREATORS
    ) -> Optional[EmbeddingResponse]:
        """
        Generate the embedding of a search query.

        Args:
            text: Query text
            domain: Search domain passed to the enhancer

        Returns:
            EmbeddingResponse, or None for empty text or if the embedding
            call failed
        """
        if not text:
            return None

        processed_text = await self.enhancer.enhance(text, domain)

        start_time = time.time()
        try:
            raw = await self.embedding_fn(processed_text)
            if raw is None:
                raise ValueError("Embedding function returned no vector")
            values = normalize_vector(raw, self.dimensions)
        except Exception as e:
            logger.error(
                "Embedding generation failed",
                exc_info=True,
                extra={"context": {"text": processed_text, "error": str(e)}}
            )
            return None

        log_with_context(
            logger,
            logging.INFO,
            "Embedding generated",
            context={"processed_text": processed_text, "dimensions": len(values)},
            execution_time_ms=(time.time() - start_time) * 1000
        )
        return EmbeddingResponse(values=values, processed_text=processed_text)
