"""
Unit and property-based tests for EmbeddingGenerator.

Every embedding is exactly 768 finite values; empty input and upstream
failures yield None.
"""

import asyncio
import math

import pytest
from hypothesis import given, strategies as st, settings
from unittest.mock import AsyncMock, Mock

import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from portfolio_search.models.search_params import SearchDomain
from portfolio_search.search.embedding import (
    EMBEDDING_DIMENSIONS,
    EmbeddingGenerator,
    normalize_vector,
    sanitize_value,
)
from portfolio_search.search.enhancer import QueryEnhancer


def _passthrough_enhancer() -> Mock:
    enhancer = Mock(spec=QueryEnhancer)
    enhancer.enhance = AsyncMock(side_effect=lambda text, domain: text)
    return enhancer


def _generator(embedding_fn, enhancer=None) -> EmbeddingGenerator:
    return EmbeddingGenerator(embedding_fn, enhancer or _passthrough_enhancer())


raw_components = st.one_of(
    st.floats(allow_nan=True, allow_infinity=True),
    st.integers(min_value=-10**400, max_value=10**400),
    st.booleans(),
    st.none(),
    st.text(max_size=3),
)


@given(raw=st.lists(raw_components, max_size=1200))
@settings(max_examples=150, deadline=None)
def test_embedding_is_always_768_finite_values(raw):
    """Any raw vector comes out as exactly 768 finite floats."""
    generator = _generator(AsyncMock(return_value=raw))

    result = asyncio.run(generator.embed("bold branding"))

    assert result is not None
    assert len(result.values) == EMBEDDING_DIMENSIONS
    assert all(isinstance(v, float) and math.isfinite(v) for v in result.values)


@given(raw=st.lists(st.floats(min_value=-1.0, max_value=1.0), max_size=1000))
@settings(max_examples=100, deadline=None)
def test_valid_components_are_kept_in_place(raw):
    """Finite components keep their value and position."""
    values = normalize_vector(raw)

    kept = raw[:EMBEDDING_DIMENSIONS]
    assert values[:len(kept)] == kept
    assert all(v == 0.0 for v in values[len(kept):])


class TestSanitizeValue:
    """Test component sanitization."""

    @pytest.mark.parametrize("value,expected", [
        (0.5, 0.5),
        (-2, -2.0),
        (float("nan"), 0.0),
        (float("inf"), 0.0),
        (float("-inf"), 0.0),
        (True, 0.0),
        (None, 0.0),
        ("0.3", 0.0),
        (10**400, 0.0),
    ])
    def test_sanitize(self, value, expected):
        assert sanitize_value(value) == expected

    def test_mapping_values_are_used_in_order(self):
        values = normalize_vector({"0": 0.1, "1": 0.2, "2": float("nan")}, dimensions=4)

        assert values == [0.1, 0.2, 0.0, 0.0]

    def test_long_vector_is_truncated(self):
        assert normalize_vector([1.0] * 1024) == [1.0] * EMBEDDING_DIMENSIONS

    @pytest.mark.parametrize("raw", ["0.1,0.2", b"\x00\x01"])
    def test_text_is_not_a_vector(self, raw):
        with pytest.raises(ValueError):
            normalize_vector(raw)


class TestEmbeddingGenerator:
    """Test the embed flow."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", None])
    async def test_empty_text_returns_none_without_calls(self, text):
        embedding_fn = AsyncMock(return_value=[0.1])
        enhancer = _passthrough_enhancer()
        generator = _generator(embedding_fn, enhancer)

        assert await generator.embed(text) is None
        embedding_fn.assert_not_awaited()
        enhancer.enhance.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_enhanced_text_is_embedded_and_returned(self):
        embedding_fn = AsyncMock(return_value=[0.1, 0.2])
        enhancer = Mock(spec=QueryEnhancer)
        enhancer.enhance = AsyncMock(return_value="retro gaming pixel art 8bit")
        generator = _generator(embedding_fn, enhancer)

        result = await generator.embed("retro gaming pixel art", SearchDomain.PROJECTS)

        enhancer.enhance.assert_awaited_once_with("retro gaming pixel art", SearchDomain.PROJECTS)
        embedding_fn.assert_awaited_once_with("retro gaming pixel art 8bit")
        assert result.processed_text == "retro gaming pixel art 8bit"
        assert result.values[:2] == [0.1, 0.2]
        assert len(result.values) == EMBEDDING_DIMENSIONS

    @pytest.mark.asyncio
    async def test_embedding_failure_returns_none(self):
        generator = _generator(AsyncMock(side_effect=RuntimeError("Embedding failed: ThrottlingException")))

        assert await generator.embed("bold branding") is None

    @pytest.mark.asyncio
    async def test_missing_vector_returns_none(self):
        generator = _generator(AsyncMock(return_value=None))

        assert await generator.embed("bold branding") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", ["[0.1, 0.2, 0.3]", b"\x00\x01\x02"])
    async def test_text_response_returns_none(self, raw):
        generator = _generator(AsyncMock(return_value=raw))

        assert await generator.embed("bold branding") is None

    @pytest.mark.asyncio
    async def test_enhancement_failure_still_embeds_original(self):
        embedding_fn = AsyncMock(return_value=[0.5])
        enhancer = QueryEnhancer(AsyncMock(side_effect=RuntimeError("down")))
        generator = EmbeddingGenerator(embedding_fn, enhancer)

        result = await generator.embed("Bold Branding")

        embedding_fn.assert_awaited_once_with("Bold Branding")
        assert result.processed_text == "Bold Branding"
