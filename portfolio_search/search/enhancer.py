"""Query enhancement with a generative text model."""

import logging
import re
import time
from typing import Awaitable, Callable, Dict, List, Union

from ..models.search_params import SearchDomain
from ..utils.logging import get_logger, log_with_context


logger = get_logger("QueryEnhancer")


# Takes a prompt, returns the model's completion text
TextCompletionFn = Callable[[str], Awaitable[str]]

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")

# Words the model appends regardless of instructions
GENERIC_TERMS = frozenset({"portfolio", "project", "projects", "image", "images"})

MAX_ADDED_TERMS: Dict[SearchDomain, int] = {
    SearchDomain.CREATORS: 1,
    SearchDomain.PROJECTS: 3,
    SearchDomain.IMAGES: 2,
    SearchDomain.MEDIA: 2,
}

SEARCH_PROMPTS: Dict[SearchDomain, str] = {
    SearchDomain.CREATORS: """Process this search query to enhance its relevance for searching creative professionals based on their style, expertise and work.
Rules:
1. KEEP ALL ORIGINAL QUERY TERMS intact
2. Add no more than 1 extra term, and only if it is highly relevant
3. Do not replace or remove any original terms
4. Fix any misspellings but preserve intentional slang/creative terms
5. Keep grammar natural, don't over-formalize
6. Return only the processed query: the original terms plus any addition (max 1)
7. Avoid generic terms like "projects, images, portfolio, website, photographers, artists, designers" unless explicitly relevant
8. Avoid names of specific apps, platforms, tools or people unless explicitly relevant
Original query: """,

    SearchDomain.PROJECTS: """Process this search query to enhance its relevance for searching creative projects.
Rules:
1. KEEP ALL ORIGINAL QUERY TERMS intact
2. Only add up to 3 highly relevant terms if necessary
3. Do not replace or remove any original terms
4. Fix any misspellings but preserve intentional slang/creative terms
5. Keep grammar natural, don't over-formalize
6. Return only the processed query: the original terms plus any additions (max 3)

Example:
"retro gaming pixel art" -> "retro gaming pixel art 8bit"
"minimalist packaging n branding" -> "minimalist packaging and branding clean"

Original query: """,

    SearchDomain.IMAGES: """Process this search query to enhance its relevance for searching images.
Rules:
1. KEEP ALL ORIGINAL QUERY TERMS intact
2. Only add up to 2 highly relevant visual terms if necessary
3. Do not replace or remove any original terms
4. Fix any misspellings but preserve intentional slang/creative terms
5. Keep grammar natural, don't over-formalize
6. Return only the processed query: the original terms plus any additions (max 2)

Original query: """,

    SearchDomain.MEDIA: """Process this search query to enhance its relevance for searching creative media.
Rules:
1. KEEP ALL ORIGINAL QUERY TERMS intact
2. Only add up to 2 highly relevant visual terms if necessary
3. Do not replace or remove any original terms
4. Fix any misspellings but preserve intentional slang/creative terms
5. Keep grammar natural, don't over-formalize
6. Return only the processed query: the original terms plus any additions (max 2)

Original query: """,
}


def clean_text(text: str) -> str:
    """Replace punctuation with spaces and collapse whitespace."""
    return _WHITESPACE.sub(" ", _PUNCTUATION.sub(" ", text)).strip()


def extract_terms(text: str) -> List[str]:
    """Lowercase, punctuation-free, whitespace-split terms of a text."""
    return clean_text(text.lower()).split()


def resolve_domain(domain: Union[SearchDomain, str, None]) -> SearchDomain:
    """Map a domain name to SearchDomain; unknown names mean creators."""
    if isinstance(domain, SearchDomain):
        return domain
    try:
        return SearchDomain(str(domain).lower())
    except ValueError:
        return SearchDomain.CREATORS


class QueryEnhancer:
    """
    Rewrites free-text queries into an embedding-friendly form.

    The rewrite is strictly additive: every term of the original query is
    kept, and at most a small, domain-specific number of new terms is
    added. If the model call fails the original query is returned as is.
    """

    def __init__(self, text_completion: TextCompletionFn):
        """
        Initialize Query Enhancer.

        Args:
            text_completion: Async function sending a prompt to a text model
        """
        self.text_completion = text_completion

    async def enhance(
        self,
        query: str,
        domain: Union[SearchDomain, str] = SearchDomain.CREATORS
    ) -> str:
        """
        Enhance a search query.

        Args:
            query: Query as typed by the user
            domain: What is being searched (creators, projects, images, media)

        Returns:
            Enhanced query containing every original term, or the original
            query unchanged if enhancement failed
        """
        if not query or not query.strip():
            return query

        search_domain = resolve_domain(domain)
        prompt = SEARCH_PROMPTS[search_domain] + f'"{query}"'

        start_time = time.time()
        try:
            completion = await self.text_completion(prompt)
            if not isinstance(completion, str):
                raise TypeError(
                    f"Expected text completion, got {type(completion).__name__}"
                )
        except Exception as e:
            logger.warning(
                "Query enhancement failed, falling back to original query",
                exc_info=True,
                extra={"context": {"query": query, "domain": search_domain.value, "error": str(e)}}
            )
            return query

        enhanced = self._post_process(query, completion, search_domain)

        log_with_context(
            logger,
            logging.INFO,
            "Query enhanced",
            context={
                "query": query,
                "enhanced_query": enhanced,
                "domain": search_domain.value
            },
            execution_time_ms=(time.time() - start_time) * 1000
        )
        return enhanced

    def _post_process(self, query: str, completion: str, domain: SearchDomain) -> str:
        """
        Clean the model output and enforce term preservation.

        Args:
            query: Original query
            completion: Raw model output
            domain: Search domain (selects the cap on new terms)

        Returns:
            Processed query
        """
        original_terms = extract_terms(query)
        original_set = set(original_terms)
        max_added = MAX_ADDED_TERMS[domain]

        kept_words: List[str] = []
        present: set = set()
        added: List[str] = []

        for word in clean_text(completion).split():
            terms = extract_terms(word)
            new_terms = [term for term in dict.fromkeys(terms) if term not in original_set]

            if new_terms:
                if all(term in GENERIC_TERMS for term in new_terms):
                    continue
                unseen = [term for term in new_terms if term not in added]
                if len(added) + len(unseen) > max_added:
                    continue
                added.extend(unseen)

            kept_words.append(word)
            present.update(terms)

        for term in original_terms:
            if term not in present:
                kept_words.append(term)
                present.add(term)

        return " ".join(kept_words)
