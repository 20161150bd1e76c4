"""Refinement questions that help users sharpen a vague query."""

import json
import logging
import re
import time
from typing import Any, List

from ..models.search_result import RefinementQuestion, SearchEnhancement
from ..utils.logging import get_logger, log_with_context
from .enhancer import TextCompletionFn


logger = get_logger("RefinementSuggester")


_CODE_FENCE = re.compile(r"```(?:json)?\s*|\s*```")

REFINEMENT_PROMPT = """You are an expert creative industry search assistant. Help improve this initial search query to find the perfect creators.

Initial query: "{query}"

Step 1: Identify what's missing from this query that would help find better matches. Consider:
- Specific style details (e.g., "minimalist" vs just "design")
- Technical specifications (e.g., "natural lighting portrait photography" vs just "photography")
- Industry verticals (e.g., "luxury fashion" vs just "fashion")
- Tone/mood (e.g., "bold, vibrant branding" vs just "branding")
- Visual elements (e.g., "flat illustration with geometric shapes" vs just "illustration")
- Do not suggest a creative role like photographer or illustrator, the user has already selected one

Step 2: Generate 3 thoughtful questions that would help the user refine their search.

Step 3: Suggest very brief phrases or short terms as answers to the previous questions.

Format your response as a JSON array with the following structure:
  [
    {{"question": "First question to help refine search", "options": ["option1", "option2", "option3"]}},
    {{"question": "Second question to help refine search", "options": ["option1", "option2", "option3"]}},
    {{"question": "Third question to help refine search", "options": ["option1", "option2", "option3"]}}
  ]

Only return valid JSON without any additional text.
"""


def parse_refinements(text: str) -> List[RefinementQuestion]:
    """
    Parse the model's JSON answer into refinement questions.

    Markdown code fences are stripped first. Items without a question are
    dropped and non-string options ignored.

    Raises:
        ValueError: If the text is not a JSON array
    """
    cleaned = _CODE_FENCE.sub("", text).strip()
    start, end = cleaned.find("["), cleaned.rfind("]")
    if start != -1 and end > start:
        cleaned = cleaned[start:end + 1]

    parsed: Any = json.loads(cleaned)
    if not isinstance(parsed, list):
        raise ValueError("Response is not an array")

    questions = []
    for item in parsed:
        if not isinstance(item, dict):
            continue
        question = item.get("question")
        if not isinstance(question, str) or not question.strip():
            continue
        options = item.get("options")
        if not isinstance(options, list):
            options = []
        questions.append(RefinementQuestion(
            question=question.strip(),
            options=[option.strip() for option in options if isinstance(option, str) and option.strip()]
        ))
    return questions


class RefinementSuggester:
    """Asks a text model for questions that would narrow down a query."""

    def __init__(self, text_completion: TextCompletionFn):
        self.text_completion = text_completion

    async def suggest(self, query: str) -> SearchEnhancement:
        """
        Generate refinement questions for a query.

        Args:
            query: Search query as typed by the user

        Returns:
            SearchEnhancement with the generated questions

        Raises:
            ValueError: If the query is empty
            RuntimeError: If the model call fails or its answer cannot be parsed
        """
        if not query or not query.strip():
            raise ValueError("Search query is required")

        start_time = time.time()
        try:
            completion = await self.text_completion(REFINEMENT_PROMPT.format(query=query))
        except Exception as e:
            logger.error(
                "Refinement generation failed",
                exc_info=True,
                extra={"context": {"query": query, "error": str(e)}}
            )
            raise RuntimeError(f"Could not generate search suggestions: {str(e)}") from e

        try:
            questions = parse_refinements(completion if isinstance(completion, str) else "")
        except ValueError as e:
            log_with_context(
                logger,
                logging.ERROR,
                "Failed to parse refinement response",
                context={"query": query, "response": str(completion)[:500]}
            )
            raise RuntimeError("Could not parse search suggestions") from e

        log_with_context(
            logger,
            logging.INFO,
            "Refinement questions generated",
            context={"query": query, "question_count": len(questions)},
            execution_time_ms=(time.time() - start_time) * 1000
        )
        return SearchEnhancement(original_query=query, enhancement=questions)
