"""Bedrock-backed text completion and embedding functions.

Both classes are async callables matching the ``TextCompletionFn`` and
``EmbeddingFn`` signatures the search core expects. A failed call raises
RuntimeError and is not retried.
"""

import asyncio
import json
import logging
import time
from typing import List

from botocore.exceptions import BotoCoreError, ClientError

from ..utils.logging import get_logger, log_with_context
from .client_manager import AWSClientManager


logger = get_logger("Bedrock")


def _client_error_details(error: ClientError) -> tuple:
    code = error.response.get("Error", {}).get("Code", "Unknown")
    message = error.response.get("Error", {}).get("Message", str(error))
    return code, message


class BedrockTextCompletion:
    """Sends a single-turn prompt through the Bedrock Converse API."""

    def __init__(
        self,
        aws_client: AWSClientManager,
        model_id: str,
        max_tokens: int = 256,
        temperature: float = 0.2
    ):
        """
        Initialize the text completion function.

        Args:
            aws_client: AWS Client Manager instance
            model_id: Bedrock model id or inference profile id
            max_tokens: Completion length limit
            temperature: Sampling temperature
        """
        self.aws_client = aws_client
        self.model_id = model_id
        self.max_tokens = max_tokens
        self.temperature = temperature

    def _converse(self, prompt: str) -> str:
        client = self.aws_client.get_bedrock_runtime_client()
        response = client.converse(
            modelId=self.model_id,
            messages=[{"role": "user", "content": [{"text": prompt}]}],
            inferenceConfig={
                "maxTokens": self.max_tokens,
                "temperature": self.temperature
            }
        )
        content = response.get("output", {}).get("message", {}).get("content", [])
        texts = [block["text"] for block in content if "text" in block]
        if not texts:
            raise ValueError("Converse response contains no text")
        return "".join(texts)

    async def __call__(self, prompt: str) -> str:
        """
        Complete a prompt.

        Raises:
            RuntimeError: If the Bedrock call fails or returns no text
        """
        start_time = time.time()
        try:
            text = await asyncio.to_thread(self._converse, prompt)
        except ClientError as e:
            error_code, error_message = _client_error_details(e)
            log_with_context(
                logger,
                logging.ERROR,
                "Bedrock Converse API error",
                context={"model_id": self.model_id, "error_message": error_message},
                error_code=error_code
            )
            raise RuntimeError(
                f"Text completion failed: {error_code} - {error_message}"
            ) from e
        except (BotoCoreError, ValueError, KeyError) as e:
            logger.error(
                "Text completion failed",
                exc_info=True,
                extra={"context": {"model_id": self.model_id, "error": str(e)}}
            )
            raise RuntimeError(f"Text completion failed: {str(e)}") from e

        log_with_context(
            logger,
            logging.DEBUG,
            "Text completion received",
            context={"model_id": self.model_id, "length": len(text)},
            execution_time_ms=(time.time() - start_time) * 1000
        )
        return text


class BedrockEmbedding:
    """Embeds text with a Titan text embedding model via InvokeModel."""

    def __init__(
        self,
        aws_client: AWSClientManager,
        model_id: str,
        dimensions: int = 512
    ):
        """
        Initialize the embedding function.

        Args:
            aws_client: AWS Client Manager instance
            model_id: Bedrock embedding model id
            dimensions: Vector size requested from the model
        """
        self.aws_client = aws_client
        self.model_id = model_id
        self.dimensions = dimensions

    def _invoke(self, text: str) -> List[float]:
        client = self.aws_client.get_bedrock_runtime_client()
        response = client.invoke_model(
            modelId=self.model_id,
            body=json.dumps({
                "inputText": text,
                "dimensions": self.dimensions,
                "normalize": True
            }),
            contentType="application/json",
            accept="application/json"
        )
        payload = json.loads(response["body"].read())
        embedding = payload.get("embedding")
        if not isinstance(embedding, list):
            raise ValueError("InvokeModel response contains no embedding")
        return embedding

    async def __call__(self, text: str) -> List[float]:
        """
        Embed a text.

        Raises:
            RuntimeError: If the Bedrock call fails or returns no embedding
        """
        start_time = time.time()
        try:
            embedding = await asyncio.to_thread(self._invoke, text)
        except ClientError as e:
            error_code, error_message = _client_error_details(e)
            log_with_context(
                logger,
                logging.ERROR,
                "Bedrock InvokeModel API error",
                context={"model_id": self.model_id, "error_message": error_message},
                error_code=error_code
            )
            raise RuntimeError(
                f"Embedding failed: {error_code} - {error_message}"
            ) from e
        except (BotoCoreError, ValueError, KeyError) as e:
            logger.error(
                "Embedding failed",
                exc_info=True,
                extra={"context": {"model_id": self.model_id, "error": str(e)}}
            )
            raise RuntimeError(f"Embedding failed: {str(e)}") from e

        log_with_context(
            logger,
            logging.DEBUG,
            "Embedding received",
            context={"model_id": self.model_id, "dimensions": len(embedding)},
            execution_time_ms=(time.time() - start_time) * 1000
        )
        return embedding
