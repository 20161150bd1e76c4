"""Configuration management for the Portfolio Search MCP Server."""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class ServerConfig:
    """Configuration for the Portfolio Search MCP Server."""

    aws_profile: Optional[str] = None  # None uses the default credential chain
    aws_region: str = "us-east-1"
    text_model_id: str = "amazon.nova-lite-v1:0"
    embedding_model_id: str = "amazon.titan-embed-text-v2:0"
    embedding_request_dimensions: int = 512  # padded to 768 by the generator
    supabase_url: str = ""
    supabase_key: str = ""
    match_threshold: float = 0.1
    http_timeout_seconds: float = 10.0

    def validate(self) -> None:
        """
        Validate required configuration fields.

        Raises:
            ValueError: If required fields are missing or invalid
        """
        if not self.aws_region:
            raise ValueError("aws_region is required")

        if not self.text_model_id:
            raise ValueError("text_model_id is required")

        if not self.embedding_model_id:
            raise ValueError("embedding_model_id is required")

        if self.embedding_request_dimensions <= 0:
            raise ValueError("embedding_request_dimensions must be positive")

        if not self.supabase_url:
            raise ValueError("supabase_url is required")

        if not self.supabase_key:
            raise ValueError("supabase_key is required")

        if not 0.0 <= self.match_threshold <= 1.0:
            raise ValueError("match_threshold must be between 0 and 1")

        if self.http_timeout_seconds <= 0:
            raise ValueError("http_timeout_seconds must be positive")

    @classmethod
    def from_environment(cls) -> "ServerConfig":
        """Load configuration from environment variables."""
        config = cls(
            aws_profile=os.getenv("AWS_PROFILE") or None,
            aws_region=os.getenv("AWS_REGION", "us-east-1"),
            text_model_id=os.getenv("BEDROCK_TEXT_MODEL_ID", "amazon.nova-lite-v1:0"),
            embedding_model_id=os.getenv(
                "BEDROCK_EMBEDDING_MODEL_ID",
                "amazon.titan-embed-text-v2:0"
            ),
            embedding_request_dimensions=int(os.getenv("BEDROCK_EMBEDDING_DIMENSIONS", "512")),
            supabase_url=os.getenv("SUPABASE_URL", "").rstrip("/"),
            supabase_key=os.getenv("SUPABASE_KEY", ""),
            match_threshold=float(os.getenv("MATCH_THRESHOLD", "0.1")),
            http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))
        )
        config.validate()
        return config
