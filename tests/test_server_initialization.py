"""
Unit tests for server initialization.

Tests successful initialization, configuration validation, and error handling.
"""

import json

import pytest
from unittest.mock import AsyncMock, Mock, patch
import sys
import os

# Add parent directory to path to import the server module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from portfolio_search import server
from portfolio_search.server import initialize_server, set_components
from portfolio_search.config import ServerConfig
from portfolio_search.aws.bedrock import BedrockEmbedding, BedrockTextCompletion
from portfolio_search.aws.client_manager import AWSClientManager
from portfolio_search.search.content_source import SupabaseContentSource
from portfolio_search.search.refinement import RefinementSuggester
from portfolio_search.search.service import CreatorSearchService


def _mock_config():
    return ServerConfig(
        aws_profile="portfolio",
        aws_region="eu-west-1",
        embedding_request_dimensions=256,
        supabase_url="https://demo.supabase.co",
        supabase_key="secret-key",
        match_threshold=0.2,
        http_timeout_seconds=5.0
    )


class TestServerInitialization:
    """Test server initialization with valid configuration."""

    @patch('portfolio_search.server.ServerConfig.from_environment')
    @patch('portfolio_search.server.AWSClientManager')
    @patch('portfolio_search.server.SupabaseContentSource')
    def test_successful_initialization(
        self,
        mock_source_class,
        mock_aws_class,
        mock_config_class
    ):
        """Test successful initialization wires every component."""
        mock_config = _mock_config()
        mock_config_class.return_value = mock_config

        mock_aws_client = Mock(spec=AWSClientManager)
        mock_aws_client.verify_credentials.return_value = True
        mock_aws_class.return_value = mock_aws_client

        mock_source = Mock(spec=SupabaseContentSource)
        mock_source_class.return_value = mock_source

        config, content_source, search_service, suggester = initialize_server()

        assert config == mock_config
        assert content_source == mock_source
        assert isinstance(search_service, CreatorSearchService)
        assert isinstance(suggester, RefinementSuggester)

        mock_aws_class.assert_called_once_with("portfolio", "eu-west-1")
        mock_aws_client.verify_credentials.assert_called_once()
        mock_source_class.assert_called_once_with(
            "https://demo.supabase.co",
            "secret-key",
            match_threshold=0.2,
            timeout=5.0
        )

        assert search_service.content_source is mock_source
        embedding_fn = search_service.embedding_generator.embedding_fn
        assert isinstance(embedding_fn, BedrockEmbedding)
        assert embedding_fn.dimensions == 256
        assert isinstance(suggester.text_completion, BedrockTextCompletion)
        assert search_service.embedding_generator.enhancer.text_completion is suggester.text_completion


class TestServerInitializationFailures:
    """Test server initialization failure scenarios."""

    @patch('portfolio_search.server.ServerConfig.from_environment')
    def test_initialization_fails_with_invalid_config(self, mock_config_class):
        """Test initialization fails gracefully with invalid configuration."""
        mock_config_class.side_effect = ValueError("supabase_url is required")

        with pytest.raises(SystemExit) as exc_info:
            initialize_server()

        assert exc_info.value.code == 1

    @patch('portfolio_search.server.ServerConfig.from_environment')
    @patch('portfolio_search.server.AWSClientManager')
    def test_initialization_fails_with_invalid_credentials(
        self,
        mock_aws_class,
        mock_config_class
    ):
        """Test initialization fails gracefully with invalid AWS credentials."""
        mock_config_class.return_value = _mock_config()

        mock_aws_client = Mock(spec=AWSClientManager)
        mock_aws_client.verify_credentials.side_effect = RuntimeError("Invalid credentials")
        mock_aws_class.return_value = mock_aws_client

        with pytest.raises(SystemExit) as exc_info:
            initialize_server()

        assert exc_info.value.code == 1


class TestToolRegistration:
    """Test that the tools reach the components set on the server."""

    def test_server_instance(self):
        assert server.get_server() is server.mcp
        assert hasattr(server.mcp, 'tool')

    @pytest.mark.asyncio
    async def test_tools_use_components(self):
        mock_source = Mock(spec=SupabaseContentSource)
        mock_source.popular_searches = AsyncMock(return_value=[])
        mock_service = Mock(spec=CreatorSearchService)
        mock_service.search = AsyncMock(return_value={"status": "success", "data": {"results": []}})

        set_components(_mock_config(), mock_source, mock_service, Mock(spec=RefinementSuggester))
        try:
            result = json.loads(await server.get_popular_searches_impl(server._content_source, 5))
            assert result["status"] == "success"
            search = json.loads(await server.search_creators_impl("branding", server._search_service))
            assert search["status"] == "success"
        finally:
            set_components(None, None, None, None)

    @pytest.mark.asyncio
    async def test_tools_before_initialization(self):
        set_components(None, None, None, None)

        result = json.loads(await server.search_creators_impl("branding", server._search_service))

        assert result["error_type"] == "ConfigurationError"
