"""
Unit tests for AWSClientManager class.

Tests session creation, Bedrock runtime client creation, and credential
verification.
"""

import pytest
from unittest.mock import Mock, patch
from botocore.exceptions import ClientError, NoCredentialsError, ProfileNotFound

import sys
import os

# Add parent directory to path to import the server module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from portfolio_search.aws.client_manager import AWSClientManager


def _sts_error(code: str, message: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, "GetCallerIdentity")


class TestAWSClientManagerInitialization:
    """Test AWS Client Manager initialization and session creation."""

    def test_initialization_with_profile(self):
        """Test initialization with a named AWS profile."""
        with patch('boto3.Session') as mock_session:
            manager = AWSClientManager(profile="portfolio", region="us-east-1")

            assert manager.profile == "portfolio"
            assert manager.region == "us-east-1"
            mock_session.assert_called_once_with(
                profile_name="portfolio",
                region_name="us-east-1"
            )

    def test_initialization_without_profile(self):
        """Test initialization without profile uses the default credential chain."""
        with patch('boto3.Session') as mock_session:
            manager = AWSClientManager(profile=None, region="eu-west-1")

            assert manager.profile is None
            mock_session.assert_called_once_with(region_name="eu-west-1")

    def test_initialization_with_invalid_profile(self):
        """Test a missing profile is reported as ValueError."""
        with patch('boto3.Session', side_effect=ProfileNotFound(profile="missing")):
            with pytest.raises(ValueError) as exc_info:
                AWSClientManager(profile="missing", region="us-east-1")

            assert "AWS profile 'missing' not found" in str(exc_info.value)

    def test_initialization_with_session_error(self):
        """Test unexpected session errors are wrapped in RuntimeError."""
        with patch('boto3.Session', side_effect=Exception("boom")):
            with pytest.raises(RuntimeError) as exc_info:
                AWSClientManager(profile="portfolio", region="us-east-1")

            assert "Failed to initialize AWS session" in str(exc_info.value)


class TestBedrockRuntimeClientCreation:
    """Test Bedrock runtime client creation."""

    def test_get_bedrock_runtime_client_success(self):
        """Test the runtime client is created for the configured region."""
        with patch('boto3.Session') as mock_session_class:
            mock_session = Mock()
            mock_runtime_client = Mock()
            mock_session.client.return_value = mock_runtime_client
            mock_session_class.return_value = mock_session

            manager = AWSClientManager(profile="portfolio", region="us-east-1")
            client = manager.get_bedrock_runtime_client()

            assert client == mock_runtime_client
            mock_session.client.assert_called_once_with(
                "bedrock-runtime",
                region_name="us-east-1"
            )

    def test_get_bedrock_runtime_client_caching(self):
        """Test the runtime client is created only once."""
        with patch('boto3.Session') as mock_session_class:
            mock_session = Mock()
            mock_session.client.return_value = Mock()
            mock_session_class.return_value = mock_session

            manager = AWSClientManager(profile="portfolio", region="us-east-1")

            client1 = manager.get_bedrock_runtime_client()
            client2 = manager.get_bedrock_runtime_client()

            assert client1 is client2
            assert mock_session.client.call_count == 1

    def test_get_bedrock_runtime_client_failure(self):
        """Test client creation errors are wrapped in RuntimeError."""
        with patch('boto3.Session') as mock_session_class:
            mock_session = Mock()
            mock_session.client.side_effect = Exception("Client creation failed")
            mock_session_class.return_value = mock_session

            manager = AWSClientManager(profile="portfolio", region="us-east-1")

            with pytest.raises(RuntimeError) as exc_info:
                manager.get_bedrock_runtime_client()

            assert "Failed to create Bedrock Runtime client" in str(exc_info.value)


class TestCredentialVerification:
    """Test AWS credential verification."""

    def _manager_with_sts(self, mock_session_class, sts_client):
        mock_session = Mock()
        mock_session.client.return_value = sts_client
        mock_session_class.return_value = mock_session
        return AWSClientManager(profile="portfolio", region="us-east-1")

    def test_verify_credentials_success(self):
        """Test successful credential verification."""
        with patch('boto3.Session') as mock_session_class:
            mock_sts_client = Mock()
            mock_sts_client.get_caller_identity.return_value = {
                "Account": "123456789012",
                "Arn": "arn:aws:iam::123456789012:user/search"
            }
            manager = self._manager_with_sts(mock_session_class, mock_sts_client)

            assert manager.verify_credentials() is True
            mock_sts_client.get_caller_identity.assert_called_once()

    def test_verify_credentials_no_credentials(self):
        """Test NoCredentialsError propagates unchanged."""
        with patch('boto3.Session') as mock_session_class:
            mock_sts_client = Mock()
            mock_sts_client.get_caller_identity.side_effect = NoCredentialsError()
            manager = self._manager_with_sts(mock_session_class, mock_sts_client)

            with pytest.raises(NoCredentialsError):
                manager.verify_credentials()

    @pytest.mark.parametrize("code", ["InvalidClientTokenId", "SignatureDoesNotMatch", "ExpiredToken"])
    def test_verify_credentials_invalid(self, code):
        """Test invalid or expired credentials are reported as such."""
        with patch('boto3.Session') as mock_session_class:
            mock_sts_client = Mock()
            mock_sts_client.get_caller_identity.side_effect = _sts_error(code, "bad token")
            manager = self._manager_with_sts(mock_session_class, mock_sts_client)

            with pytest.raises(ClientError) as exc_info:
                manager.verify_credentials()

            error = exc_info.value
            assert error.response["Error"]["Code"] == code
            assert "invalid or expired" in error.response["Error"]["Message"]

    def test_verify_credentials_other_client_error(self):
        """Test other AWS errors keep their code."""
        with patch('boto3.Session') as mock_session_class:
            mock_sts_client = Mock()
            mock_sts_client.get_caller_identity.side_effect = _sts_error(
                "ServiceUnavailable", "Service is temporarily unavailable."
            )
            manager = self._manager_with_sts(mock_session_class, mock_sts_client)

            with pytest.raises(ClientError) as exc_info:
                manager.verify_credentials()

            error = exc_info.value
            assert error.response["Error"]["Code"] == "ServiceUnavailable"
            assert "Failed to verify credentials" in error.response["Error"]["Message"]

    def test_verify_credentials_unexpected_error(self):
        """Test unexpected errors are wrapped in RuntimeError."""
        with patch('boto3.Session') as mock_session_class:
            mock_sts_client = Mock()
            mock_sts_client.get_caller_identity.side_effect = Exception("Unexpected error")
            manager = self._manager_with_sts(mock_session_class, mock_sts_client)

            with pytest.raises(RuntimeError) as exc_info:
                manager.verify_credentials()

            assert "Unexpected error during credential verification" in str(exc_info.value)
