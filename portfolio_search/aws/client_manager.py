"""AWS session and Bedrock runtime client management."""

import logging
from typing import Optional

import boto3
from botocore.exceptions import ClientError, NoCredentialsError, ProfileNotFound

from ..utils.logging import get_logger, log_with_context


logger = get_logger("AWSClientManager")

BEDROCK_RUNTIME_SERVICE = "bedrock-runtime"

# STS error codes meaning the caller's keys are unusable
INVALID_CREDENTIAL_CODES = frozenset({"InvalidClientTokenId", "SignatureDoesNotMatch", "ExpiredToken"})


class AWSClientManager:
    """
    Single boto3 session shared by the Bedrock adapters.

    A named profile is used when configured, the default credential chain
    otherwise. The runtime client is created lazily and reused.
    """

    def __init__(self, profile: Optional[str], region: str):
        self.profile = profile
        self.region = region
        self._bedrock_runtime_client = None
        self._session = self._create_session()

    def _create_session(self) -> boto3.Session:
        """
        Raises:
            ValueError: If the named profile does not exist
            RuntimeError: If the session cannot be created
        """
        session_args = {"region_name": self.region}
        if self.profile:
            session_args["profile_name"] = self.profile

        log_with_context(
            logger,
            logging.INFO,
            "Initializing AWS session",
            context={"profile": self.profile or "default chain", "region": self.region}
        )

        try:
            return boto3.Session(**session_args)
        except ProfileNotFound as e:
            logger.error(
                "AWS profile not found",
                exc_info=True,
                extra={"context": {"profile": self.profile}}
            )
            raise ValueError(
                f"AWS profile '{self.profile}' not found. Check your ~/.aws/credentials file."
            ) from e
        except Exception as e:
            logger.error(
                "Failed to initialize AWS session",
                exc_info=True,
                extra={"context": {"error": str(e)}}
            )
            raise RuntimeError(f"Failed to initialize AWS session: {str(e)}") from e

    def get_bedrock_runtime_client(self):
        """
        Client used for Converse (text) and InvokeModel (embeddings).

        Raises:
            RuntimeError: If client creation fails
        """
        if self._bedrock_runtime_client is not None:
            return self._bedrock_runtime_client

        try:
            self._bedrock_runtime_client = self._session.client(
                BEDROCK_RUNTIME_SERVICE,
                region_name=self.region
            )
        except Exception as e:
            logger.error(
                "Failed to create Bedrock Runtime client",
                exc_info=True,
                extra={"context": {"region": self.region, "error": str(e)}}
            )
            raise RuntimeError(f"Failed to create Bedrock Runtime client: {str(e)}") from e

        logger.info("Bedrock Runtime client created", extra={"context": {"region": self.region}})
        return self._bedrock_runtime_client

    def verify_credentials(self) -> bool:
        """
        Check the credentials with STS GetCallerIdentity before serving.

        Raises:
            NoCredentialsError: If no credentials are found
            ClientError: With a clearer message if STS rejects the call
            RuntimeError: For any other failure
        """
        try:
            identity = self._session.client("sts").get_caller_identity()
        except NoCredentialsError:
            logger.error("No AWS credentials found", exc_info=True)
            raise
        except ClientError as e:
            error = e.response.get("Error", {})
            error_code = error.get("Code", "Unknown")
            error_message = error.get("Message", str(e))

            log_with_context(
                logger,
                logging.ERROR,
                "AWS credential verification failed",
                context={"error_message": error_message},
                error_code=error_code
            )

            if error_code in INVALID_CREDENTIAL_CODES:
                message = f"AWS credentials are invalid or expired. Original error: {error_message}"
            else:
                message = f"Failed to verify credentials: {error_message}"
            raise ClientError({"Error": {"Code": error_code, "Message": message}}, "GetCallerIdentity") from e
        except Exception as e:
            logger.error(
                "Unexpected error during credential verification",
                exc_info=True,
                extra={"context": {"error": str(e)}}
            )
            raise RuntimeError(f"Unexpected error during credential verification: {str(e)}") from e

        log_with_context(
            logger,
            logging.INFO,
            "AWS credentials verified",
            context={"account_id": identity.get("Account"), "arn": identity.get("Arn")}
        )
        return True
