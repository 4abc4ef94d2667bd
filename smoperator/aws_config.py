"""Loading AWS configuration with region and endpoint overrides."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from smoperator.common import DEFAULT_SAGEMAKER_ENDPOINT_ENV_KEY

# The endpoint identifier of the SageMaker service.
SAGEMAKER_ENDPOINTS_ID = "api.sagemaker"

WEB_IDENTITY_SOURCE = "AWS_WEB_IDENTITY_TOKEN_FILE"
ENV_SOURCE = "EnvConfigCredentials"

# Environment variable names for static keys: key id, secret key, session.
_STATIC_VARS = ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_SESSION_TOKEN")
_ROLE_VARS = ("AWS_WEB_IDENTITY_TOKEN_FILE", "AWS_ROLE_ARN")


@dataclass(frozen=True)
class Endpoint:
    """A resolved service endpoint."""

    url: str


@dataclass(frozen=True)
class CredentialsSource:
    """Where and how AWS credentials are obtained."""

    source: str
    access_key_id: str = ""
    secret_access_key: str = ""
    session_token: str = ""
    role_arn: str = ""
    web_identity_token_file: str = ""
    region: str = ""
    can_expire: bool = False

    def read_token(self) -> str:
        """Read the web identity token from its file."""
        if not self.web_identity_token_file:
            raise ValueError("no web identity token file is configured")
        return Path(self.web_identity_token_file).read_text().strip()


def _default_endpoint(service: str, region: str) -> Endpoint:
    suffix = "amazonaws.com.cn" if region.startswith("cn-") else "amazonaws.com"
    return Endpoint(url=f"https://{service}.{region}.{suffix}")


@dataclass
class AwsConfig:
    """Region, credentials and an optional custom SageMaker endpoint."""

    region: str = ""
    credentials: CredentialsSource | None = None
    sagemaker_endpoint: str | None = None

    def resolve_endpoint(self, service: str, region: str) -> Endpoint:
        """Resolve a service endpoint; SageMaker uses the custom one if set."""
        if service == SAGEMAKER_ENDPOINTS_ID and self.sagemaker_endpoint:
            return Endpoint(url=self.sagemaker_endpoint)
        return _default_endpoint(service, region)


class AwsConfigLoader:
    """Loads AWS config from an environment and applies overrides."""

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self.env = os.environ if env is None else env

    def _getenv(self, key: str) -> str:
        return self.env.get(key, "") or ""

    def _static_values(self) -> tuple[str, str, str]:
        key_id, key_value, session = (self._getenv(name) for name in _STATIC_VARS)
        return key_id, key_value, session

    def _load_default(self) -> AwsConfig:
        region = self._getenv("AWS_REGION") or self._getenv("AWS_DEFAULT_REGION")
        key_id, key_value, session = self._static_values()
        credentials = None
        if key_id and key_value:
            credentials = CredentialsSource(
                source=ENV_SOURCE,
                access_key_id=key_id,
                secret_access_key=key_value,
                session_token=session,
            )
        return AwsConfig(region=region, credentials=credentials)

    def install_web_identity_credentials(self, config: AwsConfig, region_override: str) -> None:
        """Use web identity credentials when static keys are missing.

        Applies only when the access key or secret key is unset and both a
        token file and a role ARN are given.
        """
        identity_file, role_arn = (self._getenv(name) for name in _ROLE_VARS)
        key_id, key_value, _ = self._static_values()
        keys_missing = not key_id or not key_value
        if keys_missing and identity_file and role_arn:
            config.credentials = CredentialsSource(
                source=WEB_IDENTITY_SOURCE,
                role_arn=role_arn,
                web_identity_token_file=identity_file,
                region=region_override,
                can_expire=True,
            )

    def load_aws_config_with_overrides(
        self, region_override: str, job_specific_endpoint_override: str | None
    ) -> AwsConfig:
        """Load the default config, set the region and pick the SageMaker endpoint.

        A non-empty job-specific endpoint wins; otherwise the endpoint named by
        the default-endpoint environment variable is used if set.
        """
        config = self._load_default()
        self.install_web_identity_credentials(config, region_override)
        config.region = region_override

        if job_specific_endpoint_override:
            config.sagemaker_endpoint = job_specific_endpoint_override
        elif operator_endpoint := self._getenv(DEFAULT_SAGEMAKER_ENDPOINT_ENV_KEY):
            config.sagemaker_endpoint = operator_endpoint
        return config