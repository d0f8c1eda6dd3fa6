"""
LM Studio Provider Factory

``create_lmstudio()`` binds provider-level settings and an engine client and
returns a callable that builds chat models:

    lmstudio = create_lmstudio({"contextOverflowPolicy": "rollingWindow"}, client=client)
    model = lmstudio("qwen2.5-7b-instruct")
    result = await model.do_generate(CallOptions(prompt=[...]))

Without a ready client, ``client_factory`` is called once with the
``baseURL`` setting (``None`` means the local default instance):

    lmstudio = create_lmstudio({"baseURL": "ws://gpu-box:1234"}, client_factory=LMStudioClient)
"""

from collections.abc import Mapping
from typing import Any

from loguru import logger
from pydantic import ValidationError

from .chat_model import LMStudioChatLanguageModel
from .engine.protocol import ClientFactory, EngineClient
from .errors import InvalidArgumentError
from .settings import LMStudioChatSettings


PROVIDER_NAME = "lmstudio"


class LMStudioProvider:
    def __init__(self, settings: LMStudioChatSettings, client: EngineClient):
        self.settings = settings
        self.client = client

    def __call__(self, model_id: str) -> LMStudioChatLanguageModel:
        return self.language_model(model_id)

    def language_model(self, model_id: str) -> LMStudioChatLanguageModel:
        return LMStudioChatLanguageModel(
            model_id=model_id,
            settings=self.settings,
            client=self.client,
            provider=PROVIDER_NAME,
        )

    def chat(self, model_id: str) -> LMStudioChatLanguageModel:
        return self.language_model(model_id)


def create_lmstudio(
    settings: LMStudioChatSettings | Mapping[str, Any] | None = None,
    *,
    client: EngineClient | None = None,
    client_factory: ClientFactory | None = None,
) -> LMStudioProvider:
    """
    Create an LM Studio provider.

    Args:
        settings: Provider-level defaults. A mapping is validated as
            ``LMStudioChatSettings`` (camelCase or snake_case keys).
        client: Engine client used to load models
        client_factory: Builds the client from ``settings.base_url`` when
            ``client`` is not given

    Raises:
        InvalidArgumentError: settings mapping failed validation, or not
            exactly one of ``client`` and ``client_factory`` was given
    """
    if settings is None:
        settings = LMStudioChatSettings()
    elif not isinstance(settings, LMStudioChatSettings):
        try:
            settings = LMStudioChatSettings.model_validate(dict(settings))
        except ValidationError as e:
            issue = e.errors()[0]
            path = ".".join(str(loc) for loc in issue["loc"])
            logger.error(f"[PROVIDER] Invalid settings at {path}: {issue['msg']}")
            raise InvalidArgumentError(
                parameter=f"settings.{path}",
                value=issue.get("input"),
                message=issue["msg"],
                path=path,
            ) from e

    if (client is None) == (client_factory is None):
        raise InvalidArgumentError(
            parameter="client",
            value=None,
            message="Pass exactly one of client or client_factory",
        )
    if client is None:
        logger.debug(f"[PROVIDER] Building engine client for base_url={settings.base_url!r}")
        client = client_factory(settings.base_url)

    logger.debug(f"[PROVIDER] Created {PROVIDER_NAME} provider")
    return LMStudioProvider(settings=settings, client=client)
