import logging

import openai
from openai import OpenAI

from .errors import UpstreamFailure

logger = logging.getLogger(__name__)

PROMPT = 'Write a helpful task description for: "{title}"'


class OpenAIDescriptionGenerator:
    """Генерация описания задачи по заголовку через chat completions.

    Клиент создаётся лениво, чтобы приложение поднималось без OPENAI_API_KEY.
    """

    def __init__(self, api_key: str = "", model: str = "gpt-3.5-turbo", client=None):
        self.api_key = api_key
        self.model = model
        self._client = client

    def _get_client(self):
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key or None, max_retries=0)
        return self._client

    def generate(self, title: str) -> str:
        try:
            chat = self._get_client().chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": PROMPT.format(title=title)}],
            )
        except openai.OpenAIError as exc:
            logger.error("OpenAI error: %s", exc)
            raise UpstreamFailure(reason=str(exc))

        message = chat.choices[0].message if chat.choices else None
        content = getattr(message, "content", None)

        if not content or not content.strip():
            logger.error("OpenAI вернул пустой ответ для %r", title)
            raise UpstreamFailure(reason="empty completion")
        return content.strip()
