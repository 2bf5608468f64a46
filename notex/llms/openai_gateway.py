import asyncio
from typing import Any, Awaitable, Callable

from loguru import logger
from openai import AsyncOpenAI
from tenacity import AsyncRetrying, RetryCallState, RetryError, stop_after_attempt, wait_exponential

from notex.exceptions import GatewayError, NoContentError
from notex.llms.schemas import LLMMessage

JSON_ONLY_INSTRUCTION = (
    "\n\nIMPORTANT: Respond with valid JSON only. "
    "No markdown code blocks, no explanations outside the JSON."
)


class OpenAIGateway:
    """Chat client for any OpenAI-compatible endpoint with retry and backoff.

    A single instance is shared by every concurrent task; it holds no state
    besides its configuration and the underlying connection pool.
    """

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        model: str,
        max_retries: int = 3,
        timeout: float = 120.0,
        backoff_base: float = 1.0,
        client: Any | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the gateway.

        Args:
            base_url: API base URL, e.g. http://localhost:8080/v1 for llama-server
            api_key: API key, any value works for local servers
            model: Model name sent with every request
            max_retries: Total number of attempts per call, including the first
            timeout: Per-request timeout in seconds
            backoff_base: Delay before the second attempt; doubles for each further attempt
            client: Preconfigured client exposing ``chat.completions.create``
            sleep: Coroutine used to wait between attempts
        """
        self.model = model
        self.max_retries = max(1, max_retries)
        self.backoff_base = backoff_base
        # Retries are handled here, so the SDK's own retry loop is disabled
        self.client = client or AsyncOpenAI(
            base_url=base_url, api_key=api_key, timeout=timeout, max_retries=0
        )
        self._sleep = sleep

    async def send(self, system_prompt: str, user_prompt: str) -> str:
        messages = [
            LLMMessage(role="system", content=system_prompt),
            LLMMessage(role="user", content=user_prompt),
        ]
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.backoff_base, min=0),
            sleep=self._sleep,
            after=self._log_failed_attempt,
            before_sleep=self._log_backoff,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    content = await self._chat_once(messages)
                    if attempt.retry_state.attempt_number > 1:
                        logger.debug(f"Succeeded on attempt {attempt.retry_state.attempt_number}")
                    return content
        except RetryError as e:
            last_error = e.last_attempt.exception()
            raise GatewayError(self.max_retries, last_error) from last_error

        raise GatewayError(self.max_retries, None)

    async def send_json(self, system_prompt: str, user_prompt: str) -> str:
        return await self.send(system_prompt + JSON_ONLY_INSTRUCTION, user_prompt)

    async def _chat_once(self, messages: list[LLMMessage]) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[m.model_dump() for m in messages],
        )
        if not response.choices:
            raise NoContentError()
        content = response.choices[0].message.content
        if not content:
            raise NoContentError()
        return content

    def _log_failed_attempt(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(f"Attempt {retry_state.attempt_number}/{self.max_retries} failed: {error}")

    @staticmethod
    def _log_backoff(retry_state: RetryCallState) -> None:
        delay = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.debug(f"Retrying in {delay:.1f}s...")
