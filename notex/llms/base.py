from typing import Protocol


class ModelGateway(Protocol):
    async def send(self, system_prompt: str, user_prompt: str) -> str:
        """Send a system and user prompt pair and return the raw reply text."""
        ...

    async def send_json(self, system_prompt: str, user_prompt: str) -> str:
        """Like ``send`` but instructs the model to answer with bare JSON."""
        ...
