"""Recover a JSON payload from a model reply."""

FENCE = "```"


def extract_json(response: str) -> str:
    """Strip optional markdown code fencing from a model reply.

    The opening fence may carry a language tag. The last closing fence is used
    so that a body containing literal backticks is kept whole. Anything that
    does not look like a complete fenced block is returned trimmed and left for
    the JSON parser to reject.

    Args:
        response: Raw reply text from the model

    Returns:
        Candidate JSON text
    """
    trimmed = response.strip()

    if trimmed.startswith(FENCE):
        newline = trimmed.find("\n")
        if newline != -1:
            rest = trimmed[newline + 1 :]
            end = rest.rfind(FENCE)
            if end != -1:
                return rest[:end].strip()

    return trimmed
