"""Pydantic models for claw.bundly.fun responses."""

from pydantic import BaseModel


class ClawAgentSession(BaseModel):
    """register / login response. Only ``api_key`` is relied on."""

    api_key: str = ""

    model_config = {"extra": "allow"}
