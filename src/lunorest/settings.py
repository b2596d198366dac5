from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, SecretStr


class ProxySettings(BaseModel):
    enabled: bool = False
    url: str | None = None
    username: str | None = None
    password: SecretStr | None = None

    model_config = {"extra": "forbid"}


class LunoCredentials(BaseModel):
    api_key_id: SecretStr
    api_secret: SecretStr

    model_config = {"extra": "forbid"}


class LunoSettings(BaseModel):
    base_url: str = "https://api.mybitx.com/api"
    version: str = "1"
    timeout: float = Field(default=30.0, gt=0)
    credentials: LunoCredentials | None = None
    currency_aliases: dict[str, str] = Field(default_factory=dict)

    model_config = {"extra": "forbid"}


class Settings(BaseModel):
    env: str = "dev"
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    luno: LunoSettings = Field(default_factory=LunoSettings)

    model_config = {"extra": "forbid"}

    def redacted(self) -> dict[str, Any]:
        data = self.model_dump(mode="json")
        creds = data.get("luno", {}).get("credentials")
        if isinstance(creds, dict):
            if "api_key_id" in creds:
                creds["api_key_id"] = "***"
            if "api_secret" in creds:
                creds["api_secret"] = "***"
        proxy = data.get("proxy")
        if isinstance(proxy, dict) and proxy.get("password") is not None:
            proxy["password"] = "***"
        return data
