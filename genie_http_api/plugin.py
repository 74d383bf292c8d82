"""
Router plugin entry points.
Owns: Exposing the HTTP API both as an http plugin and a client plugin.

The router starts the http side with its web app and the client side
with itself. Both halves share one HttpApi, which only binds its
routes once it has seen both.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping

from fastapi import FastAPI

from genie_http_api.config import Settings
from genie_http_api.services.admitter import Router
from genie_http_api.services.http_api import HttpApi

Config = Settings | Mapping[str, Any] | None


@dataclass(frozen=True)
class ClientHandle:
    speak: Callable[[Any], Awaitable[None]]


class HttpApiPlugin:
    def __init__(self, http_api: HttpApi | None = None):
        self.http_api = http_api or HttpApi()

    def start_http(self, config: Config, app: FastAPI) -> None:
        self.http_api.set_config(config)
        self.http_api.set_app(app)

    def start_client(self, config: Config, router: Router) -> ClientHandle:
        self.http_api.set_config(config)
        self.http_api.set_router(router)
        return ClientHandle(speak=self.http_api.speak)
