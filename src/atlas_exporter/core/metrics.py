"""
Prometheus HTTP exposition for the exporter.

[MetricsServer][atlas_exporter.core.metrics.MetricsServer] binds an aiohttp
application that renders a ``prometheus_client`` registry on every GET.
Rendering runs the registered collectors, which call the translators, so
each scrape reflects the results stored at that moment.

The server is an async context manager:

```python
async with MetricsServer(MetricsConfig(port=9400), registry) as server:
    await shutdown.wait()
```

[MetricsConfig][atlas_exporter.core.metrics.MetricsConfig] is embedded in
[ExporterConfig][atlas_exporter.services.configs.ExporterConfig] under the
``metrics`` key.
"""

from __future__ import annotations

from types import TracebackType
from typing import Self

from aiohttp import web
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, CollectorRegistry, generate_latest
from pydantic import BaseModel, Field


class MetricsConfig(BaseModel):
    """Where the scrape endpoint listens.

    Bind ``host`` to ``"0.0.0.0"`` when Prometheus scrapes from another
    container or host.
    """

    port: int = Field(default=9400, ge=1024, le=65535, description="Scrape endpoint port")
    host: str = Field(default="127.0.0.1", description="Scrape endpoint bind address")
    path: str = Field(default="/metrics", pattern=r"^/", description="Scrape endpoint path")


class MetricsServer:
    """aiohttp server answering scrapes with a registry's exposition text.

    Args:
        config: Bind address, port and path.
        registry: Registry rendered on each request. Defaults to the
            ``prometheus_client`` global registry.
    """

    def __init__(self, config: MetricsConfig, registry: CollectorRegistry = REGISTRY) -> None:
        self._config = config
        self._registry = registry
        self._runner: web.AppRunner | None = None

    @property
    def config(self) -> MetricsConfig:
        return self._config

    @property
    def is_running(self) -> bool:
        return self._runner is not None

    @property
    def url(self) -> str:
        """Scrape URL derived from the configuration."""
        return f"http://{self._config.host}:{self._config.port}{self._config.path}"

    async def start(self) -> None:
        """Bind the listening socket and start answering scrapes.

        Raises:
            OSError: If the address cannot be bound (e.g. port in use).
        """
        app = web.Application()
        app.router.add_get(self._config.path, self._render)

        runner = web.AppRunner(app, access_log=None)
        await runner.setup()
        self._runner = runner
        await web.TCPSite(runner, self._config.host, self._config.port).start()

    async def stop(self) -> None:
        """Close the listener. Safe to call more than once or before ``start()``."""
        runner, self._runner = self._runner, None
        if runner is not None:
            await runner.cleanup()

    async def __aenter__(self) -> Self:
        try:
            await self.start()
        except OSError:
            await self.stop()
            raise
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.stop()

    async def _render(self, _request: web.Request) -> web.Response:
        return web.Response(
            body=generate_latest(self._registry),
            headers={"Content-Type": CONTENT_TYPE_LATEST},
        )
