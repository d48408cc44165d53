r"""atlas_exporter -- RIPE Atlas DNS and SSL certificate results as Prometheus metrics.

Turns measurement results into flat, labeled gauge samples for a
pull-based monitoring system. Imports flow strictly downward:

```text
                services        Exporter, collector, configuration
               /    |    \
            core translators utils    Infrastructure, result-to-metric rules, helpers
               \    |    /
                models          Pure frozen dataclasses (zero I/O)
```

Attributes:
    models: Measurement results, probe metadata, metric descriptors and
        samples. Standard library only.
    translators: ``SslCertTranslator`` and ``DnsTranslator``, pure
        functions of ``(result, probe)`` to samples.
    core: Structured logging, exceptions, YAML loading, aiohttp metrics
        endpoint.
    utils: Tolerant parsing helpers.
    services: Prometheus collector and the exporter service.

Note:
    For lightweight usage, import directly from subpackages::

        from atlas_exporter.models import MeasurementResult, Probe
        from atlas_exporter.translators import DnsTranslator
"""

__version__ = "1.0.0"
