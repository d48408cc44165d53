"""atlas_exporter exception hierarchy.

The translators never raise for malformed measurement data: decode and
parse failures degrade to documented defaults instead. These exceptions
cover the outer layers only, where a failure should stop start-up or be
reported at the CLI boundary.

Exception hierarchy:

```text
AtlasExporterError (base -- never raised directly)
├── ConfigurationError      -- config validation, missing keys, bad YAML
└── ResultError             -- unreadable result or probe files
```

See Also:
    [load_config()][atlas_exporter.services.configs.load_config]: Raises
        [ConfigurationError][atlas_exporter.core.exceptions.ConfigurationError].
    [Exporter][atlas_exporter.services.exporter.Exporter]: Raises
        [ResultError][atlas_exporter.core.exceptions.ResultError] when input
        files cannot be read.
"""

from __future__ import annotations


class AtlasExporterError(Exception):
    """Base exception for all atlas_exporter errors.

    Never raised directly -- always use a specific subclass.
    """


class ConfigurationError(AtlasExporterError):
    """Invalid or missing configuration (YAML, CLI flags)."""


class ResultError(AtlasExporterError):
    """A result or probe file could not be read or is not a JSON list of documents."""
