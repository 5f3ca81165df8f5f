"""taxos -- Generate TypeScript + axios API clients from Swagger / OpenAPI specs.

This package turns a Swagger 2.0 or OpenAPI 3.x document into a normalized
intermediate representation (IR) and renders that IR into TypeScript
sources: one module per URL path, one declaration file per reusable schema,
and a small shared ``apiContext`` module holding the axios instance.

Typical workflow::

    taxos convert swagger.json --api-name petstore   # write IR JSON files
    taxos generate --api-name petstore                # render TypeScript
    taxos build swagger.json --api-name petstore      # both in one go

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for configuration, input spec, and IR.
    config: Settings resolution (flags, environment, ``taxos.json``).
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes.
    output: stdout/stderr formatting system with Rich support.
    parser: Loading and dialect adapters (Swagger 2.0, OpenAPI 3.x).
    normalizer: The schema/operation resolution engine that builds the IR.
    writer: Splits the IR into per-path and per-schema JSON files.
    renderer: Renders IR JSON files into TypeScript with Jinja2.
"""

__version__ = "0.3.0"
