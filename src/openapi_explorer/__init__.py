"""openapi-explorer -- Cross-reference the fields, schemas and endpoints of an OpenAPI document.

The package loads an OpenAPI 3.x document, resolves its internal ``$ref``
pointers, and builds a bidirectional index between **fields** (leaf property
names), **schemas** (named component schemas) and **endpoints** (one HTTP
method on one path). A filter/navigation state machine sits on top of the
index and drives the interactive browser.

Typical workflow::

    openapi-explorer --spec petstore.json fields
    openapi-explorer --spec petstore.json field id
    openapi-explorer --spec petstore.json browse

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for the document, schema tree, index and config.
    parser: Document retrieval and ``$ref`` resolution.
    index: Field extraction, the cross-reference indexer and index analysis.
    navigation: Fuzzy ranking, navigation state and key decoding.
    validation: Structural warnings about a built index.
    session: Snapshots and the reload orchestrator.
    config: XDG-aware configuration and document source resolution.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
