"""objfs test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of one module (in-memory store only).
- contract/     : Behavior every ObjectStoreClient / BlockIdGenerator must share,
                  parametrized over all implementations.
- integration/  : Real adapters: local directories, SQLite files, PostgreSQL
                  (Testcontainers), Alembic migrations, bootstrap wiring.
- functional/   : The ``objfs`` CLI driven through ``CliRunner``.
- e2e/          : CLI logging and flight-recorder behavior.
- fixtures/     : Shared pytest fixtures (loaded via ``pytest_plugins``).
- helpers/      : Shared utilities (no tests here).

Property-based tests live with the layer they exercise and carry
``@pytest.mark.property``.
"""
