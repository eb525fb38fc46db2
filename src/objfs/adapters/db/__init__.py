"""SQL database plumbing: engine factory, shared metadata, migrations."""
