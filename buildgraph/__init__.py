"""
buildgraph Package

Directory Structure:
├── domain/            # Entities, errors, events and the output path policy
├── application/       # Project graph construction and validation, event handlers
├── schemas/           # Pydantic models for cleanup results
├── storage/           # Output tree cleanup
│   ├── interface.py   # OutputCleaner abstraction
│   └── filesystem.py  # Local filesystem sweep
├── infrastructure/    # Project declaration file loading
├── services/          # Orchestrator facade
├── config.py          # Settings (BUILDGRAPH_* environment, .env)
└── cli.py             # `buildgraph clean`

Every project writes to ``<output root>/<project name>``. Projects are
evaluated in a deterministic order where each comes after the projects it
declares as evaluation dependencies (and after the primary project, if one
is configured). ``clean`` removes the whole output root, best effort.
"""
