"""
Install service — the Mintas install/uninstall pipeline.

Layers, leaf-first:
    detection/      host platform classification
    resolver/       latest-release asset lookup
    execution/      download, unpack, place, PATH registration, subprocesses
    backends.py     per-platform Placer + PathRegistrar selection
    orchestration/  the install/uninstall state machine

Import from the submodules directly; this package keeps no re-exports
so the adapters can depend on ``execution.subprocess_runner`` without
pulling the orchestrator in.
"""
