"""Basic project scaffolding tests."""

import importlib


def test_package_importable() -> None:
    """Verify the top-level package is importable."""
    import seabattle

    assert seabattle.__version__


def test_submodules_exist() -> None:
    """All primary submodules should be importable."""
    modules = [
        "seabattle.engine",
        "seabattle.engine.board",
        "seabattle.engine.player",
        "seabattle.engine.game",
        "seabattle.ai",
        "seabattle.telemetry",
        "seabattle.cli",
    ]

    for module in modules:
        assert importlib.import_module(module) is not None
