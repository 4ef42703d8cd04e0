from __future__ import annotations

import importlib

import pytest


@pytest.mark.parametrize(
    "module_name",
    [
        "smart_task_ai.ui.analytics",
        "smart_task_ai.ui.assistant",
        "smart_task_ai.ui.auth",
        "smart_task_ai.ui.common",
        "smart_task_ai.ui.dashboard",
        "smart_task_ai.ui.planner",
        "smart_task_ai.ui.tasks",
    ],
)
def test_ui_modules_import(module_name: str) -> None:
    module = importlib.import_module(module_name)

    assert module.__all__


def test_app_exposes_main() -> None:
    app = importlib.import_module("app")

    assert callable(app.main)
    assert len(app.TAB_LABELS) == 5
