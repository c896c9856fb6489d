from pathlib import Path

import pytest

from tests.infrastructure.view_builders import write_views


@pytest.fixture
def views_project(tmp_path: Path) -> Path:
    """
    Small project: a layout, a page extending it, a partial and a plain view.
    """
    write_views(tmp_path, {
        "layouts.app": (
            "<html><title>${yield:title}</title>"
            "{% include partials.nav %}"
            "<main>${yield:body}</main>"
            "{% yield footer \"(c) site\" %}</html>"
        ),
        "partials.nav": "<nav>${site}</nav>",
        "pages.home": (
            "{% section title %}Home{% overwrite %}"
            "{% section body %}Hi ${user.name}{% overwrite %}"
            "{% extends layouts.app %}"
        ),
        "plain": "just text",
    })
    return tmp_path


@pytest.fixture(autouse=True)
def _clean_vw_env(monkeypatch):
    # Overrides from the developer's shell would change config defaults
    for key in ("VW_VIEWS_DIR", "VW_CACHE", "VW_MAX_CHAIN_DEPTH", "VW_DEBUG"):
        monkeypatch.delenv(key, raising=False)
