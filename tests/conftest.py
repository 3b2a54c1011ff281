from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from prestospec.parameters.template import get_template_cache

if TYPE_CHECKING:
    from collections.abc import Iterator

here = Path(__file__).parent
root_path = here.parent


@pytest.fixture(autouse=True)
def _clear_template_cache() -> Iterator[None]:
    yield
    get_template_cache().clear()
