"""Tests for cache key builders."""

import pytest

from app.infrastructure.cache.keys import tenant_code_key, tenant_header_key, tenant_key


def test_tenant_keys() -> None:
    assert tenant_key("t1") == "tenant:id:t1"
    assert tenant_code_key("cabinet-1") == "tenant:code:cabinet-1"
    assert tenant_header_key("t1") == "tenant:header:t1"


@pytest.mark.parametrize("builder", [tenant_key, tenant_code_key, tenant_header_key])
def test_separator_in_component_is_rejected(builder) -> None:
    with pytest.raises(ValueError, match="separator"):
        builder("a:b")
