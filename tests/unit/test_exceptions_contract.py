"""Contract tests for the newsframes exception hierarchy.

Verifies that:
1. Every error derives from NewsframesError and carries a stable code
2. Build-time and run-time errors are kept apart
3. Run errors carry the partial state for diagnostics
"""

from __future__ import annotations

import pytest

from newsframes.core.exceptions import (
    ChannelError,
    ConfigurationError,
    NewsframesError,
    PipelineRunError,
    StepLimitExceededError,
    StorageError,
)
from newsframes.modules.models.types import ModelConfigurationError, ModelContentError, ModelError


@pytest.mark.parametrize(
    "exc_type",
    [
        ConfigurationError,
        ChannelError,
        StorageError,
        PipelineRunError,
        StepLimitExceededError,
        ModelError,
        ModelContentError,
        ModelConfigurationError,
    ],
)
def test_errors_share_one_root_and_have_codes(exc_type) -> None:
    assert issubclass(exc_type, NewsframesError)
    code = getattr(exc_type, "code", None)
    assert isinstance(code, str) and code.strip()


def test_codes_are_unique_per_family() -> None:
    codes = [
        NewsframesError.code,
        ConfigurationError.code,
        ChannelError.code,
        StorageError.code,
        PipelineRunError.code,
        StepLimitExceededError.code,
        ModelError.code,
        ModelConfigurationError.code,
    ]
    assert len(codes) == len(set(codes))


def test_configuration_errors_are_not_run_errors() -> None:
    assert not issubclass(ConfigurationError, PipelineRunError)
    assert not issubclass(StorageError, PipelineRunError)


def test_step_limit_error_carries_partial_state() -> None:
    err = StepLimitExceededError(3, partial_state={"input_headline": "h"})
    assert isinstance(err, PipelineRunError)
    assert err.limit == 3
    assert err.partial_state == {"input_headline": "h"}
    assert "3" in str(err)


def test_partial_state_is_copied() -> None:
    state = {"a": 1}
    err = PipelineRunError("failed", partial_state=state, step_id="s1")
    state["a"] = 2
    assert err.partial_state == {"a": 1}
    assert err.step_id == "s1"
